import logging
import json
import os
from logging.handlers import RotatingFileHandler
from datetime import datetime, timezone

from app.core.config import settings

LOG_DIR = settings.LOG_DIR
os.makedirs(LOG_DIR, exist_ok=True)

# record attributes copied into the JSON line when a caller passes them via `extra`
CONTEXT_FIELDS = (
    "request_id",
    "user_id",
    "resource_id",
    "action_type",
    "method",
    "path",
    "status_code",
    "duration_ms",
)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log = {
            "timestamp": datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z",
            "level": record.levelname,
            "service": "learnhub-backend",
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log[field] = str(getattr(record, field))

        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)

        return json.dumps(log)


logger = logging.getLogger("learnhub")
logger.setLevel(settings.LOG_LEVEL)

json_f = JSONFormatter()

file_handler = RotatingFileHandler(
    os.path.join(LOG_DIR, "app.json.log"),
    maxBytes=5 * 1024 * 1024,
    backupCount=5
)
file_handler.setFormatter(json_f)

console_handler = logging.StreamHandler()
console_handler.setFormatter(json_f)

if not logger.handlers:
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
