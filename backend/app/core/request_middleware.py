import time

from app.core.logger import logger
from app.core.utils_logging import generate_request_id


class RequestLoggingMiddleware:
    """
    ASGI middleware that logs every HTTP request and its response,
    tags the response with an X-Request-ID header and records duration.
    The request id is stored on the scope so handlers and the audit
    hook can correlate their own log lines.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        request_id = generate_request_id()
        scope["request_id"] = request_id

        context = {
            "request_id": request_id,
            "method": scope.get("method", ""),
            "path": scope.get("path", ""),
        }

        start = time.perf_counter()
        logger.info("Incoming request", extra=context)

        response_status = {"code": None}

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                response_status["code"] = message.get("status", 0)

                # headers are a list of (name, value) byte pairs
                message["headers"] = list(message.get("headers", [])) + [
                    (b"x-request-id", request_id.encode("utf-8"))
                ]

                logger.info("Response start", extra={**context, "status_code": response_status["code"]})

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            # status_code stays None when the app raised before responding
            logger.info(
                "Request completed",
                extra={
                    **context,
                    "status_code": response_status["code"],
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
