# backend/app/core/responses.py

"""
Response envelope and exception handlers.

Every response body is {"status": 1|0, "data": ..., "message": ...};
1 means success. Errors keep the same shape with status 0 and an HTTP
status code that reflects the failure class.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.exceptions import AppError, format_validation_errors
from app.core.logger import logger


def error_envelope(message: str, data: Any = None) -> dict:
    return {"status": 0, "data": data if data is not None else {}, "message": message}


def _error_response(status_code: int, message: str, data: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(error_envelope(message, data)))


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed: %s",
            exc.message,
            exc_info=exc,
            extra={"request_id": request.scope.get("request_id"), "path": request.url.path},
        )
    else:
        logger.info(
            "Request rejected: %s",
            exc.message,
            extra={
                "request_id": request.scope.get("request_id"),
                "path": request.url.path,
                "status_code": exc.status_code,
            },
        )
    return _error_response(exc.status_code, exc.message, exc.data)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc.errors())
    return _error_response(400, ", ".join(errors), {"errors": errors})


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, str(exc.detail))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
