from starlette.responses import JSONResponse

from app.core.logger import logger
from app.core.responses import error_envelope


class ExceptionLoggingMiddleware:
    """
    ASGI middleware for exceptions no handler claimed. Logs the full stack
    trace with the request id and answers with the 500 error envelope.
    When the response has already started there is nothing left to send,
    so the exception is re-raised to the server.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        started = False

        async def send_wrapper(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            request_id = scope.get("request_id")
            logger.exception(
                "Unhandled exception in request",
                extra={
                    "request_id": request_id,
                    "method": scope.get("method"),
                    "path": scope.get("path"),
                },
            )
            if started:
                raise

            headers = {"x-request-id": request_id} if request_id else None
            response = JSONResponse(
                status_code=500,
                content=error_envelope("Internal server error"),
                headers=headers,
            )
            await response(scope, receive, send)
