import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.core.errors import PortfolioError
from portfolio.schemas.envelope import error_response

log = logging.getLogger(__name__)

_HTTP_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def register_exception_handlers(app: FastAPI) -> None:
    """Render every handled failure in the response envelope."""

    @app.exception_handler(PortfolioError)
    async def portfolio_error_handler(request: Request, exc: PortfolioError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request payload")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else None
        if not message or message == "Not Found" or message == "Method Not Allowed":
            message = _HTTP_MESSAGES.get(exc.status_code, "Request failed")
        return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))
