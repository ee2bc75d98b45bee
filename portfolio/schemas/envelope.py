from typing import Any, Optional
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portfolio.schemas.auth import UserOut


class Envelope(BaseModel):
    """Uniform body of every JSON response; unset fields are omitted."""
    success: bool
    message: Optional[str] = None
    token: Optional[str] = None
    user: Optional[UserOut] = None
    data: Optional[Any] = None


def envelope_response(status_code: int = 200, **fields) -> JSONResponse:
    body = Envelope(success=status_code < 400, **fields)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    body = Envelope(success=False, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )
