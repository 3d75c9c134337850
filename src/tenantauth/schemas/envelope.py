"""Uniform response envelope.

Every response — success or error — has the same outer shape:

    {"statusCode": 200, "data": {...}, "message": "...", "success": true}

Errors add an "errors" list and always carry data=null.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status_code: int = Field(alias="statusCode")
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True

    model_config = ConfigDict(populate_by_name=True)


class ApiErrorResponse(BaseModel):
    status_code: int = Field(alias="statusCode")
    data: None = None
    message: str
    success: bool = False
    errors: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def envelope(status_code: int, data: Any = None, message: str = "Success") -> dict:
    """Build a success envelope. data may be a pydantic model or plain JSON."""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, mode="json")
    return ApiResponse[Any](
        status_code=status_code, data=data, message=message, success=status_code < 400
    ).model_dump(by_alias=True, mode="json")


def error_envelope(status_code: int, message: str, errors: Optional[list] = None) -> dict:
    return ApiErrorResponse(
        status_code=status_code, message=message, errors=errors or []
    ).model_dump(by_alias=True, mode="json")
