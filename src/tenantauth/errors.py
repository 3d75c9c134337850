"""Exception handlers — every error leaves the API in the same envelope.

Learn: Routes raise HTTPException with a plain string detail. These
handlers wrap it as {"statusCode", "data": null, "message", "success":
false, "errors"}. Request validation failures become 400 (not FastAPI's
default 422) because a missing or blank field is a plain client error.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tenantauth.schemas.envelope import error_envelope

logger = structlog.get_logger()


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    raw = exc.errors()
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in raw
    ]
    if any(err.get("type") == "missing" or "blank" in err.get("msg", "") for err in raw):
        message = "All fields are required"
    else:
        message = errors[0]["message"] if errors else "Invalid request"
    return JSONResponse(
        status_code=400,
        content=error_envelope(400, message, errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_envelope(500, "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
