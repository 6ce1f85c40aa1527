"""
Error bodies.

Handlers raise HTTPException with a dict detail built by api_error(); the
exception handlers registered in main.py flatten it so clients always receive
{"message": ..., "error": ...} at the top level.
"""
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder


def api_error(status_code: int, message: str, error: Optional[Any] = None, **extra: Any) -> HTTPException:
    detail = {"message": message}
    if error is not None:
        detail["error"] = error
    detail.update(extra)
    return HTTPException(status_code=status_code, detail=detail)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body), headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"message": "Invalid request", "error": exc.errors()}),
    )
