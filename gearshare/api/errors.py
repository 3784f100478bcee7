# File: gearshare/api/errors.py

"""
Exception handlers turning application errors into JSON responses.

Validation failures always come back as a list of per-field messages:
    {"code": "validation_error", "message": "...", "field_errors": [{"field": ..., "message": ...}]}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gearshare.core.exceptions import FieldValidationError, GearShareError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "__root__"


def _field_message(error: dict[str, Any]) -> str:
    # Custom validators raise ValueError; show their text without pydantic's prefix
    if error.get("type") == "value_error" and "ctx" in error and "error" in error["ctx"]:
        return str(error["ctx"]["error"])
    return error.get("msg", "Invalid value.")


def field_errors_from_validation(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    return [
        {"field": _field_name(tuple(e.get("loc", ()))), "message": _field_message(e)}
        for e in errors
    ]


async def gearshare_error_handler(request: Request, exc: GearShareError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = FieldValidationError(field_errors_from_validation(exc.errors()))
    logger.info(
        "Validation failed for %s %s: %s",
        request.method,
        request.url.path,
        [fe["field"] for fe in error.field_errors],
    )
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder(error.to_dict()),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GearShareError, gearshare_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
