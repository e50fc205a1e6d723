import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.exceptions import CorruptRecordError, ImmutableFieldError
from .response import error as resp_error

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content=resp_error(code=str(exc.status_code), message=str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=resp_error(code="validation_error", message="Invalid request", details=jsonable_encoder(exc.errors())),
        )

    # invalid priority/status assigned on a notification
    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content=resp_error(
                code="validation_error",
                message="Invalid notification",
                details=jsonable_encoder(exc.errors(include_url=False, include_context=False)),
            ),
        )

    @app.exception_handler(ImmutableFieldError)
    async def immutable_field_handler(request: Request, exc: ImmutableFieldError):
        return JSONResponse(status_code=422, content=resp_error(code="immutable_field", message=str(exc)))

    @app.exception_handler(CorruptRecordError)
    async def corrupt_record_handler(request: Request, exc: CorruptRecordError):
        logger.error("Corrupt record at %s: %s", exc.key, exc.reason)
        return JSONResponse(status_code=500, content=resp_error(code="corrupt_record", message="Stored record is unreadable"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=resp_error(code="internal_error", message="Internal server error"))
