# FILE: medicare/api/exception_handlers.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from medicare.api.response import err
from medicare.services.pdfs.errors import ReportError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
}


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request,
                                     exc: StarletteHTTPException
                                     ) -> JSONResponse:
        # exc.detail can be str/dict/list
        msg = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return err(msg=msg,
                   status_code=exc.status_code,
                   code=_HTTP_CODES.get(exc.status_code))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request,
                                           exc: RequestValidationError
                                           ) -> JSONResponse:
        return err(msg="Validation error",
                   status_code=422,
                   code="validation_error",
                   details=exc.errors())

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request,
                                       exc: ValidationError) -> JSONResponse:
        return err(msg="Validation error",
                   status_code=422,
                   code="validation_error",
                   details=exc.errors(include_url=False,
                                      include_context=False))

    @app.exception_handler(ReportError)
    async def report_error_handler(request: Request,
                                   exc: ReportError) -> JSONResponse:
        logger.warning("Report generation failed for %s: %s", request.url.path,
                       exc)
        return err(msg=str(exc), status_code=422, code="report_error")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request,
                                          exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method,
                         request.url.path)
        return err(msg="Internal server error",
                   status_code=500,
                   code="internal_error")
