from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.responses import Response

from talentscout.api.responses import error_response
from talentscout.services.search.errors import SearchValidationError

API_PREFIX = "/api/"
INVALID_SEARCH_REQUEST = "invalid_search_request"

# Only routing failures reach the API as bare HTTP errors.
_HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


async def _search_validation_error(request: Request, exc: SearchValidationError) -> Response:
    return error_response(
        request,
        status_code=400,
        code=INVALID_SEARCH_REQUEST,
        message=str(exc),
        details={"field": exc.field},
    )


async def _query_validation_error(request: Request, exc: RequestValidationError) -> Response:
    """Malformed query parameters share the 400 of a rejected search."""
    if not request.url.path.startswith(API_PREFIX):
        return await request_validation_exception_handler(request, exc)
    return error_response(
        request,
        status_code=400,
        code=INVALID_SEARCH_REQUEST,
        message="Request validation failed.",
        details=exc.errors(),
    )


async def _http_error(request: Request, exc: HTTPException) -> Response:
    if not request.url.path.startswith(API_PREFIX):
        return await http_exception_handler(request, exc)
    return error_response(
        request,
        status_code=exc.status_code,
        code=_HTTP_ERROR_CODES.get(exc.status_code, "error"),
        message=str(exc.detail or "Request failed."),
    )


def register_api_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SearchValidationError, _search_validation_error)
    app.add_exception_handler(RequestValidationError, _query_validation_error)
    app.add_exception_handler(HTTPException, _http_error)
