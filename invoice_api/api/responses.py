# invoice_api/api/responses.py

from typing import Any

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from invoice_api.errors import ApiError, MethodNotAllowed


def write_response(status_code: int, data: Any = None) -> Response:
    if status_code == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def write_error(exc: ApiError) -> JSONResponse:
    headers = None
    if isinstance(exc, MethodNotAllowed):
        headers = {"Allow": ", ".join(exc.allowed)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )
