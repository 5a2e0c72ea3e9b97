from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
    code: Optional[str] = None,
) -> JSONResponse:
    """
    Single envelope for every API response, crawler-facing or otherwise.

    ``status`` is "success" below 400 and "error" otherwise. Error responses
    carry a stable machine-readable ``code`` inside ``data`` so the crawler can
    tell a rejected batch from a transient failure.
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}
    if code is not None:
        data = {"code": code, **data}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
    )
