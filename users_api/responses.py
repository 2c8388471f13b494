"""JSON response writer"""
from typing import Any, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def write_json(payload: Any, status_code: int = 200,
               headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    """Serialize a model, list of models or dict with the given status.

    Status and headers are fixed on the response before the body is encoded,
    None-valued fields are left out of the body.
    """
    return JSONResponse(
        content=jsonable_encoder(payload, exclude_none=True),
        status_code=status_code,
        headers=dict(headers) if headers else None,
        media_type="application/json",
    )
