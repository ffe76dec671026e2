"""Response envelopes shared by all routers."""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder


def success(data: Any = None) -> dict:
    body = {"message": "Success"}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def failure(message: str, errors: Optional[list[str]] = None) -> dict:
    return {"message": message, "errors": errors or []}
