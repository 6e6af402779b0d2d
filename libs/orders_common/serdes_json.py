from __future__ import annotations

import json
from typing import Union

from pydantic import ValidationError

from .models import OrderView


def serialize_view(view: OrderView) -> bytes:
    """
    Converts an OrderView to bytes (camelCase JSON) for a cache value.
    """
    return view.model_dump_json(by_alias=True).encode("utf-8")


def deserialize_view(raw: Union[bytes, bytearray, memoryview, str]) -> OrderView:
    """
    Converts a cached value back into an OrderView.
    Amount comes back as an exact Decimal, never through float.
    """
    try:
        payload = raw if isinstance(raw, str) else bytes(raw).decode("utf-8")
        data = json.loads(payload)
    except Exception as e:
        raise ValueError(f"Invalid JSON cache payload: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object (dict), got: {type(data).__name__}")

    try:
        return OrderView.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Cached order validation failed: {e}") from e
