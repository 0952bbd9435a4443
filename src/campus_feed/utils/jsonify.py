from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def jsonify(obj: Any) -> Any:
    """Convert models (and containers of them) to JSON-serializable values.

    - Calls ``model_dump(mode="json")`` on BaseModel instances so enums and
      ``datetime`` fields serialize cleanly.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, dict):
        return {k: jsonify(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [jsonify(v) for v in obj]
    return obj
