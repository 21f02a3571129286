"""
Content rendering for response payloads.
"""

import dataclasses
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


def to_jsonable(data: Any) -> Any:
    """Convert Pydantic models, dataclasses and friends to JSON-compatible data."""
    if hasattr(data, "model_dump"):
        # Single Pydantic model
        return data.model_dump(mode="json")
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: to_jsonable(getattr(data, f.name)) for f in dataclasses.fields(data)}
    if isinstance(data, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    if isinstance(data, Enum):
        return to_jsonable(data.value)
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    if isinstance(data, (UUID, Decimal)):
        return str(data)
    return data


class ContentRenderer:
    """Base class for content renderers."""

    def __init__(self, media_type: str):
        self.media_type = media_type

    def render(self, data: Any) -> str:
        """Render the data as this content type."""
        raise NotImplementedError


class JSONRenderer(ContentRenderer):
    """JSON content renderer."""

    def __init__(self):
        super().__init__("application/json")

    def render(self, data: Any) -> str:
        """Render data as JSON."""
        return json.dumps(to_jsonable(data))
