"""
Error response models for restbinder.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response model.

    This is the body ``RestBinder.execute`` sends when a request cannot be
    resolved or its handler fails.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Method PUT not allowed for /items/42 (allowed: GET)",
                "method": "PUT",
                "path": "/items/42",
            }
        }
    )

    error: str = Field(
        ...,
        description="Human-readable error message describing what went wrong"
    )

    details: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Additional structured details about the error"
    )

    method: Optional[str] = Field(
        None,
        description="HTTP method of the failed request"
    )

    path: Optional[str] = Field(
        None,
        description="Path of the failed request"
    )

    def model_dump_json(self, **kwargs):
        """Override to drop unset fields by default."""
        kwargs.setdefault("exclude_none", True)
        return super().model_dump_json(**kwargs)
