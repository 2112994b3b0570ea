"""
Error envelope returned by the FastAPI integration.

Note: 'detail' is sanitized. Never expose the rejected path itself.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error: str = Field(..., description="Error category")
    detail: str = Field(..., description="Human-readable (sanitized) message")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
