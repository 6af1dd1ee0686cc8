"""Shared schema base classes for API responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ORMModel(BaseModel):
    """Base model that reads attributes straight off SQLAlchemy rows."""

    model_config = {"from_attributes": True}


class Timestamped(ORMModel):
    """Common identifier and timestamps for persisted resources."""
    id: UUID
    created_at: datetime
    updated_at: datetime


def require_text(value: str, label: str) -> str:
    """Reject blank strings while keeping the caller's spacing intact."""
    if not value.strip():
        raise ValueError(f"{label} is required")
    return value
