"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class OperationResult(BaseModel):
    """Outcome of a mutation that has no record to return."""

    entity_id: str = Field(..., description="Prefixed identifier of the affected record.")
