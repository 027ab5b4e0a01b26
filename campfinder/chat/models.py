from __future__ import annotations

from pydantic import BaseModel, Field


class ExtractedPreferences(BaseModel):
    """What an LLM could read out of a parent's free-text message."""

    child_name: str | None = None
    child_age: int | None = None
    parent_goals: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    budget_tier: str | None = None
    duration: str | None = None
    dietary: list[str] = Field(default_factory=list)
    accessibility: list[str] = Field(default_factory=list)
    location_type: str | None = None
    county: str | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    missing_fields: list[str] = Field(default_factory=list)
