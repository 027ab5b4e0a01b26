from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ParentGoal(str, Enum):
    skill_development = "skill-development"
    social_connection = "social-connection"
    physical_activity = "physical-activity"
    creative_expression = "creative-expression"
    academic_enrichment = "academic-enrichment"
    fun_adventure = "fun-adventure"


class DurationPreference(str, Enum):
    half_day = "half-day"
    full_day = "full-day"
    week = "week"
    multi_week = "multi-week"


class LocationType(str, Enum):
    local = "local"
    international = "international"


class MatchLabel(str, Enum):
    perfect = "perfect"
    great = "great"
    good = "good"


# ── Catalog records ──────────────────────────────────────────────────────


class CampCategory(BaseModel):
    id: str
    name: str
    slug: str = ""


class AmenityGroup(BaseModel):
    category: str | None = None
    items: list[str] = Field(default_factory=list)


class Camp(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    age_min: int | None = None
    age_max: int | None = None
    price: float = Field(default=0.0, ge=0.0)
    early_bird_price: float | None = Field(default=None, ge=0.0)
    early_bird_deadline: date | None = None
    capacity: int | None = None
    enrolled_count: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    featured: bool = False
    categories: list[CampCategory] = Field(default_factory=list)
    amenities: list[AmenityGroup] = Field(default_factory=list)
    location: str | None = None
    status: str = "published"
    created_at: datetime | None = None
    organisation_name: str | None = None

    @property
    def available_spots(self) -> int | None:
        """Remaining places, or ``None`` when capacity is unknown."""
        if self.capacity is None:
            return None
        return self.capacity - (self.enrolled_count or 0)

    @property
    def duration_days(self) -> int | None:
        if self.start_date is None or self.end_date is None:
            return None
        delta = abs(self.end_date - self.start_date)
        return math.ceil(delta.total_seconds() / 86400)

    @property
    def category_ids(self) -> list[str]:
        return [c.id for c in self.categories]


# ── Quiz preferences ─────────────────────────────────────────────────────


class BudgetRange(BaseModel):
    min: float = Field(default=0.0, ge=0.0)
    max: float = Field(..., ge=0.0)


class SpecialNeeds(BaseModel):
    dietary: list[str] = Field(default_factory=list)
    accessibility: list[str] = Field(default_factory=list)


class LocationPreference(BaseModel):
    type: LocationType
    county: str | None = None


class Preferences(BaseModel):
    child_age: int | None = Field(default=None, ge=0, le=25)
    parent_goals: list[ParentGoal] | None = None
    interests: list[str] = Field(default_factory=list)
    budget_range: BudgetRange | None = None
    duration: DurationPreference | None = None
    special_needs: SpecialNeeds | None = None
    location_preference: LocationPreference | None = None


class RecommendationRequest(Preferences):
    child_age: int = Field(..., ge=0, le=25)


# ── Engine output ────────────────────────────────────────────────────────


class ScoreResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)


class ScoredCamp(BaseModel):
    model_config = ConfigDict(frozen=True)

    camp: Camp
    score: int
    match_label: MatchLabel
    match_reasons: list[str] = Field(default_factory=list)
    ranking: int = 0


class RecommendationResponse(BaseModel):
    recommendations: list[ScoredCamp]


# ── Persistence payloads ─────────────────────────────────────────────────


class PersistenceResult(BaseModel):
    success: bool
    response_id: str | None = None
    error: str | None = None


class EmailUpdateRequest(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")


class ClickRequest(BaseModel):
    quiz_response_id: str = Field(..., min_length=1)
    camp_id: str = Field(..., min_length=1)
    ranking: int | None = None
    match_label: MatchLabel | None = None
