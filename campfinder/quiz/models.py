from __future__ import annotations

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..recommendations.models import (
    Camp,
    DurationPreference,
    LocationPreference,
    ParentGoal,
    ScoredCamp,
    SpecialNeeds,
)


class QuestionState(str, Enum):
    name = "NAME"
    age = "AGE"
    parent_goals = "PARENT_GOALS"
    interests = "INTERESTS"
    budget = "BUDGET"
    duration = "DURATION"
    special_needs = "SPECIAL_NEEDS"
    location = "LOCATION"
    processing = "PROCESSING"
    results = "RESULTS"


class BudgetTier(str, Enum):
    budget_friendly = "BUDGET_FRIENDLY"
    mid_range = "MID_RANGE"
    premium = "PREMIUM"
    luxury = "LUXURY"
    flexible = "FLEXIBLE"


class BudgetTierConfig(BaseModel):
    label: str
    description: str
    min_price: float
    max_price: float


BUDGET_TIERS: dict[BudgetTier, BudgetTierConfig] = {
    BudgetTier.budget_friendly: BudgetTierConfig(
        label="Budget-Friendly", description="Quality programs at accessible prices",
        min_price=0, max_price=500,
    ),
    BudgetTier.mid_range: BudgetTierConfig(
        label="Mid-Range", description="Popular choice for most families",
        min_price=500, max_price=1200,
    ),
    BudgetTier.premium: BudgetTierConfig(
        label="Premium", description="Specialized programs with extras",
        min_price=1200, max_price=2500,
    ),
    BudgetTier.luxury: BudgetTierConfig(
        label="Luxury", description="Exceptional, immersive experiences",
        min_price=2500, max_price=10000,
    ),
    BudgetTier.flexible: BudgetTierConfig(
        label="I'm Flexible", description="Focus on best matches regardless of price",
        min_price=0, max_price=10000,
    ),
}

COMMON_DIETARY_NEEDS = [
    "Vegetarian", "Vegan", "Gluten-Free", "Dairy-Free",
    "Nut-Free", "Halal", "Kosher", "Allergy-Friendly",
]

COMMON_ACCESSIBILITY_NEEDS = [
    "Wheelchair Access", "Visual Support", "Hearing Support",
    "Sensory-Friendly", "Sign Language",
]


class QuizAnswers(BaseModel):
    child_name: str | None = None
    child_age: int | None = Field(default=None, ge=0, le=25)
    parent_goals: list[ParentGoal] | None = None
    interests: list[str] | None = None
    budget_tier: BudgetTier | None = None
    duration: DurationPreference | None = None
    special_needs: SpecialNeeds | None = None
    location_preference: LocationPreference | None = None


class QuizSessionState(BaseModel):
    session_id: str
    current_state: QuestionState = QuestionState.name
    answers: QuizAnswers = Field(default_factory=QuizAnswers)
    started_at: float = Field(default_factory=time.time)
    last_updated: float = Field(default_factory=time.time)
    quiz_response_id: str | None = None
    result_camp_ids: list[str] = Field(default_factory=list)


class AnswerRequest(BaseModel):
    question: QuestionState
    value: Any = None


class MessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)


class QuizStepResponse(BaseModel):
    session_id: str
    current_state: QuestionState
    prompt: str
    answers: QuizAnswers


class QuizCompleteResponse(BaseModel):
    session_id: str
    recommendations: list[ScoredCamp]
    quiz_response_id: str | None = None
    saved: bool = False
    fallback_camps: list[Camp] = Field(default_factory=list)
    message: str
