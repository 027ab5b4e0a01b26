from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..recommendations.models import Camp


class StoreError(Exception):
    """A store backend failed to complete a read or write."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class QuizResponseRecord(BaseModel):
    """Parent row for one completed quiz session."""

    child_age: int | None = None
    parent_goals: list[str] | None = None
    interests: list[str] = Field(default_factory=list)
    budget_min: float | None = None
    budget_max: float | None = None
    duration_preference: str | None = None
    special_needs: dict[str, list[str]] | None = None
    location_preference: dict[str, Any] | None = None
    session_id: str
    started_at: datetime
    completed_at: datetime
    time_to_complete_seconds: int = 0
    device_type: str = "desktop"
    email: str | None = None


class QuizResultRecord(BaseModel):
    """Child row: one returned camp within a quiz response."""

    quiz_response_id: str
    camp_id: str
    match_score: int
    match_label: str
    match_reasons: list[str] = Field(default_factory=list)
    ranking: int
    clicked: bool = False
    clicked_at: datetime | None = None


class CampStore(ABC):
    @abstractmethod
    def fetch_published_camps(self) -> list[Camp]:
        """Every camp whose status is ``published``."""

    def fetch_age_appropriate_camps(self, child_age: int, limit: int) -> list[Camp]:
        """Published camps covering ``child_age``, featured then most enrolled."""
        camps = [
            c for c in self.fetch_published_camps()
            if c.age_min is not None and c.age_max is not None
            and c.age_min <= child_age <= c.age_max
        ]
        camps.sort(key=lambda c: (not c.featured, -(c.enrolled_count or 0)))
        return camps[:limit]

    @abstractmethod
    def insert_quiz_response(self, record: QuizResponseRecord) -> str:
        """Write the parent row and return its id."""

    @abstractmethod
    def insert_quiz_results(self, rows: list[QuizResultRecord]) -> None:
        ...

    @abstractmethod
    def update_quiz_response_email(self, session_id: str, email: str) -> int:
        """Set ``email`` on responses with ``session_id``; returns rows touched."""

    @abstractmethod
    def mark_result_clicked(self, quiz_response_id: str, camp_id: str, clicked_at: datetime) -> int:
        ...
