from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path

from ..recommendations.models import Camp
from .base import CampStore, QuizResponseRecord, QuizResultRecord


class InMemoryCampStore(CampStore):
    """Process-local store used for local runs and tests."""

    def __init__(self, camps: list[Camp] | None = None) -> None:
        self.camps: list[Camp] = list(camps or [])
        self.responses: dict[str, QuizResponseRecord] = {}
        self.results: list[QuizResultRecord] = []

    @classmethod
    def from_csv(cls, path: Path) -> InMemoryCampStore:
        from ..data_ingestion.ingest import load_camps_csv

        return cls(load_camps_csv(path))

    def fetch_published_camps(self) -> list[Camp]:
        return [c for c in self.camps if c.status == "published"]

    def insert_quiz_response(self, record: QuizResponseRecord) -> str:
        response_id = str(uuid.uuid4())
        self.responses[response_id] = record
        return response_id

    def insert_quiz_results(self, rows: list[QuizResultRecord]) -> None:
        self.results.extend(rows)

    def update_quiz_response_email(self, session_id: str, email: str) -> int:
        touched = 0
        for response_id, record in self.responses.items():
            if record.session_id == session_id:
                self.responses[response_id] = record.model_copy(update={"email": email})
                touched += 1
        return touched

    def mark_result_clicked(self, quiz_response_id: str, camp_id: str, clicked_at: datetime) -> int:
        touched = 0
        for i, row in enumerate(self.results):
            if row.quiz_response_id == quiz_response_id and row.camp_id == camp_id:
                self.results[i] = row.model_copy(update={"clicked": True, "clicked_at": clicked_at})
                touched += 1
        return touched
