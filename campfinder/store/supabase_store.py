from __future__ import annotations

import logging
from datetime import datetime

from pydantic import ValidationError
from supabase import Client, create_client

from ..recommendations.models import Camp
from .base import CampStore, QuizResponseRecord, QuizResultRecord, StoreError
from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .rows import camp_from_row

logger = logging.getLogger(__name__)

CAMP_SELECT = (
    "*, "
    "organisations(name), "
    "camp_category_assignments(camp_categories(id, name, slug))"
)


def _camps_from_rows(rows: list[dict] | None) -> list[Camp]:
    try:
        return [camp_from_row(row) for row in rows or []]
    except (KeyError, TypeError, ValidationError) as exc:
        raise StoreError("Unreadable camp row in catalog", exc) from exc


class SupabaseCampStore(CampStore):
    def __init__(self, client: Client, config: StoreConfig = DEFAULT_STORE_CONFIG) -> None:
        self._client = client
        self._config = config

    @classmethod
    def from_config(cls, config: StoreConfig = DEFAULT_STORE_CONFIG) -> SupabaseCampStore:
        if not config.supabase_url or not config.supabase_key:
            raise StoreError("SUPABASE_URL and SUPABASE_KEY must be set")
        try:
            client = create_client(config.supabase_url, config.supabase_key)
        except Exception as exc:
            raise StoreError("Could not connect to Supabase", exc) from exc
        return cls(client, config)

    def fetch_published_camps(self) -> list[Camp]:
        try:
            response = (
                self._client.table(self._config.camps_table)
                .select(CAMP_SELECT)
                .eq("status", "published")
                .order("featured", desc=True)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as exc:
            raise StoreError("Error fetching camps", exc) from exc
        return _camps_from_rows(response.data)

    def fetch_age_appropriate_camps(self, child_age: int, limit: int) -> list[Camp]:
        try:
            response = (
                self._client.table(self._config.camps_table)
                .select(CAMP_SELECT)
                .eq("status", "published")
                .lte("age_min", child_age)
                .gte("age_max", child_age)
                .order("featured", desc=True)
                .order("enrolled_count", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:
            raise StoreError("Error fetching fallback camps", exc) from exc
        return _camps_from_rows(response.data)

    def insert_quiz_response(self, record: QuizResponseRecord) -> str:
        try:
            response = (
                self._client.table(self._config.responses_table)
                .insert(record.model_dump(mode="json"))
                .execute()
            )
        except Exception as exc:
            raise StoreError("Error saving quiz response", exc) from exc
        if not response.data:
            raise StoreError("Quiz response insert returned no row")
        return str(response.data[0]["id"])

    def insert_quiz_results(self, rows: list[QuizResultRecord]) -> None:
        if not rows:
            return
        payload = [r.model_dump(mode="json", exclude={"clicked", "clicked_at"}) for r in rows]
        try:
            self._client.table(self._config.results_table).insert(payload).execute()
        except Exception as exc:
            raise StoreError("Error saving quiz results", exc) from exc

    def update_quiz_response_email(self, session_id: str, email: str) -> int:
        try:
            response = (
                self._client.table(self._config.responses_table)
                .update({"email": email})
                .eq("session_id", session_id)
                .execute()
            )
        except Exception as exc:
            raise StoreError("Error updating quiz response email", exc) from exc
        return len(response.data or [])

    def mark_result_clicked(self, quiz_response_id: str, camp_id: str, clicked_at: datetime) -> int:
        try:
            response = (
                self._client.table(self._config.results_table)
                .update({"clicked": True, "clicked_at": clicked_at.isoformat()})
                .eq("quiz_response_id", quiz_response_id)
                .eq("camp_id", camp_id)
                .execute()
            )
        except Exception as exc:
            raise StoreError("Error tracking camp click", exc) from exc
        return len(response.data or [])
