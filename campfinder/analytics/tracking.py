from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from .store import record_event


def track_quiz_started(session_id: str) -> None:
    record_event("quiz_started", {
        "session_id": session_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


def track_question_answered(question_number: int, question_label: str, value: Any) -> None:
    record_event("question_answered", {
        "question_number": question_number,
        "question_label": question_label,
        "value": json.dumps(value, default=str),
    })


def track_quiz_completed(session_id: str, time_seconds: int, results_count: int) -> None:
    record_event("quiz_completed", {
        "session_id": session_id,
        "time_to_complete_seconds": time_seconds,
        "results_count": results_count,
    })


def track_results_viewed(session_id: str, results_count: int) -> None:
    record_event("results_viewed", {
        "session_id": session_id,
        "results_count": results_count,
    })


def track_email_captured(session_id: str, source: str = "save_results") -> None:
    record_event("email_captured", {
        "session_id": session_id,
        "source": source,
    })


def track_camp_clicked(session_id: str, camp_id: str, ranking: int | None, match_label: str | None) -> None:
    record_event("camp_clicked", {
        "session_id": session_id,
        "camp_id": camp_id,
        "ranking": ranking,
        "match_label": match_label,
    })


def track_quiz_abandoned(session_id: str, question_number: int, question_label: str) -> None:
    record_event("quiz_abandoned", {
        "session_id": session_id,
        "drop_off_question": question_number,
        "drop_off_label": question_label,
    })
