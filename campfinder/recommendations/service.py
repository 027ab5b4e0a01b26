from __future__ import annotations

import logging
import random
import string
import time
from datetime import datetime, timezone

from ..analytics.store import record_event
from ..store.base import CampStore, QuizResponseRecord, QuizResultRecord, StoreError
from .config import (
    DEFAULT_FALLBACK_CONFIG,
    DEFAULT_RANKING_CONFIG,
    DEFAULT_WEIGHTS,
    RankingConfig,
    ScoringWeights,
)
from .data_store import get_store
from .models import Camp, PersistenceResult, Preferences, ScoredCamp
from .ranking import rank_camps, to_scored_camp
from .scoring import score_camp

logger = logging.getLogger(__name__)

_SESSION_ALPHABET = string.ascii_lowercase + string.digits
_rng = random.SystemRandom()


def generate_session_id() -> str:
    """Opaque quiz session token: ``quiz_<epoch ms>_<9 base36 chars>``."""
    suffix = "".join(_rng.choice(_SESSION_ALPHABET) for _ in range(9))
    return f"quiz_{int(time.time() * 1000)}_{suffix}"


def get_recommendations(
    preferences: Preferences,
    store: CampStore | None = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    ranking: RankingConfig = DEFAULT_RANKING_CONFIG,
    now: datetime | None = None,
) -> list[ScoredCamp]:
    """
    Score every published camp against ``preferences`` and return the ranked
    top matches.

    An empty list means no camp cleared the minimum score. Catalog fetch
    failures are raised as ``StoreError``; there is no retry.
    """
    start_time = time.time()

    try:
        camps = (store or get_store()).fetch_published_camps()
    except StoreError:
        logger.error("Error fetching camps", exc_info=True)
        raise

    now = now or datetime.now(timezone.utc)
    scored = [
        to_scored_camp(camp, score_camp(camp, preferences, weights=weights, now=now), ranking)
        for camp in camps
    ]
    results = rank_camps(scored, ranking)

    record_event("recommendations_generated", {
        "child_age": preferences.child_age,
        "interests": preferences.interests,
        "total_candidates": len(camps),
        "results_count": len(results),
        "labels": [r.match_label.value for r in results],
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
    })
    return results


def _response_record(
    preferences: Preferences,
    session_id: str,
    device_type: str,
    email: str | None,
    started_at: datetime | None,
) -> QuizResponseRecord:
    completed_at = datetime.now(timezone.utc)
    started_at = started_at or completed_at
    budget = preferences.budget_range
    return QuizResponseRecord(
        child_age=preferences.child_age,
        parent_goals=[g.value for g in preferences.parent_goals] if preferences.parent_goals else None,
        interests=preferences.interests,
        budget_min=budget.min if budget else None,
        budget_max=budget.max if budget else None,
        duration_preference=preferences.duration.value if preferences.duration else None,
        special_needs=preferences.special_needs.model_dump() if preferences.special_needs else None,
        location_preference=(
            preferences.location_preference.model_dump(mode="json")
            if preferences.location_preference else None
        ),
        session_id=session_id,
        started_at=started_at,
        completed_at=completed_at,
        time_to_complete_seconds=max(0, round((completed_at - started_at).total_seconds())),
        device_type=device_type,
        email=email or None,
    )


def save_quiz_response(
    preferences: Preferences,
    results: list[ScoredCamp],
    session_id: str,
    device_type: str = "desktop",
    email: str | None = None,
    started_at: datetime | None = None,
    store: CampStore | None = None,
) -> PersistenceResult:
    """
    Persist a completed quiz: one parent row, then one row per result.

    The two writes are not atomic; if the results insert fails the parent
    row stays behind. Failures are returned, never raised.
    """
    record = _response_record(preferences, session_id, device_type, email, started_at)

    try:
        store = store or get_store()
        response_id = store.insert_quiz_response(record)
    except StoreError as exc:
        logger.error("Error saving quiz response: %s", exc)
        return PersistenceResult(success=False, error=str(exc))

    rows = [
        QuizResultRecord(
            quiz_response_id=response_id,
            camp_id=r.camp.id,
            match_score=r.score,
            match_label=r.match_label.value,
            match_reasons=r.match_reasons,
            ranking=r.ranking,
        )
        for r in results
    ]
    try:
        store.insert_quiz_results(rows)
    except StoreError as exc:
        logger.error("Error saving quiz results for %s: %s", response_id, exc)
        return PersistenceResult(success=False, response_id=response_id, error=str(exc))

    return PersistenceResult(success=True, response_id=response_id)


def update_quiz_response_email(
    session_id: str,
    email: str,
    store: CampStore | None = None,
) -> PersistenceResult:
    try:
        (store or get_store()).update_quiz_response_email(session_id, email)
    except StoreError as exc:
        logger.error("Error updating quiz response email: %s", exc)
        return PersistenceResult(success=False, error=str(exc))
    return PersistenceResult(success=True)


def track_camp_click(
    quiz_response_id: str,
    camp_id: str,
    store: CampStore | None = None,
) -> PersistenceResult:
    try:
        (store or get_store()).mark_result_clicked(quiz_response_id, camp_id, datetime.now(timezone.utc))
    except StoreError as exc:
        logger.error("Error tracking camp click: %s", exc)
        return PersistenceResult(success=False, response_id=quiz_response_id, error=str(exc))
    return PersistenceResult(success=True, response_id=quiz_response_id)


def get_fallback_camps(
    child_age: int,
    store: CampStore | None = None,
    limit: int = DEFAULT_FALLBACK_CONFIG.limit,
) -> list[Camp]:
    """Popular age-appropriate camps to show when nothing matched."""
    try:
        return (store or get_store()).fetch_age_appropriate_camps(child_age, limit)
    except StoreError:
        logger.error("Error fetching fallback camps", exc_info=True)
        return []
