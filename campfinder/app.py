from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_funnel_metrics, compute_match_summary
from .analytics.store import get_events
from .analytics.tracking import (
    track_camp_clicked,
    track_email_captured,
    track_question_answered,
    track_quiz_abandoned,
    track_quiz_completed,
    track_quiz_started,
    track_results_viewed,
)
from .chat.intent import extract_preferences, merge_into_answers
from .quiz.flow import (
    QUESTION_ORDER,
    QuizFlowError,
    answers_to_preferences,
    apply_answer,
    device_type_for_width,
    first_unanswered,
    prompt_for,
    question_number,
)
from .quiz.models import (
    BUDGET_TIERS,
    COMMON_ACCESSIBILITY_NEEDS,
    COMMON_DIETARY_NEEDS,
    AnswerRequest,
    MessageRequest,
    QuestionState,
    QuizCompleteResponse,
    QuizSessionState,
    QuizStepResponse,
)
from .quiz.session_repository import SessionRepository
from .recommendations.data_store import get_store
from .recommendations.models import (
    Camp,
    ClickRequest,
    DurationPreference,
    EmailUpdateRequest,
    ParentGoal,
    PersistenceResult,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.service import (
    generate_session_id,
    get_fallback_camps,
    get_recommendations,
    save_quiz_response,
    track_camp_click,
    update_quiz_response_email,
)
from .store.base import StoreError

logger = logging.getLogger(__name__)

app = FastAPI(title="Camp Finder API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "camp-finder-secret-change-in-production"),
)

_CATALOG_UNAVAILABLE = "Something went wrong finding camps, please try again"


def _load_or_start(request: Request) -> tuple[SessionRepository, QuizSessionState]:
    repo = SessionRepository(request.session)
    state = repo.load()
    if state is None:
        state = QuizSessionState(session_id=generate_session_id())
        repo.save(state)
        track_quiz_started(state.session_id)
    return repo, state


def _step_response(state: QuizSessionState) -> QuizStepResponse:
    return QuizStepResponse(
        session_id=state.session_id,
        current_state=state.current_state,
        prompt=prompt_for(state.current_state, state.answers.child_name),
        answers=state.answers,
    )


def _catalog_interests() -> list[dict[str, str]]:
    try:
        camps = get_store().fetch_published_camps()
    except StoreError:
        logger.error("Error fetching camps for metadata", exc_info=True)
        raise HTTPException(status_code=503, detail=_CATALOG_UNAVAILABLE)
    seen: dict[str, dict[str, str]] = {}
    for camp in camps:
        for c in camp.categories:
            seen.setdefault(c.id, {"id": c.id, "name": c.name, "slug": c.slug})
    return sorted(seen.values(), key=lambda c: c["name"])


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "categories": _catalog_interests(),
        "parent_goals": [g.value for g in ParentGoal],
        "durations": [d.value for d in DurationPreference],
        "budget_tiers": {t.value: cfg.model_dump() for t, cfg in BUDGET_TIERS.items()},
        "dietary_needs": COMMON_DIETARY_NEEDS,
        "accessibility_needs": COMMON_ACCESSIBILITY_NEEDS,
    }


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(body: RecommendationRequest) -> RecommendationResponse:
    try:
        results = get_recommendations(body)
    except StoreError:
        raise HTTPException(status_code=503, detail=_CATALOG_UNAVAILABLE)
    return RecommendationResponse(recommendations=results)


# ── Quiz session endpoints ───────────────────────────────────────────────


@app.post("/quiz/session", response_model=QuizStepResponse)
def quiz_session(request: Request) -> QuizStepResponse:
    _, state = _load_or_start(request)
    return _step_response(state)


@app.post("/quiz/answer", response_model=QuizStepResponse)
def quiz_answer(body: AnswerRequest, request: Request) -> QuizStepResponse:
    repo, state = _load_or_start(request)
    try:
        state = apply_answer(state, body.question, body.value)
    except QuizFlowError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    track_question_answered(question_number(body.question), body.question.value, body.value)
    repo.save(state)
    return _step_response(state)


@app.post("/quiz/message", response_model=QuizStepResponse)
def quiz_message(body: MessageRequest, request: Request) -> QuizStepResponse:
    repo, state = _load_or_start(request)
    if state.current_state not in QUESTION_ORDER:
        raise HTTPException(status_code=409, detail="Quiz already completed")

    allowed = [c["id"] for c in _catalog_interests()]
    extracted = extract_preferences(body.message, allowed, known=state.answers)
    answers = merge_into_answers(state.answers, extracted, allowed)

    # Only move forward: a free-text reply never re-opens answered questions.
    target = first_unanswered(answers)
    if QUESTION_ORDER.index(target) < QUESTION_ORDER.index(state.current_state):
        target = state.current_state
    state = state.model_copy(update={"answers": answers, "current_state": target})
    repo.save(state)
    return _step_response(state)


@app.post("/quiz/complete", response_model=QuizCompleteResponse)
def quiz_complete(
    request: Request,
    viewport_width: int | None = Query(default=None, ge=0),
) -> QuizCompleteResponse:
    repo, state = _load_or_start(request)
    if state.current_state is not QuestionState.processing:
        raise HTTPException(status_code=409, detail="Quiz is not finished")

    preferences = answers_to_preferences(state.answers)
    try:
        results = get_recommendations(preferences)
    except StoreError:
        raise HTTPException(status_code=503, detail=_CATALOG_UNAVAILABLE)

    started_at = datetime.fromtimestamp(state.started_at, tz=timezone.utc)
    saved = save_quiz_response(
        preferences,
        results,
        state.session_id,
        device_type=device_type_for_width(viewport_width),
        started_at=started_at,
    )
    elapsed = int((datetime.now(timezone.utc) - started_at).total_seconds())
    track_quiz_completed(state.session_id, elapsed, len(results))

    fallback: list[Camp] = []
    name = state.answers.child_name or "your child"
    if results:
        message = f"I found {len(results)} amazing camps perfect for {name}! Here's why each one matches..."
    else:
        fallback = get_fallback_camps(state.answers.child_age) if state.answers.child_age is not None else []
        message = (
            "I couldn't find perfect matches with these exact criteria. Let's adjust your "
            f"preferences or browse all camps for {name}'s age group."
        )

    state = state.model_copy(update={
        "current_state": QuestionState.results,
        "quiz_response_id": saved.response_id,
        "result_camp_ids": [r.camp.id for r in results],
    })
    repo.save(state)
    track_results_viewed(state.session_id, len(results))

    return QuizCompleteResponse(
        session_id=state.session_id,
        recommendations=results,
        quiz_response_id=saved.response_id,
        saved=saved.success,
        fallback_camps=fallback,
        message=message,
    )


@app.post("/quiz/email", response_model=PersistenceResult)
def quiz_email(body: EmailUpdateRequest, request: Request) -> PersistenceResult:
    _, state = _load_or_start(request)
    result = update_quiz_response_email(state.session_id, body.email)
    if result.success:
        track_email_captured(state.session_id)
    return result


@app.post("/quiz/click", response_model=PersistenceResult)
def quiz_click(body: ClickRequest, request: Request) -> PersistenceResult:
    _, state = _load_or_start(request)
    result = track_camp_click(body.quiz_response_id, body.camp_id)
    track_camp_clicked(
        state.session_id,
        body.camp_id,
        body.ranking,
        body.match_label.value if body.match_label else None,
    )
    return result


@app.get("/quiz/fallback", response_model=list[Camp])
def quiz_fallback(child_age: int = Query(..., ge=0, le=25)) -> list[Camp]:
    return get_fallback_camps(child_age)


@app.post("/quiz/reset")
def quiz_reset(request: Request) -> dict:
    repo = SessionRepository(request.session)
    state = repo.load()
    if state is not None and state.current_state in QUESTION_ORDER:
        track_quiz_abandoned(
            state.session_id,
            question_number(state.current_state),
            state.current_state.value,
        )
    repo.clear()
    return {"status": "reset"}


# ── Analytics endpoints ──────────────────────────────────────────────────


@app.get("/analytics/funnel")
def analytics_funnel() -> dict:
    events = get_events()
    return {
        "funnel": compute_funnel_metrics(events),
        "matches": compute_match_summary(events),
    }
