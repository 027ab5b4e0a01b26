from __future__ import annotations

import time
from typing import Any

from pydantic import ValidationError

from ..recommendations.models import BudgetRange, Preferences
from .models import BUDGET_TIERS, QuestionState, QuizAnswers, QuizSessionState

QUESTION_ORDER: tuple[QuestionState, ...] = (
    QuestionState.name,
    QuestionState.age,
    QuestionState.parent_goals,
    QuestionState.interests,
    QuestionState.budget,
    QuestionState.duration,
    QuestionState.special_needs,
    QuestionState.location,
)

OPTIONAL_QUESTIONS = frozenset({QuestionState.special_needs, QuestionState.location})

_ANSWER_FIELDS: dict[QuestionState, str] = {
    QuestionState.name: "child_name",
    QuestionState.age: "child_age",
    QuestionState.parent_goals: "parent_goals",
    QuestionState.interests: "interests",
    QuestionState.budget: "budget_tier",
    QuestionState.duration: "duration",
    QuestionState.special_needs: "special_needs",
    QuestionState.location: "location_preference",
}

MAX_INTERESTS = 3
MIN_NAME_LENGTH = 2


class QuizFlowError(ValueError):
    """An answer was out of order or failed validation."""


def question_number(state: QuestionState) -> int:
    """1-based position of ``state`` in the quiz, 0 for non-question states."""
    try:
        return QUESTION_ORDER.index(state) + 1
    except ValueError:
        return 0


def next_state(state: QuestionState) -> QuestionState:
    if state in QUESTION_ORDER:
        index = QUESTION_ORDER.index(state)
        if index + 1 < len(QUESTION_ORDER):
            return QUESTION_ORDER[index + 1]
        return QuestionState.processing
    return QuestionState.results


def first_unanswered(answers: QuizAnswers) -> QuestionState:
    """Earliest required question still missing an answer."""
    for question in QUESTION_ORDER:
        if question in OPTIONAL_QUESTIONS:
            continue
        if getattr(answers, _ANSWER_FIELDS[question]) in (None, [], ""):
            return question
    return QuestionState.special_needs


def _check_required(question: QuestionState, value: Any) -> None:
    if question in OPTIONAL_QUESTIONS:
        return
    if value is None or value == [] or value == "":
        raise QuizFlowError(f"{question.value} needs an answer")
    if question is QuestionState.name and len(str(value).strip()) < MIN_NAME_LENGTH:
        raise QuizFlowError(f"Name must be at least {MIN_NAME_LENGTH} characters")
    if question is QuestionState.interests and isinstance(value, list) and len(value) > MAX_INTERESTS:
        raise QuizFlowError(f"Pick up to {MAX_INTERESTS} interests")


def apply_answer(state: QuizSessionState, question: QuestionState, value: Any) -> QuizSessionState:
    """Record the answer to the current question and advance the quiz."""
    if state.current_state not in QUESTION_ORDER:
        raise QuizFlowError("Quiz already completed")
    if question is not state.current_state:
        raise QuizFlowError(
            f"Expected an answer to {state.current_state.value}, got {question.value}"
        )

    if isinstance(value, str):
        value = value.strip()
    _check_required(question, value)

    merged = state.answers.model_dump()
    merged[_ANSWER_FIELDS[question]] = value
    try:
        answers = QuizAnswers.model_validate(merged)
    except ValidationError as exc:
        raise QuizFlowError(str(exc)) from exc

    return state.model_copy(update={
        "answers": answers,
        "current_state": next_state(question),
        "last_updated": time.time(),
    })


def answers_to_preferences(answers: QuizAnswers) -> Preferences:
    budget_range = None
    if answers.budget_tier is not None:
        tier = BUDGET_TIERS[answers.budget_tier]
        budget_range = BudgetRange(min=tier.min_price, max=tier.max_price)

    return Preferences(
        child_age=answers.child_age,
        parent_goals=answers.parent_goals,
        interests=answers.interests or [],
        budget_range=budget_range,
        duration=answers.duration,
        special_needs=answers.special_needs,
        location_preference=answers.location_preference,
    )


def prompt_for(state: QuestionState, child_name: str | None = None) -> str:
    name = child_name or "your child"
    prompts = {
        QuestionState.name: "Hi! I'm your camp advisor. What's your child's first name?",
        QuestionState.age: f"Great to meet {name}! How old are they?",
        QuestionState.parent_goals: f"What would you most like {name} to get out of camp this summer?",
        QuestionState.interests: f"Perfect! What is {name} most excited about? Pick up to 3 interests.",
        QuestionState.budget: "What's your budget comfort zone for a week of camp?",
        QuestionState.duration: f"How long would work best for {name}'s schedule this summer?",
        QuestionState.special_needs: (
            "Any dietary needs or accessibility requirements I should know about?"
        ),
        QuestionState.location: "Last thing - are you looking for a camp close to home or abroad?",
        QuestionState.processing: f"Analyzing camps... matching {name}'s interests...",
        QuestionState.results: f"Here are the camps that suit {name} best.",
    }
    return prompts[state]


def device_type_for_width(width: int | None) -> str:
    if width is None:
        return "desktop"
    if width < 744:
        return "mobile"
    if width < 1128:
        return "tablet"
    return "desktop"
