from __future__ import annotations

import json
import logging
from typing import Any

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import chat_json
from ..quiz.flow import MAX_INTERESTS, MIN_NAME_LENGTH
from ..quiz.models import BudgetTier, QuizAnswers
from ..recommendations.models import (
    DurationPreference,
    LocationPreference,
    LocationType,
    ParentGoal,
    SpecialNeeds,
)
from .models import ExtractedPreferences

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# LLM Prompt
# ---------------------------------------------------------------------------

EXTRACTION_PROMPT = """\
You are a summer camp advisor's assistant. Given a parent's message, extract \
structured camp preferences for their child as JSON.

Return ONLY valid JSON with these fields (omit fields you cannot infer):
{
  "child_name": "first name",
  "child_age": 10,
  "parent_goals": ["skill-development", "social-connection", "physical-activity", \
"creative-expression", "academic-enrichment", "fun-adventure"],
  "interests": ["category slugs chosen from the allowed list"],
  "budget_tier": "BUDGET_FRIENDLY | MID_RANGE | PREMIUM | LUXURY | FLEXIBLE",
  "duration": "half-day | full-day | week | multi-week",
  "dietary": ["Vegetarian"],
  "accessibility": ["Wheelchair Access"],
  "location_type": "local | international",
  "county": "county name if a local county is mentioned",
  "confidence": 0.7,
  "missing_fields": ["child_age"]
}

Only use parent_goals, budget_tier, duration and location_type values from \
the lists above. Always include confidence and missing_fields."""


def _build_user_message(message: str, allowed_interests: list[str], known: QuizAnswers | None) -> str:
    lines = [f"Allowed interest slugs: {', '.join(allowed_interests) or 'any'}"]
    if known is not None:
        known_data = known.model_dump(mode="json", exclude_none=True)
        if known_data:
            lines.append(f"Known answers so far: {json.dumps(known_data)}")
    lines.append(f"Parent message: {message}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _fallback_extraction() -> ExtractedPreferences:
    return ExtractedPreferences(confidence=0.0, missing_fields=["child_age", "interests"])


def extract_preferences(
    message: str,
    allowed_interests: list[str] | None = None,
    known: QuizAnswers | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> ExtractedPreferences:
    """
    Read quiz answers out of free text.

    Returns an empty, zero-confidence extraction when the LLM is disabled,
    the call fails or the reply is not usable JSON.
    """
    if not config.enabled or not config.api_key:
        return _fallback_extraction()

    try:
        parsed = chat_json(
            [
                {"role": "system", "content": EXTRACTION_PROMPT},
                {"role": "user", "content": _build_user_message(message, allowed_interests or [], known)},
            ],
            config=config,
            temperature=0.1,
        )
        return ExtractedPreferences(**parsed)
    except Exception:
        logger.warning("Preference extraction failed, using fallback", exc_info=True)
        return _fallback_extraction()


# ---------------------------------------------------------------------------
# Extraction → QuizAnswers
# ---------------------------------------------------------------------------


def _valid_values(values: list[str], enum_cls: type) -> list[Any]:
    allowed = {e.value: e for e in enum_cls}
    return [allowed[v] for v in values if v in allowed]


def merge_into_answers(
    answers: QuizAnswers,
    extracted: ExtractedPreferences,
    allowed_interests: list[str] | None = None,
) -> QuizAnswers:
    """
    Fill answers from ``extracted`` without discarding what is known.

    Applies the same limits as a direct answer: names shorter than
    ``MIN_NAME_LENGTH`` are ignored and new interests stop at ``MAX_INTERESTS``.
    """
    update: dict[str, Any] = {}

    name = (extracted.child_name or "").strip()
    if len(name) >= MIN_NAME_LENGTH:
        update["child_name"] = name
    if extracted.child_age is not None and 0 <= extracted.child_age <= 25:
        update["child_age"] = extracted.child_age

    goals = _valid_values(extracted.parent_goals, ParentGoal)
    if goals:
        existing = list(answers.parent_goals or [])
        update["parent_goals"] = existing + [g for g in goals if g not in existing]

    interests = extracted.interests
    if allowed_interests is not None:
        interests = [i for i in interests if i in allowed_interests]
    if interests:
        existing_interests = list(answers.interests or [])
        merged = existing_interests + [i for i in interests if i not in existing_interests]
        update["interests"] = merged[:MAX_INTERESTS]

    tiers = _valid_values([extracted.budget_tier] if extracted.budget_tier else [], BudgetTier)
    if tiers:
        update["budget_tier"] = tiers[0]

    durations = _valid_values([extracted.duration] if extracted.duration else [], DurationPreference)
    if durations:
        update["duration"] = durations[0]

    if extracted.dietary or extracted.accessibility:
        current = answers.special_needs or SpecialNeeds()
        update["special_needs"] = SpecialNeeds(
            dietary=sorted(set(current.dietary) | set(extracted.dietary)),
            accessibility=sorted(set(current.accessibility) | set(extracted.accessibility)),
        )

    location_types = _valid_values([extracted.location_type] if extracted.location_type else [], LocationType)
    if location_types:
        update["location_preference"] = LocationPreference(
            type=location_types[0],
            county=extracted.county or None,
        )

    return answers.model_copy(update=update)
