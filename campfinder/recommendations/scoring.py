from __future__ import annotations

import math
from datetime import datetime, timezone

from .config import DEFAULT_WEIGHTS, ScoringWeights
from .matchers import (
    ACCESSIBILITY_MATCHER,
    DIETARY_MATCHER,
    GoalMatcher,
    LocationClassifier,
)
from .models import (
    Camp,
    DurationPreference,
    LocationType,
    Preferences,
    ScoreResult,
)

AGE_UNKNOWN_REASON = "Age information not available"
AGE_MISMATCH_REASON = "Age does not match camp requirements"

DURATION_LABELS: dict[DurationPreference, str] = {
    DurationPreference.half_day: "Half-day schedule",
    DurationPreference.full_day: "Full-day program",
    DurationPreference.week: "Week-long intensive",
    DurationPreference.multi_week: "Multi-week experience",
}

_GOAL_MATCHER = GoalMatcher()
_LOCATION_CLASSIFIER = LocationClassifier()


def matches_duration(days: int, preference: DurationPreference) -> bool:
    if preference is DurationPreference.half_day:
        return days <= 1
    if preference is DurationPreference.full_day:
        return days == 1
    if preference is DurationPreference.week:
        return 5 <= days <= 7
    if preference is DurationPreference.multi_week:
        return days > 7
    return False


def effective_price(camp: Camp, now: datetime) -> float:
    """Early-bird price while its deadline has not passed, else list price."""
    if camp.early_bird_price is None:
        return camp.price
    if camp.early_bird_deadline is not None and now.date() > camp.early_bird_deadline:
        return camp.price
    return camp.early_bird_price


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_camp(
    camp: Camp,
    preferences: Preferences,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    goal_matcher: GoalMatcher = _GOAL_MATCHER,
    location_classifier: LocationClassifier = _LOCATION_CLASSIFIER,
    now: datetime | None = None,
) -> ScoreResult:
    """
    Score one camp against a parent's quiz answers.

    Age is a hard filter: a camp without age bounds, or whose range does not
    include the child, scores 0 with a single reason. Every other signal
    adds independently to a running total which may go negative (location
    penalty); the total is rounded and clamped to [0, 100] only at the end.
    """
    if camp.age_min is None or camp.age_max is None:
        return ScoreResult(score=0, reasons=[AGE_UNKNOWN_REASON])

    age = preferences.child_age
    if age is None or age < camp.age_min or age > camp.age_max:
        return ScoreResult(score=0, reasons=[AGE_MISMATCH_REASON])

    now = now or datetime.now(timezone.utc)
    total = 0.0
    reasons: list[str] = [f"Perfect for {age}-year-olds"]

    # --- Parent goals ---
    if preferences.parent_goals:
        matched_labels = [
            goal_matcher.label(goal)
            for goal in preferences.parent_goals
            if goal_matcher.matches(goal, camp.name, camp.description)
        ]
        if matched_labels:
            total += weights.parent_goals * len(matched_labels) / len(preferences.parent_goals)
            reasons.append(f"Aligns with your {' and '.join(matched_labels)} goals")

    # --- Category / interest overlap ---
    requested = list(dict.fromkeys(preferences.interests))
    if requested:
        camp_ids = set(camp.category_ids)
        matched_ids = [i for i in requested if i in camp_ids]
        if matched_ids:
            total += weights.categories * len(matched_ids) / len(requested)
            names = [c.name for c in camp.categories if c.id in matched_ids]
            if names:
                suffix = "s" if len(names) > 1 else ""
                reasons.append(f"Matches {', '.join(names)} interest{suffix}")

    # --- Budget ---
    budget = preferences.budget_range
    if budget is not None:
        price = effective_price(camp, now)
        if budget.min <= price <= budget.max:
            total += weights.budget
            if price < camp.price:
                reasons.append("Early bird discount available")
            else:
                reasons.append("Within your budget")
        elif price <= budget.max * weights.budget_tolerance:
            total += weights.budget_partial
            reasons.append("Slightly above budget but great value")

    # --- Duration ---
    days = camp.duration_days
    if preferences.duration is not None and days is not None:
        if matches_duration(days, preferences.duration):
            total += weights.duration
            reasons.append(DURATION_LABELS[preferences.duration])

    # --- Special needs ---
    needs = preferences.special_needs
    if needs is not None:
        if needs.dietary and DIETARY_MATCHER.supports(camp.amenities, needs.dietary):
            total += weights.dietary
            reasons.append("Accommodates dietary needs")
        if needs.accessibility and ACCESSIBILITY_MATCHER.supports(camp.amenities, needs.accessibility):
            total += weights.accessibility
            reasons.append("Accessible facilities available")

    # --- Location preference ---
    location_pref = preferences.location_preference
    if location_pref is not None and camp.location:
        in_country = location_classifier.is_in_country(camp.location)
        if location_pref.type is LocationType.local:
            if in_country:
                total += weights.location_match
                if location_classifier.in_county(camp.location, location_pref.county):
                    total += weights.county_bonus
                    reasons.append(f"Located in {location_pref.county}")
                else:
                    reasons.append(f"Located in {location_classifier.region_label}")
            else:
                total -= weights.location_penalty
        elif location_pref.type is LocationType.international:
            if not in_country:
                total += weights.location_match
                reasons.append("International destination")
            else:
                total -= weights.location_penalty

    # --- Availability ---
    spots = camp.available_spots
    if spots is not None:
        if spots > weights.limited_spots_threshold:
            total += weights.availability
            reasons.append("Plenty of spots available")
        elif spots > 0:
            reasons.append("Limited spots remaining")

    # --- Featured ---
    if camp.featured:
        total += weights.featured

    score = max(0, min(_round_half_up(total), weights.max_score))
    return ScoreResult(score=score, reasons=reasons)
