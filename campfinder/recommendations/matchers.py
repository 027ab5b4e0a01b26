"""
Keyword heuristics used by the scorer.

These match on free text (camp names, descriptions, amenity labels and
locations), so results depend on how each camp's listing is written. They
are kept behind small classes so the scorer does not care how a match is
decided.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from .config import DEFAULT_LOCATION_CONFIG, LocationConfig
from .models import AmenityGroup, ParentGoal

GOAL_KEYWORDS: dict[ParentGoal, tuple[str, ...]] = {
    ParentGoal.skill_development: ("skill", "training", "workshop", "expertise", "mastery", "advanced"),
    ParentGoal.social_connection: ("social", "team", "group", "friends", "collaborative", "community"),
    ParentGoal.physical_activity: ("active", "sports", "outdoor", "physical", "athletic", "fitness", "adventure"),
    ParentGoal.creative_expression: ("creative", "art", "music", "expression", "imagination", "craft"),
    ParentGoal.academic_enrichment: ("academic", "educational", "learning", "enrichment", "stem", "science", "math"),
    ParentGoal.fun_adventure: ("fun", "adventure", "exciting", "exploration", "discovery", "experience"),
}

GOAL_LABELS: dict[ParentGoal, str] = {
    ParentGoal.skill_development: "skill development",
    ParentGoal.social_connection: "social connection",
    ParentGoal.physical_activity: "physical activity",
    ParentGoal.creative_expression: "creative expression",
    ParentGoal.academic_enrichment: "academic enrichment",
    ParentGoal.fun_adventure: "fun and adventure",
}


class GoalMatcher:
    def __init__(
        self,
        keywords: Mapping[ParentGoal, Iterable[str]] = GOAL_KEYWORDS,
        labels: Mapping[ParentGoal, str] = GOAL_LABELS,
    ) -> None:
        self._keywords = {goal: tuple(k.lower() for k in kws) for goal, kws in keywords.items()}
        self._labels = dict(labels)

    def matches(self, goal: ParentGoal, *texts: str | None) -> bool:
        """True if any keyword for ``goal`` is a substring of any text."""
        haystacks = [t.lower() for t in texts if t]
        return any(kw in h for kw in self._keywords.get(goal, ()) for h in haystacks)

    def label(self, goal: ParentGoal) -> str:
        return self._labels.get(goal, goal.value)


class AmenityMatcher:
    def __init__(self, category_markers: Iterable[str]) -> None:
        self._markers = tuple(m.lower() for m in category_markers)

    def supports(self, amenities: Iterable[AmenityGroup], needs: Iterable[str]) -> bool:
        needs_lower = [n.lower() for n in needs]
        for amenity in amenities:
            category = (amenity.category or "").lower()
            if any(m in category for m in self._markers):
                return True
            for item in amenity.items:
                item_lower = item.lower()
                if any(need in item_lower for need in needs_lower):
                    return True
        return False


DIETARY_MATCHER = AmenityMatcher(("dietary", "food"))
ACCESSIBILITY_MATCHER = AmenityMatcher(("accessibility",))


class LocationClassifier:
    def __init__(self, config: LocationConfig = DEFAULT_LOCATION_CONFIG) -> None:
        self._markers = tuple(m.lower() for m in config.markers)
        self.region_label = config.region_label

    def is_in_country(self, location: str) -> bool:
        lower = location.lower()
        return any(m in lower for m in self._markers)

    @staticmethod
    def in_county(location: str, county: str | None) -> bool:
        return bool(county) and county.lower() in location.lower()
