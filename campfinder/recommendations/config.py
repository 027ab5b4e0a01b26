from __future__ import annotations

from dataclasses import dataclass

# Place names that mark a camp as being in the home market. Matched as
# case-insensitive substrings of the camp's free-text location.
IN_COUNTRY_MARKERS: tuple[str, ...] = (
    "ireland",
    "dublin",
    "cork",
    "galway",
    "limerick",
    "waterford",
    "kildare",
    "wicklow",
    "meath",
    "clare",
    "kerry",
    "donegal",
    "mayo",
    "sligo",
    "louth",
    "carlow",
    "kilkenny",
    "wexford",
    "tipperary",
    "offaly",
    "laois",
    "westmeath",
    "longford",
    "cavan",
    "monaghan",
    "roscommon",
    "leitrim",
)


@dataclass(frozen=True)
class ScoringWeights:
    parent_goals: float = 40.0
    categories: float = 70.0
    budget: float = 50.0
    budget_partial: float = 25.0
    budget_tolerance: float = 1.2
    duration: float = 50.0
    dietary: float = 7.5
    accessibility: float = 7.5
    location_match: float = 30.0
    county_bonus: float = 10.0
    location_penalty: float = 20.0
    availability: float = 5.0
    limited_spots_threshold: int = 5
    featured: float = 5.0
    max_score: int = 100


@dataclass(frozen=True)
class LocationConfig:
    markers: tuple[str, ...] = IN_COUNTRY_MARKERS
    region_label: str = "Ireland"


@dataclass(frozen=True)
class RankingConfig:
    min_score: int = 30
    top_n: int = 5
    perfect_threshold: int = 80
    great_threshold: int = 60


@dataclass(frozen=True)
class FallbackConfig:
    limit: int = 3


DEFAULT_WEIGHTS = ScoringWeights()
DEFAULT_LOCATION_CONFIG = LocationConfig()
DEFAULT_RANKING_CONFIG = RankingConfig()
DEFAULT_FALLBACK_CONFIG = FallbackConfig()
