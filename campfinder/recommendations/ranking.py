from __future__ import annotations

from datetime import datetime, timezone

from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import Camp, MatchLabel, ScoredCamp, ScoreResult

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def get_match_label(score: int, config: RankingConfig = DEFAULT_RANKING_CONFIG) -> MatchLabel:
    if score >= config.perfect_threshold:
        return MatchLabel.perfect
    if score >= config.great_threshold:
        return MatchLabel.great
    return MatchLabel.good


def to_scored_camp(
    camp: Camp,
    result: ScoreResult,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> ScoredCamp:
    return ScoredCamp(
        camp=camp,
        score=result.score,
        match_label=get_match_label(result.score, config),
        match_reasons=list(result.reasons),
    )


def _created_at(camp: Camp) -> datetime:
    created = camp.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def _sort_key(item: ScoredCamp) -> tuple:
    # Ascending sort of negated keys: higher score, more spots, early bird,
    # featured, then newer camps come first.
    camp = item.camp
    return (
        -item.score,
        -(camp.available_spots or 0),
        camp.early_bird_price is None,
        not camp.featured,
        -_created_at(camp).timestamp(),
    )


def rank_camps(
    scored: list[ScoredCamp],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[ScoredCamp]:
    """
    Drop camps below ``config.min_score``, order best first, keep the top
    ``config.top_n`` and number them from 1.
    """
    eligible = [s for s in scored if s.score >= config.min_score]
    ordered = sorted(eligible, key=_sort_key)[: config.top_n]
    return [
        item.model_copy(update={"ranking": index})
        for index, item in enumerate(ordered, start=1)
    ]
