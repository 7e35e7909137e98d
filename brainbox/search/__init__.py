"""Hybrid semantic search over the catalog."""

from brainbox.search.ranking import (
    KEYWORD_FALLBACK_THRESHOLD,
    boost_score,
    keyword_matches,
    match_label,
    needs_keyword_fallback,
    rank_boosted,
)
from brainbox.search.search_models import (
    RankingMode,
    ScoredResult,
    SearchPhase,
    SearchState,
)
from brainbox.search.session import SearchSession

__all__ = [
    "KEYWORD_FALLBACK_THRESHOLD",
    "boost_score",
    "keyword_matches",
    "match_label",
    "needs_keyword_fallback",
    "rank_boosted",
    "RankingMode",
    "ScoredResult",
    "SearchPhase",
    "SearchState",
    "SearchSession",
]
