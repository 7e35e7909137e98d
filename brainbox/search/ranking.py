"""Local relevance boosting and keyword fallback for search results."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from brainbox.catalog.models import Item
from brainbox.search.search_models import ScoredResult

TITLE_BONUS = 0.5
URL_BONUS = 0.2
TAG_BONUS = 0.3

# Empirically chosen; overridable through settings.
KEYWORD_FALLBACK_THRESHOLD = 0.2

MATCH_LABELS: tuple[tuple[float, str], ...] = (
    (0.7, "Strong match"),
    (0.4, "Related"),
    (0.2, "Weakly related"),
)


def as_score(value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    return score if score == score else 0.0  # NaN


def _lower_tags(tags: Any) -> list[str]:
    if not isinstance(tags, list | tuple):
        return []
    return [str(tag).lower() for tag in tags]


def boost_score(
    similarity: Any,
    query: str,
    *,
    title: Any = None,
    url: Any = None,
    tags: Any = None,
) -> float:
    """Similarity plus substring-match bonuses, clamped to [0, 1]."""
    q = query.strip().lower()
    bonus = 0.0
    if q:
        if q in str(title or "").lower():
            bonus += TITLE_BONUS
        if q in str(url or "").lower():
            bonus += URL_BONUS
        if any(q in tag for tag in _lower_tags(tags)):
            bonus += TAG_BONUS
    return max(0.0, min(1.0, as_score(similarity) + bonus))


def rank_boosted(
    results: Sequence[Mapping[str, Any]],
    query: str,
    collection: Mapping[str, Item] | None = None,
) -> list[ScoredResult]:
    """Boost every remote result and sort descending; ties keep remote order.

    Title, url and tags come from the result record, or from the matching
    collection item when the record omits them.
    """
    collection = collection or {}
    scored: list[ScoredResult] = []
    for record in results:
        item_id = str(record["_id"])
        local = collection.get(item_id)
        scored.append(
            ScoredResult(
                item_id=item_id,
                similarity=boost_score(
                    record.get("similarity"),
                    query,
                    title=record.get("title", local.title if local else None),
                    url=record.get("url", local.url if local else None),
                    tags=record.get("tags", local.tags if local else None),
                ),
            )
        )
    scored.sort(key=lambda r: r.similarity, reverse=True)
    return scored


def needs_keyword_fallback(
    scored: Sequence[ScoredResult], threshold: float = KEYWORD_FALLBACK_THRESHOLD
) -> bool:
    """True when the remote list is empty or every boosted score is weak."""
    return not scored or all(r.similarity < threshold for r in scored)


def keyword_matches(collection: Iterable[Item], query: str) -> list[Item]:
    """Items whose title, content or any tag contains the query, in collection order."""
    q = query.strip().lower()
    if not q:
        return []
    return [
        item
        for item in collection
        if q in item.title.lower()
        or q in (item.content or "").lower()
        or any(q in tag.lower() for tag in item.tags)
    ]


def match_label(score: Any) -> str:
    s = as_score(score)
    for floor, label in MATCH_LABELS:
        if s >= floor:
            return label
    return "Low match"
