"""Search-related data models."""

from dataclasses import dataclass, field
from enum import Enum


class SearchPhase(str, Enum):
    """Search session lifecycle"""

    IDLE = "idle"
    SEARCHING = "searching"
    RANKED = "ranked"
    FALLBACK = "fallback"
    EMPTY = "empty"
    ERRORED = "errored"


class RankingMode(str, Enum):
    """How a ranking response is turned into a display order"""

    AUTO = "auto"
    REMOTE = "remote"
    BOOSTED = "boosted"


@dataclass(frozen=True)
class ScoredResult:
    """A remote result after local keyword boosting."""

    item_id: str
    similarity: float


@dataclass(frozen=True)
class SearchState:
    """Snapshot of a search session."""

    query: str = ""
    ordered_ids: tuple[str, ...] = ()
    scores: dict[str, float] = field(default_factory=dict)
    phase: SearchPhase = SearchPhase.IDLE
    loading: bool = False
    error: str | None = None
    message: str | None = None
    sequence: int = 0

    @property
    def active(self) -> bool:
        return (
            self.phase in (SearchPhase.RANKED, SearchPhase.FALLBACK)
            and len(self.ordered_ids) > 0
        )
