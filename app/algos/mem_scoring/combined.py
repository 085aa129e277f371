"""
Combined rescoring pipeline.

Order is fixed: decay (humanized mode only) → forgetting threshold →
focus boost → stable sort by score descending. Raw index order breaks ties.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from app.algos.mem_scoring.decay import current_strength, degraded_score, is_forgotten
from app.algos.mem_scoring.focus import FocusBoost, apply_focus_boost
from app.models.database.user import MemoryMode
from app.models.dto.retrieval import RankedResult

logger = logging.getLogger(__name__)


@dataclass
class RescoreOutcome:
    """Rescored results plus what each stage did."""

    results: List[RankedResult] = field(default_factory=list)

    candidates: int = 0
    """Matches returned by the vector index."""

    decayed: int = 0
    """Matches whose score was scaled by current strength."""

    forgotten: int = 0
    """Matches dropped for falling below the forgetting threshold."""

    boosted: int = 0
    """Matches multiplied by the focus boost."""


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def apply_degradation(results: List[RankedResult], now: datetime) -> RescoreOutcome:
    """
    Scale every non-permanent result by its current strength and drop
    those below the forgetting threshold.

    Results without metadata or a creation timestamp pass through unchanged.
    """
    outcome = RescoreOutcome(candidates=len(results))

    for result in results:
        metadata = result.metadata
        created_at = _parse_timestamp(metadata.get("timestamp")) if metadata else None

        if not metadata or metadata.get("is_permanent") or created_at is None:
            outcome.results.append(result)
            continue

        strength = current_strength(
            strength=float(metadata.get("strength", 10)),
            decay_rate=float(metadata.get("decay_rate", 0)),
            is_permanent=False,
            created_at=created_at,
            now=now,
        )

        if is_forgotten(strength):
            outcome.forgotten += 1
            continue

        outcome.decayed += 1
        outcome.results.append(
            result.model_copy(
                update={
                    "score": degraded_score(result.score, strength),
                    "current_strength": strength,
                }
            )
        )

    return outcome


def rescore_matches(
    results: List[RankedResult],
    mode: MemoryMode,
    boost: Optional[FocusBoost],
    now: datetime,
) -> RescoreOutcome:
    """
    Run the full rescoring pipeline over raw vector matches.

    Args:
        results: Matches in vector index order (score = raw similarity)
        mode: Searching user's current memory mode
        boost: Active focus boost, if any
        now: Reference time for decay

    Returns:
        RescoreOutcome with results sorted by final score (descending)
    """
    if mode == MemoryMode.HUMANIZED:
        outcome = apply_degradation(results, now)
    else:
        outcome = RescoreOutcome(results=list(results), candidates=len(results))

    if boost is not None:
        outcome.results = apply_focus_boost(outcome.results, boost)
        outcome.boosted = sum(1 for r in outcome.results if r.boosted)

    # sorted() is stable: equal scores keep vector index order
    outcome.results = sorted(outcome.results, key=lambda r: r.score, reverse=True)

    logger.debug(
        f"Rescored {outcome.candidates} matches: {outcome.decayed} decayed, "
        f"{outcome.forgotten} forgotten, {outcome.boosted} boosted"
    )

    return outcome
