"""
Focus boost.

While a focus session is active, results whose category matches one of
the session's categories have their score multiplied by the boost factor.
Matching is case-insensitive substring containment in one direction:
the memory's category must contain the focus term ("stewart-golf"
matches focus "golf", but "golf" does not match focus "stewart-golf").
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from app.models.dto.retrieval import RankedResult


@dataclass(frozen=True)
class FocusBoost:
    """Active boost configuration for one user."""

    categories: Tuple[str, ...]
    boost_factor: float
    expires_at: Optional[datetime] = None

    @classmethod
    def from_stored(
        cls,
        categories: Iterable[str],
        boost_factor_x100: int,
        expires_at: Optional[datetime] = None,
    ) -> "FocusBoost":
        """Build from persisted form (boost stored as integer x100: 200 → 2.0)."""
        return cls(
            categories=tuple(categories),
            boost_factor=boost_factor_x100 / 100,
            expires_at=expires_at,
        )


def encode_boost_factor(boost_factor: float) -> int:
    """Float multiplier → persisted integer x100 (2.0 → 200)."""
    return int(round(boost_factor * 100))


def category_matches(category: Optional[str], focus_categories: Iterable[str]) -> bool:
    """True when the category contains any (non-empty) focus term, ignoring case."""
    if not category:
        return False

    haystack = category.lower()
    return any(term and term.lower() in haystack for term in focus_categories)


def apply_focus_boost(results: List[RankedResult], boost: FocusBoost) -> List[RankedResult]:
    """Return results with matching scores multiplied; non-matching results unchanged."""
    boosted: List[RankedResult] = []

    for result in results:
        if category_matches(result.category, boost.categories):
            result = result.model_copy(
                update={"score": result.score * boost.boost_factor, "boosted": True}
            )
        boosted.append(result)

    return boosted
