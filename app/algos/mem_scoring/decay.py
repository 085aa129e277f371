"""
Decay model.

Humanized memories lose strength exponentially with age:

    current_strength = strength * (1 - decay_rate / 100) ** months_elapsed

where a month is 30 days. The decay rate is fixed per memory at write time
from its importance and the owner's memory mode. Strength is a read-time
view: it is recomputed on every query and never persisted.
"""

from datetime import datetime, timezone
from typing import Optional

from app.models.database.user import MemoryMode

BASE_DECAY_PERCENT = 50
"""Monthly decay for a memory of importance 0 (humanized mode)."""

MAX_IMPORTANCE = 10
MAX_STRENGTH = 10

FORGETTING_THRESHOLD = 1.0
"""Results whose current strength falls below this are dropped from retrieval."""

SECONDS_PER_MONTH = 30 * 86400


def decay_rate_for(importance: int, mode: MemoryMode) -> int:
    """
    Compute the monthly decay percentage for a new memory.

    Args:
        importance: Memory importance, integer 0-10
        mode: Owner's memory mode at write time

    Returns:
        Percent-per-month decay (0 for persistent mode, 0-50 otherwise)

    Examples:
        - importance 10, humanized → 0
        - importance 5, humanized → 25
        - importance 0, humanized → 50
        - any importance, persistent → 0
    """
    if isinstance(importance, bool) or not isinstance(importance, int):
        raise ValueError(f"importance must be an integer, got {importance!r}")
    if not 0 <= importance <= MAX_IMPORTANCE:
        raise ValueError(f"importance must be within 0-{MAX_IMPORTANCE}, got {importance}")

    if mode == MemoryMode.PERSISTENT:
        return 0

    importance_factor = (MAX_IMPORTANCE - importance) / MAX_IMPORTANCE
    return int(round(BASE_DECAY_PERCENT * importance_factor))


def months_elapsed(created_at: datetime, now: Optional[datetime] = None) -> float:
    """Fractional 30-day months between creation and now (never negative)."""
    if now is None:
        now = datetime.now(timezone.utc)

    # Handle naive datetimes by assuming UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    age_seconds = (now - created_at).total_seconds()

    # Future timestamps (clock skew) = no decay yet
    if age_seconds <= 0:
        return 0.0

    return age_seconds / SECONDS_PER_MONTH


def current_strength(
    strength: float,
    decay_rate: float,
    is_permanent: bool,
    created_at: datetime,
    now: Optional[datetime] = None,
) -> float:
    """
    Effective strength of a memory at `now`.

    Permanent memories keep their stored strength. Everything else decays
    exponentially; decay_rate 0 leaves strength unchanged.
    """
    if is_permanent:
        return float(strength)

    months = months_elapsed(created_at, now)
    decay_factor = (1 - decay_rate / 100) ** months
    return strength * decay_factor


def degraded_score(raw_score: float, strength: float) -> float:
    """Scale a similarity score by current strength (strength 10 = unchanged)."""
    return raw_score * (strength / MAX_STRENGTH)


def is_forgotten(strength: float) -> bool:
    """True when a memory has faded below the forgetting threshold."""
    return strength < FORGETTING_THRESHOLD
