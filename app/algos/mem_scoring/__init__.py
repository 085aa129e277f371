# Memory scoring algorithms
# Pure functions for computing retrieval scores

from app.algos.mem_scoring.decay import (
    FORGETTING_THRESHOLD,
    decay_rate_for,
    current_strength,
    degraded_score,
    is_forgotten,
)
from app.algos.mem_scoring.focus import (
    FocusBoost,
    apply_focus_boost,
    category_matches,
)
from app.algos.mem_scoring.combined import (
    RescoreOutcome,
    rescore_matches,
)

__all__ = [
    "FORGETTING_THRESHOLD",
    "decay_rate_for",
    "current_strength",
    "degraded_score",
    "is_forgotten",
    "FocusBoost",
    "apply_focus_boost",
    "category_matches",
    "RescoreOutcome",
    "rescore_matches",
]
