"""
Memory search filter - builds the vector index pre-filter.

Precedence:
1. user_id always equals the caller (no cross-user reads).
2. Privacy: public/contextual by default. With include_private, private
   memories become visible, restricted to private_tags when given.
   Vault memories are never reachable through search.
3. categories, 4. memory_types, 5. min_importance (inclusive) when given.

The index prunes by static metadata here; decay and focus rescoring run
afterwards on whatever it returns.
"""

from typing import Any, Dict
from uuid import UUID

from app.models.database.memories import PrivacyLevel
from app.models.dto.retrieval import SearchOptions

DEFAULT_VISIBLE_LEVELS = [PrivacyLevel.PUBLIC.value, PrivacyLevel.CONTEXTUAL.value]


def build_memory_filter(user_id: UUID, options: SearchOptions) -> Dict[str, Any]:
    """
    Build a Pinecone-style filter dict (sibling keys are ANDed).

    Examples:
        default:
            {"user_id": {"$eq": uid}, "privacy_level": {"$in": ["public", "contextual"]}}
        include_private with private_tags=["health"]:
            {"user_id": {"$eq": uid}, "$or": [
                {"privacy_level": {"$in": ["public", "contextual"]}},
                {"$and": [{"privacy_level": {"$eq": "private"}},
                          {"tags": {"$in": ["health"]}}]}]}
    """
    filter: Dict[str, Any] = {"user_id": {"$eq": str(user_id)}}

    if not options.include_private:
        filter["privacy_level"] = {"$in": list(DEFAULT_VISIBLE_LEVELS)}
    elif options.private_tags:
        filter["$or"] = [
            {"privacy_level": {"$in": list(DEFAULT_VISIBLE_LEVELS)}},
            {
                "$and": [
                    {"privacy_level": {"$eq": PrivacyLevel.PRIVATE.value}},
                    {"tags": {"$in": list(options.private_tags)}},
                ]
            },
        ]
    else:
        filter["privacy_level"] = {"$in": DEFAULT_VISIBLE_LEVELS + [PrivacyLevel.PRIVATE.value]}

    if options.categories:
        filter["category"] = {"$in": list(options.categories)}

    if options.memory_types:
        filter["memory_type"] = {"$in": [t.value for t in options.memory_types]}

    if options.min_importance is not None:
        filter["importance"] = {"$gte": options.min_importance}

    return filter
