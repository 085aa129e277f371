"""
Memory System - dual-mode memory storage and retrieval.

Two memory modes per user:
- PERSISTENT: everything forever, no decay
- HUMANIZED: strength erodes with age, slower for important memories

Writes: text → fingerprint (dedup) → embedding → vector upsert → relational row.
Reads: query → embedding → filtered vector search → decay → focus boost →
sort → access bookkeeping.

Usage:
    with get_db_session() as db:
        memory_system = MemorySystem.from_settings(db)
        memory_id = memory_system.store_memory(user_id, "Prefers morning meetings")
        results = memory_system.search_memories(user_id, "when to schedule calls")
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.algos.fingerprint import compute_content_hash
from app.algos.mem_scoring.decay import decay_rate_for
from app.algos.mem_scoring.focus import FocusBoost, encode_boost_factor
from app.algos.mem_scoring.combined import rescore_matches
from app.core.config import settings
from app.core.logging_config import RedactSecretsFilter
from app.domain.exceptions import (
    DomainValidationError,
    DuplicateEntityError,
    MemoryBackendUnavailableError,
    MemoryOperationError,
)
from app.domain.focus_session_operations import FocusSessionOperations
from app.domain.memory_filters import build_memory_filter
from app.domain.memory_operations import MemoryOperations
from app.domain.user_operations import UserOperations
from app.models.database.memories import MemoryCreate, PrivacyLevel
from app.models.database.mixins.timestamp import utc_now
from app.models.database.user import MemoryMode
from app.models.dto.retrieval import (
    FocusModeConfig,
    MemoryStats,
    RankedResult,
    RetrievalReport,
    SearchOptions,
    StoreMemoryOptions,
)
from app.services.embeddings import EmbeddingProvider, get_embedding_provider
from app.services.vector_index import VectorIndex, get_vector_index

logger = logging.getLogger(__name__)


class MemorySystem:
    """
    Orchestrates memory writes, retrieval and mode/focus management for one unit of work.

    Constructed per request with an explicit database session; the caller
    owns the transaction (commit/rollback). Collaborator failures surface as
    MemoryOperationError; nothing is retried here.
    """

    def __init__(
        self,
        session: Session,
        embeddings: Optional[EmbeddingProvider],
        vector_index: Optional[VectorIndex],
        clock: Callable[[], datetime] = utc_now,
        metadata_content_limit: int | None = None,
    ):
        """
        Initialize MemorySystem.

        Args:
            session: Database session (caller manages transactions)
            embeddings: Embedding provider (may be None when the index is not configured)
            vector_index: Vector index, or None when not configured
            clock: Source of "now" (injectable for tests)
            metadata_content_limit: Max content chars stored beside each vector
        """
        self.session = session
        self.embeddings = embeddings
        self.vector_index = vector_index
        self.clock = clock
        if metadata_content_limit is None:
            metadata_content_limit = settings.VECTOR_METADATA_CONTENT_LIMIT
        self.metadata_content_limit = metadata_content_limit

    @classmethod
    def from_settings(cls, session: Session) -> "MemorySystem":
        """Wire the configured embedding provider and vector index."""
        vector_index = get_vector_index()
        embeddings = get_embedding_provider() if vector_index is not None else None
        return cls(session, embeddings=embeddings, vector_index=vector_index)

    # ─────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────

    def store_memory(
        self,
        user_id: UUID,
        content: str,
        options: Optional[StoreMemoryOptions] = None,
    ) -> UUID:
        """
        Store a memory, or return the existing id for identical content.

        Duplicate content (same user, byte-identical text) is a no-op: no
        vector, no row, no field updates. Decay rate and permanence are
        fixed here from importance and the user's current mode.

        Raises:
            MemoryBackendUnavailableError: vector index not configured
            DomainValidationError: empty content or text that is not valid UTF-8
            MemoryOperationError: embedding, vector index or insert failure
        """
        options = options or StoreMemoryOptions()

        if self.vector_index is None:
            raise MemoryBackendUnavailableError()

        if not content or not content.strip():
            raise DomainValidationError("Memory content cannot be empty")

        try:
            content.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise DomainValidationError(f"Memory content is not valid UTF-8: {exc.reason}") from exc

        content_hash = compute_content_hash(content)

        existing = MemoryOperations.get_by_content_hash(self.session, user_id, content_hash)
        if existing:
            logger.info(f"Duplicate memory detected for user {user_id}, returning {existing.id}")
            return existing.id

        memory_mode = UserOperations.get_memory_mode(self.session, user_id)
        decay_rate = decay_rate_for(options.importance, memory_mode)
        is_permanent = memory_mode == MemoryMode.PERSISTENT
        requires_auth = options.privacy_level == PrivacyLevel.VAULT
        now = self.clock()

        embedding = self._embed(content, "store_memory", user_id)

        vector_id = self._new_vector_id(user_id, now)
        metadata = {
            "user_id": str(user_id),
            "chat_id": options.chat_id or "",
            "content": content[: self.metadata_content_limit],
            "content_hash": content_hash,
            "memory_type": options.memory_type.value,
            "privacy_level": options.privacy_level.value,
            "category": options.category or "",
            "tags": list(options.tags),
            "importance": options.importance,
            "strength": 10,
            "decay_rate": decay_rate,
            "is_permanent": is_permanent,
            "requires_auth": requires_auth,
            "timestamp": now.isoformat(),
        }

        try:
            self.vector_index.upsert(vector_id, embedding, metadata)
        except Exception as exc:
            raise self._wrap("store_memory.upsert", user_id, exc) from exc

        data = MemoryCreate(
            user_id=user_id,
            chat_id=options.chat_id,
            content=content,
            content_hash=content_hash,
            vector_id=vector_id,
            memory_type=options.memory_type,
            privacy_level=options.privacy_level,
            category=options.category,
            tags=list(options.tags),
            importance=options.importance,
            strength=10,
            decay_rate=decay_rate,
            is_permanent=is_permanent,
            requires_auth=requires_auth,
            meta={
                "source": "chat",
                "context": f"chat:{options.chat_id}" if options.chat_id else "manual",
            },
            created_at=now,
        )

        try:
            memory = MemoryOperations.create(self.session, data)
        except DuplicateEntityError as exc:
            # A concurrent writer stored the same content first: keep theirs
            self._discard_vector(vector_id, user_id)
            winner = MemoryOperations.get_by_content_hash(self.session, user_id, content_hash)
            if winner is None:
                raise self._wrap("store_memory.insert", user_id, exc) from exc
            logger.info(f"Duplicate memory resolved on insert for user {user_id}, returning {winner.id}")
            return winner.id
        except IntegrityError as exc:
            self._discard_vector(vector_id, user_id)
            raise self._wrap("store_memory.insert", user_id, exc.orig or exc) from exc

        logger.info(
            f"Stored memory {memory.id} in {memory_mode.value} mode "
            f"(importance: {options.importance}, decay: {decay_rate}%/month)"
        )
        return memory.id

    # ─────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────

    def search_memories(
        self,
        user_id: UUID,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> List[RankedResult]:
        """Semantic search with decay and focus rescoring. See search_memories_with_report."""
        return self.search_memories_with_report(user_id, query, options).results

    def search_memories_with_report(
        self,
        user_id: UUID,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> RetrievalReport:
        """
        Search a user's memories and report what rescoring did.

        Pipeline (strict order):
        1. Not configured → empty report (no error)
        2. Embed query
        3. Build privacy/category/type filter
        4. Query vector index (top_k, metadata included)
        5. Humanized mode: decay scores, drop forgotten memories
        6. Apply active focus boost
        7. Sort by final score
        8. Record access on returned memories

        Raises:
            MemoryOperationError: embedding or vector index failure
        """
        options = options or SearchOptions()

        if self.vector_index is None:
            logger.warning("Memory search skipped - vector index not configured")
            return RetrievalReport(backend_configured=False)

        now = self.clock()

        query_vector = self._embed(query, "search_memories", user_id)
        memory_filter = build_memory_filter(user_id, options)

        try:
            matches = self.vector_index.query(
                query_vector,
                filter=memory_filter,
                top_k=options.top_k,
                include_metadata=True,
            )
        except Exception as exc:
            raise self._wrap("search_memories.query", user_id, exc) from exc

        candidates = [
            RankedResult(vector_id=m.id, score=m.score, similarity=m.score, metadata=m.metadata)
            for m in matches
            if self._visible(user_id, m.metadata)
        ]

        memory_mode = UserOperations.get_memory_mode(self.session, user_id)
        boost = self.get_active_boost(user_id, now=now)

        outcome = rescore_matches(candidates, memory_mode, boost, now)

        MemoryOperations.record_access(
            self.session,
            user_id,
            [r.vector_id for r in outcome.results],
            accessed_at=now,
        )

        logger.info(
            f"Memory search for user {user_id}: {len(outcome.results)}/{len(matches)} returned "
            f"({memory_mode.value}, {outcome.forgotten} forgotten, {outcome.boosted} boosted)"
        )

        return RetrievalReport(
            results=outcome.results,
            mode=memory_mode,
            candidates=outcome.candidates,
            decayed=outcome.decayed,
            forgotten=outcome.forgotten,
            boosted=outcome.boosted,
            focus_active=boost is not None,
        )

    def get_memory_stats(self, user_id: UUID) -> MemoryStats:
        """Aggregate counts and averages over the user's stored memories."""
        return MemoryOperations.get_stats(self.session, user_id)

    # ─────────────────────────────────────────────────────────────
    # Mode & Focus
    # ─────────────────────────────────────────────────────────────

    def toggle_memory_mode(self, user_id: UUID, mode: MemoryMode) -> None:
        """Switch mode for future writes. Existing memories keep their decay settings."""
        UserOperations.set_memory_mode(self.session, user_id, mode)
        logger.info(f"User {user_id} switched to {mode.value} mode")

    def activate_focus_mode(self, user_id: UUID, config: FocusModeConfig) -> UUID:
        """Start a focus session (replacing any active one). Returns the session id."""
        focus = FocusSessionOperations.activate(
            self.session,
            user_id=user_id,
            categories=config.categories,
            boost_factor_x100=encode_boost_factor(config.boost_factor),
            duration_hours=config.duration_hours,
            now=self.clock(),
        )
        logger.info(
            f"Focus mode activated for user {user_id}: {', '.join(config.categories)} "
            f"x{config.boost_factor} until {focus.expires_at.isoformat()}"
        )
        return focus.id

    def deactivate_focus_mode(self, user_id: UUID) -> int:
        """End the active focus session, if any. Idempotent; returns sessions deactivated."""
        count = FocusSessionOperations.deactivate_all(self.session, user_id)
        logger.info(f"Focus mode deactivated for user {user_id} ({count} session(s))")
        return count

    def get_active_boost(self, user_id: UUID, now: Optional[datetime] = None) -> Optional[FocusBoost]:
        """Boost of the user's unexpired active focus session, or None."""
        focus = FocusSessionOperations.get_active(self.session, user_id, now or self.clock())
        if focus is None:
            return None
        return FocusBoost.from_stored(focus.categories, focus.boost_factor, focus.expires_at)

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    def _embed(self, text: str, operation: str, user_id: UUID) -> List[float]:
        if self.embeddings is None:
            raise MemoryOperationError(operation, user_id, detail="embedding provider not configured")
        try:
            return self.embeddings.embed_text(text)
        except Exception as exc:
            raise self._wrap(f"{operation}.embed", user_id, exc) from exc

    def _discard_vector(self, vector_id: str, user_id: UUID) -> None:
        try:
            self.vector_index.delete([vector_id])
        except Exception as exc:
            raise self._wrap("store_memory.cleanup", user_id, exc) from exc

    @staticmethod
    def _visible(user_id: UUID, metadata: dict) -> bool:
        # Backends must honour the filter; vault and foreign rows are dropped regardless
        if metadata.get("user_id") != str(user_id):
            logger.warning(f"Vector index returned a foreign memory for user {user_id}; dropped")
            return False
        return metadata.get("privacy_level") != PrivacyLevel.VAULT.value

    @staticmethod
    def _new_vector_id(user_id: UUID, now: datetime) -> str:
        return f"{user_id}_{int(now.timestamp() * 1000)}_{uuid4().hex[:12]}"

    @staticmethod
    def _wrap(operation: str, user_id: UUID, exc: Exception) -> MemoryOperationError:
        detail = RedactSecretsFilter.redact(f"{type(exc).__name__}: {exc}")
        logger.error(f"{operation} failed for user {user_id}: {detail}")
        return MemoryOperationError(operation, user_id, detail=detail)
