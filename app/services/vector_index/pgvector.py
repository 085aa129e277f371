"""pgvector-backed vector index."""

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable

from sqlalchemy import and_, delete, not_, or_, select, true
from sqlalchemy.dialects.postgresql import array
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session

from app.core.database import get_db_session
from app.models.database.memory_vectors import MemoryVector
from .base import VectorIndex, VectorMatch
from .filters import UnsupportedFilterError

logger = logging.getLogger(__name__)


def compile_filter(column, filter: dict[str, Any] | None) -> ColumnElement:
    """
    Compile a Pinecone-style filter dict to a JSONB predicate.

    Semantics mirror filters.matches_filter: string $eq/$in use the JSONB
    ? / ?| operators, which match both scalar strings and array elements.
    """
    if not filter:
        return true()

    clauses = []
    for key, condition in filter.items():
        if key == "$and":
            clauses.append(and_(*[compile_filter(column, sub) for sub in condition]))
        elif key == "$or":
            clauses.append(or_(*[compile_filter(column, sub) for sub in condition]))
        elif key.startswith("$"):
            raise UnsupportedFilterError(f"Unsupported logical operator: {key}")
        else:
            clauses.append(_compile_field(column[key], condition))

    return and_(*clauses)


def _compile_field(element, condition: Any) -> ColumnElement:
    if not isinstance(condition, dict):
        condition = {"$eq": condition}

    clauses = []
    for op, operand in condition.items():
        if op == "$eq":
            clauses.append(_equals(element, operand))
        elif op == "$ne":
            clauses.append(or_(element.is_(None), not_(_equals(element, operand))))
        elif op == "$in":
            clauses.append(_contains_any(element, operand))
        elif op == "$nin":
            clauses.append(or_(element.is_(None), not_(_contains_any(element, operand))))
        elif op == "$gt":
            clauses.append(element.as_float() > operand)
        elif op == "$gte":
            clauses.append(element.as_float() >= operand)
        elif op == "$lt":
            clauses.append(element.as_float() < operand)
        elif op == "$lte":
            clauses.append(element.as_float() <= operand)
        else:
            raise UnsupportedFilterError(f"Unsupported field operator: {op}")

    return and_(*clauses)


def _equals(element, operand: Any) -> ColumnElement:
    if isinstance(operand, bool):
        return element.as_boolean() == operand
    if isinstance(operand, (int, float)):
        return element.as_float() == operand
    return element.has_key(str(operand))


def _contains_any(element, operands: list[Any]) -> ColumnElement:
    if operands and all(isinstance(o, (int, float)) and not isinstance(o, bool) for o in operands):
        return element.as_float().in_(operands)
    return element.has_any(array([str(o) for o in operands]))


class PgVectorIndex(VectorIndex):
    """
    Vector index stored in PostgreSQL via pgvector.

    Similarity is cosine: score = 1 - (embedding <=> query).
    Each call runs in its own session (commit on success).
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractContextManager[Session]] = get_db_session,
    ):
        self._session_factory = session_factory

    def upsert(self, vector_id: str, values: list[float], metadata: dict[str, Any]) -> None:
        with self._session_factory() as session:
            session.merge(MemoryVector(id=vector_id, embedding=values, meta=metadata))

    def query(
        self,
        vector: list[float],
        filter: dict[str, Any] | None = None,
        top_k: int = 10,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        statement = build_query_statement(vector, filter, top_k)

        with self._session_factory() as session:
            rows = session.execute(statement).all()

        return [
            VectorMatch(
                id=row.id,
                score=1 - float(row.distance),
                metadata=dict(row.meta) if include_metadata else {},
            )
            for row in rows
        ]

    def delete(self, vector_ids: list[str]) -> None:
        if not vector_ids:
            return
        with self._session_factory() as session:
            session.execute(delete(MemoryVector).where(MemoryVector.id.in_(vector_ids)))

    @property
    def name(self) -> str:
        return "pgvector"


def build_query_statement(vector: list[float], filter: dict[str, Any] | None, top_k: int):
    """Nearest-neighbour SELECT restricted by the compiled metadata filter."""
    distance = MemoryVector.embedding.cosine_distance(vector)
    return (
        select(MemoryVector.id, MemoryVector.meta, distance.label("distance"))
        .where(compile_filter(MemoryVector.meta, filter))
        .order_by(distance)
        .limit(min(top_k, 100))
    )
