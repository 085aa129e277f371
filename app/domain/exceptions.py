"""Domain-layer exceptions.

Raised by domain and service code; callers (any RPC or HTTP adapter)
map them to their own error surface.
"""


class EntityNotFoundError(Exception):
    """Entity not found."""

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        msg = f"{entity} {entity_id} not found" if entity_id else f"{entity} not found"
        super().__init__(msg)


class DuplicateEntityError(Exception):
    """Duplicate entity or constraint violation."""

    def __init__(self, entity: str, detail: str = ""):
        self.entity = entity
        self.detail = detail
        msg = f"Duplicate {entity}: {detail}" if detail else f"Duplicate {entity}"
        super().__init__(msg)


class DomainValidationError(Exception):
    """Business-rule validation failure."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class MemoryBackendUnavailableError(Exception):
    """Vector index is not configured. Writes raise this; searches degrade to no results."""

    def __init__(self, detail: str = "Vector index not configured - set VECTOR_INDEX_BACKEND"):
        self.detail = detail
        super().__init__(detail)


class MemoryOperationError(Exception):
    """A collaborator (embeddings, vector index) failed during a memory operation."""

    def __init__(self, operation: str, user_id=None, memory_id=None, detail: str = ""):
        self.operation = operation
        self.user_id = user_id
        self.memory_id = memory_id
        self.detail = detail

        parts = [f"{operation} failed"]
        if user_id is not None:
            parts.append(f"user={user_id}")
        if memory_id is not None:
            parts.append(f"memory={memory_id}")
        msg = " ".join(parts)
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
