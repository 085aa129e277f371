"""
Content fingerprint for exact-text deduplication.

No normalization is applied: whitespace and case differences produce
different fingerprints. Callers wanting fuzzy dedup normalize first.
"""

import hashlib


def compute_content_hash(content: str) -> str:
    """SHA-256 hex digest of the UTF-8 encoded content (64 chars)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
