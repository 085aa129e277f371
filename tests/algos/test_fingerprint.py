"""Tests for content fingerprints."""
from app.algos.fingerprint import compute_content_hash


def test_hash_is_sha256_hex():
    digest = compute_content_hash("hello")
    assert digest == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"


def test_hash_is_exact_text():
    assert compute_content_hash("Hello") != compute_content_hash("hello")
    assert compute_content_hash("hello ") != compute_content_hash("hello")
