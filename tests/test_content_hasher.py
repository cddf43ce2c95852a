"""Tests for SHA-1 content digests."""

import hashlib

from transfer.content_hasher import compute_digest


def test_digest_of_empty_input():
    assert compute_digest(b"") == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_digest_known_value():
    assert compute_digest(b"abc") == "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_digest_is_40_lowercase_hex_chars():
    digest = compute_digest(bytes(range(256)))

    assert len(digest) == 40
    assert digest == digest.lower()
    int(digest, 16)


def test_digest_keeps_leading_zero_bytes():
    """A byte below 0x10 is still rendered as two hex digits."""
    data = next(
        bytes([i]) for i in range(256) if hashlib.sha1(bytes([i])).digest()[0] < 0x10
    )

    digest = compute_digest(data)

    assert digest.startswith("0")
    assert len(digest) == 40


def test_identical_bytes_give_identical_digests():
    assert compute_digest(b"thumbnail" * 100) == compute_digest(b"thumbnail" * 100)
    assert compute_digest(b"thumbnail-a") != compute_digest(b"thumbnail-b")
