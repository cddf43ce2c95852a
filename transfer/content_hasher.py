"""Provides SHA-1 content digests used to name deduplicated thumbnail objects."""

import hashlib


def compute_digest(data: bytes) -> str:
    """
    Compute the SHA-1 digest of the given data.

    Args:
        data: Bytes to digest

    Returns:
        40-character lowercase hexadecimal string
    """
    return hashlib.sha1(data).hexdigest()
