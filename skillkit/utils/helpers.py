"""Utility functions for skillkit."""

import hashlib


def hash_bytes(content: bytes) -> str:
    """Generate SHA256 hash of content."""
    return hashlib.sha256(content).hexdigest()


def truncate_string(s: str, max_length: int = 200) -> str:
    """Truncate string to max length with ellipsis."""
    if len(s) <= max_length:
        return s
    return s[:max_length - 3] + "..."
