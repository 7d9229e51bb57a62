"""skillkit utilities."""

from skillkit.utils.helpers import hash_bytes, truncate_string
from skillkit.utils.logging import get_logger, setup_logging

__all__ = [
    "hash_bytes",
    "truncate_string",
    "setup_logging",
    "get_logger",
]
