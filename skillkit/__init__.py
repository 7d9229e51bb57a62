"""skillkit - discover, validate and progressively load agent skill packages."""

__version__ = "0.1.0"
