"""Package version."""

GUARDS_VERSION = "0.1.0"

__all__ = ["GUARDS_VERSION"]
