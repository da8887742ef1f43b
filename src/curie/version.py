"""Version information for :mod:`curie`."""

__all__ = [
    "VERSION",
    "get_version",
]

VERSION = "0.1.0-dev"


def get_version() -> str:
    """Get the :mod:`curie` version string."""
    return VERSION
