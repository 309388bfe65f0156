"""External service integrations."""

from integrations.clair_api import ClairClient

__all__ = [
    "ClairClient",
]
