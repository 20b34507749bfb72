"""Custom exceptions used across spritediff."""

__all__ = ["InvalidSnapshotError"]


class InvalidSnapshotError(Exception):
    """Raised when a document snapshot cannot be loaded."""

    pass
