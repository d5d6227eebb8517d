"""Error kinds raised by aumai-modelstore."""

from __future__ import annotations

__all__ = [
    "ModelStoreError",
    "InvalidDigestFormatError",
    "EmptyRepositoryError",
    "MigrationError",
]


class ModelStoreError(Exception):
    """Base class for every error raised by this package."""


class InvalidDigestFormatError(ModelStoreError, ValueError):
    """A digest string failed validation.

    The message never says which check failed; callers should only rely on
    the error kind.
    """

    def __init__(self, digest: str) -> None:
        super().__init__(f"invalid digest format: {digest!r}")
        self.digest = digest


class EmptyRepositoryError(ModelStoreError, ValueError):
    """A model reference has no repository component."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"model reference {reference!r} has no repository")
        self.reference = reference


class MigrationError(ModelStoreError, OSError):
    """A filesystem operation failed during the registry domain migration."""
