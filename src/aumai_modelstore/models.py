"""Pydantic models for aumai-modelstore."""

from __future__ import annotations

import hashlib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "DEFAULT_PROTOCOL_SCHEME",
    "DEFAULT_REGISTRY",
    "LEGACY_REGISTRY",
    "DEFAULT_NAMESPACE",
    "DEFAULT_TAG",
    "Digest",
    "ModelReference",
]

DEFAULT_PROTOCOL_SCHEME = "https"
DEFAULT_REGISTRY = "ollama.com"
LEGACY_REGISTRY = "registry.ollama.ai"
DEFAULT_NAMESPACE = "library"
DEFAULT_TAG = "latest"


class Digest(BaseModel):
    """A validated content digest, e.g. ``sha256`` plus 64 hex characters."""

    model_config = ConfigDict(frozen=True)

    algorithm: str
    hex: str

    @classmethod
    def from_bytes(cls, data: bytes) -> Digest:
        """Return the sha256 digest of *data*."""
        return cls(algorithm="sha256", hex=hashlib.sha256(data).hexdigest())

    @property
    def filename(self) -> str:
        """Filesystem-safe form, ``<algorithm>-<hex>``."""
        return f"{self.algorithm}-{self.hex}"

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hex}"


class ModelReference(BaseModel):
    """
    A fully resolved model reference.

    Every field is populated; omitted parts of the input string are filled
    with the canonical defaults by ``parse_model_reference``.
    """

    model_config = ConfigDict(frozen=True)

    protocol_scheme: str = Field(DEFAULT_PROTOCOL_SCHEME, min_length=1)
    registry: str = Field(DEFAULT_REGISTRY, min_length=1)
    namespace: str = Field(DEFAULT_NAMESPACE, min_length=1)
    repository: str = Field(..., min_length=1)
    tag: str = Field(DEFAULT_TAG, min_length=1)

    @property
    def namespace_repository(self) -> str:
        return f"{self.namespace}/{self.repository}"

    @property
    def full_tagname(self) -> str:
        return f"{self.registry}/{self.namespace}/{self.repository}:{self.tag}"

    @property
    def short_tagname(self) -> str:
        """
        Tag name with canonical parts dropped.

        The registry is omitted when it is the canonical one, and the
        namespace is omitted too when it is also the canonical one.
        """
        if self.registry == DEFAULT_REGISTRY:
            if self.namespace == DEFAULT_NAMESPACE:
                return f"{self.repository}:{self.tag}"
            return f"{self.namespace}/{self.repository}:{self.tag}"
        return self.full_tagname

    @property
    def base_url(self) -> str:
        return f"{self.protocol_scheme}://{self.registry}"

    def manifest_path(self, models_root: str | Path) -> Path:
        """Return ``<models_root>/manifests/<registry>/<namespace>/<repository>/<tag>``."""
        root = Path(models_root).expanduser().absolute()
        return (
            root / "manifests" / self.registry / self.namespace
            / self.repository / self.tag
        )

    def __str__(self) -> str:
        return self.full_tagname
