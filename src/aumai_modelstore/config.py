"""Configuration for aumai-modelstore."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

__all__ = [
    "MODELS_ENV_VAR",
    "StoreConfig",
    "default_models_root",
]

MODELS_ENV_VAR = "OLLAMA_MODELS"


def default_models_root() -> Path:
    """Return ``~/.ollama/models`` for the current user."""
    return Path.home() / ".ollama" / "models"


class StoreConfig(BaseModel):
    """Configuration for the model store.

    Attributes:
        models_root: Directory holding the ``blobs`` and ``manifests`` trees.
    """

    models_root: Path = Field(
        default_factory=default_models_root,
        description="Directory holding the blobs and manifests trees",
    )

    @field_validator("models_root")
    @classmethod
    def _expand_root(cls, value: Path) -> Path:
        return value.expanduser().absolute()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StoreConfig:
        """Build a config from ``OLLAMA_MODELS``, falling back to the default root."""
        env = os.environ if environ is None else environ
        value = env.get(MODELS_ENV_VAR)
        if value:
            return cls(models_root=Path(value))
        return cls()
