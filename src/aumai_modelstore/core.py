"""Core logic for aumai-modelstore."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .config import StoreConfig
from .errors import EmptyRepositoryError, InvalidDigestFormatError, MigrationError
from .models import (
    DEFAULT_NAMESPACE,
    DEFAULT_PROTOCOL_SCHEME,
    DEFAULT_REGISTRY,
    DEFAULT_TAG,
    LEGACY_REGISTRY,
    Digest,
    ModelReference,
)

__all__ = [
    "DirectoryTree",
    "LocalDirectoryTree",
    "MigrationReport",
    "ModelStore",
    "get_blobs_path",
    "migrate_registry_domain",
    "normalize_digest",
    "parse_digest",
    "parse_model_reference",
]

logger = logging.getLogger(__name__)

_BLOBS_DIR = "blobs"
_MANIFESTS_DIR = "manifests"

# Hex payload length per supported algorithm.
_DIGEST_LENGTHS = {"sha256": 64}
_HEX_DIGITS = frozenset("0123456789abcdef")


def _models_root(models_root: str | Path) -> Path:
    return Path(models_root).expanduser().absolute()


# ---------------------------------------------------------------------------
# Digests and blob paths
# ---------------------------------------------------------------------------


def parse_digest(digest: str) -> Digest:
    """
    Validate *digest* and return it as a ``Digest``.

    Both ``sha256:<hex>`` and ``sha256-<hex>`` are accepted. Any other shape
    raises ``InvalidDigestFormatError``, including the empty string.
    """
    separators = [i for i in (digest.find(":"), digest.find("-")) if i >= 0]
    if not separators:
        raise InvalidDigestFormatError(digest)

    split_at = min(separators)
    algorithm, payload = digest[:split_at], digest[split_at + 1:]

    expected_length = _DIGEST_LENGTHS.get(algorithm)
    if expected_length is None:
        raise InvalidDigestFormatError(digest)
    if len(payload) != expected_length or not _HEX_DIGITS.issuperset(payload):
        raise InvalidDigestFormatError(digest)

    return Digest(algorithm=algorithm, hex=payload)


def normalize_digest(digest: str) -> str:
    """Return *digest* in ``<algorithm>-<hex>`` form, or ``""`` for no digest."""
    if digest == "":
        return ""
    return parse_digest(digest).filename


def get_blobs_path(models_root: str | Path, digest: str = "") -> Path:
    """
    Return the blob path for *digest* under *models_root*.

    An empty digest addresses the blobs directory itself. The path is
    computed only; nothing on disk is checked or created.
    """
    filename = normalize_digest(digest)
    blobs = _models_root(models_root) / _BLOBS_DIR
    if not filename:
        return blobs
    return blobs / filename


# ---------------------------------------------------------------------------
# Model references
# ---------------------------------------------------------------------------


def parse_model_reference(reference: str) -> ModelReference:
    """
    Parse a model reference such as ``example.com/ns/repo:tag``.

    The string is peeled from the outside in: the scheme, then the tag,
    then the path segments from the left. Omitted or empty components take
    their canonical defaults; only a missing repository is an error.
    """
    rest = reference
    scheme = DEFAULT_PROTOCOL_SCHEME
    if "://" in rest:
        scheme, rest = rest.split("://", 1)

    tag = DEFAULT_TAG
    head, sep, tail = rest.rpartition(":")
    # A colon followed by a slash is a registry port, not a tag.
    if sep and "/" not in tail:
        rest, tag = head, tail

    registry = DEFAULT_REGISTRY
    namespace = DEFAULT_NAMESPACE
    parts = rest.split("/")
    if len(parts) == 1:
        repository = parts[0]
    elif len(parts) == 2:
        namespace, repository = parts
    else:
        registry, namespace = parts[0], parts[1]
        repository = "/".join(parts[2:])

    if not repository:
        raise EmptyRepositoryError(reference)

    return ModelReference(
        protocol_scheme=scheme or DEFAULT_PROTOCOL_SCHEME,
        registry=registry or DEFAULT_REGISTRY,
        namespace=namespace or DEFAULT_NAMESPACE,
        repository=repository,
        tag=tag or DEFAULT_TAG,
    )


# ---------------------------------------------------------------------------
# Manifest registry domain migration
# ---------------------------------------------------------------------------


class DirectoryTree(Protocol):
    """The filesystem operations the migration needs."""

    def exists(self, path: Path) -> bool:
        """Return True if any entry exists at *path*."""

    def is_dir(self, path: Path) -> bool:
        """Return True if *path* is a directory."""

    def walk_files(self, root: Path) -> Iterator[Path]:
        """Yield every non-directory entry below *root*, recursively.

        Symlinks count as leaves, including links to directories.
        """

    def makedirs(self, path: Path) -> None:
        """Create *path* and any missing parents."""

    def move(self, src: Path, dst: Path) -> None:
        """Rename *src* to *dst*."""


class LocalDirectoryTree:
    """``DirectoryTree`` backed by the local filesystem."""

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def walk_files(self, root: Path) -> Iterator[Path]:
        def _raise(exc: OSError) -> None:
            raise exc

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            # Symlinked directories are not descended into; treat them as leaves.
            links = [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
            dirnames[:] = sorted(d for d in dirnames if d not in links)
            for name in sorted(filenames + links):
                yield Path(dirpath) / name

    def makedirs(self, path: Path) -> None:
        path.mkdir(mode=0o755, parents=True, exist_ok=True)

    def move(self, src: Path, dst: Path) -> None:
        os.rename(src, dst)


@dataclass
class MigrationReport:
    """Outcome of a registry domain migration pass."""

    moved: list[tuple[Path, Path]] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.moved)


def migrate_registry_domain(
    models_root: str | Path,
    tree: DirectoryTree | None = None,
) -> MigrationReport:
    """
    Move manifests from the legacy registry directory to the canonical one.

    A legacy manifest whose destination already exists is left where it is.
    Other registries are never touched. The first filesystem error aborts
    the pass and is raised as ``MigrationError``; manifests moved before the
    failure stay moved. Running the pass again is safe.
    """
    if tree is None:
        tree = LocalDirectoryTree()
    manifests = _models_root(models_root) / _MANIFESTS_DIR
    legacy_root = manifests / LEGACY_REGISTRY
    canonical_root = manifests / DEFAULT_REGISTRY
    report = MigrationReport()

    try:
        if not tree.is_dir(legacy_root):
            logger.debug("No legacy manifests at %s", legacy_root)
            return report

        for src in tree.walk_files(legacy_root):
            dst = canonical_root / src.relative_to(legacy_root)
            if tree.exists(dst):
                logger.warning(
                    "Not migrating %s: %s already exists", src, dst
                )
                report.skipped.append(src)
                continue

            tree.makedirs(dst.parent)
            tree.move(src, dst)
            logger.info("Migrated manifest %s -> %s", src, dst)
            report.moved.append((src, dst))
    except OSError as exc:
        raise MigrationError(
            f"registry domain migration failed: {exc}"
        ) from exc

    return report


# ---------------------------------------------------------------------------
# Store facade
# ---------------------------------------------------------------------------


class ModelStore:
    """
    Blob and manifest paths bound to one models root.

    On-disk layout::

        <root>/blobs/<algorithm>-<hex>
        <root>/manifests/<registry>/<namespace>/<repository>/<tag>
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        tree: DirectoryTree | None = None,
    ) -> None:
        self.config = config or StoreConfig()
        self._tree = tree

    @property
    def models_root(self) -> Path:
        return self.config.models_root

    def blob_path(self, digest: str = "") -> Path:
        return get_blobs_path(self.models_root, digest)

    def manifest_path(self, reference: str | ModelReference) -> Path:
        if isinstance(reference, str):
            reference = parse_model_reference(reference)
        return reference.manifest_path(self.models_root)

    def migrate(self) -> MigrationReport:
        """Run the registry domain migration against this store's root."""
        return migrate_registry_domain(self.models_root, self._tree)
