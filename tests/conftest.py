"""Shared test fixtures for aumai-modelstore."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from aumai_modelstore.config import StoreConfig
from aumai_modelstore.core import ModelStore


# ---------------------------------------------------------------------------
# In-memory directory tree
# ---------------------------------------------------------------------------


class FakeDirectoryTree:
    """A dict-backed ``DirectoryTree`` for driving the migration in memory."""

    def __init__(self, files: list[Path] | None = None) -> None:
        self.files: dict[Path, bytes] = {}
        self.dirs: set[Path] = set()
        self.fail_on_move: Path | None = None
        self.fail_on_walk: Path | None = None
        self.moves: list[tuple[Path, Path]] = []
        for f in files or []:
            self.add_file(f)

    def add_file(self, path: Path, content: bytes = b"{}") -> None:
        self._add_dirs(path.parent)
        self.files[path] = content

    def _add_dirs(self, path: Path) -> None:
        for p in (path, *path.parents):
            self.dirs.add(p)

    def exists(self, path: Path) -> bool:
        return path in self.files or path in self.dirs

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs

    def walk_files(self, root: Path) -> Iterator[Path]:
        for path in sorted(self.files):
            if root not in path.parents:
                continue
            if path == self.fail_on_walk:
                raise PermissionError(f"cannot list {path.parent}")
            yield path

    def makedirs(self, path: Path) -> None:
        if path in self.files:
            raise FileExistsError(str(path))
        self._add_dirs(path)

    def move(self, src: Path, dst: Path) -> None:
        if src == self.fail_on_move:
            raise PermissionError(f"cannot move {src}")
        if dst.parent not in self.dirs:
            raise FileNotFoundError(str(dst.parent))
        self.files[dst] = self.files.pop(src)
        self.moves.append((src, dst))


# ---------------------------------------------------------------------------
# Roots and stores
# ---------------------------------------------------------------------------


@pytest.fixture()
def models_root(tmp_path: Path) -> Path:
    d = tmp_path / "models"
    d.mkdir()
    return d


@pytest.fixture()
def store(models_root: Path) -> ModelStore:
    return ModelStore(StoreConfig(models_root=models_root))


@pytest.fixture()
def fake_root() -> Path:
    return Path("/models")


@pytest.fixture()
def manifest_layout() -> list[Path]:
    """Manifests relative to ``<root>/manifests``: legacy, canonical and third-party."""
    return [
        Path("registry.ollama.ai", "library", "mistral", "latest"),
        Path("registry.ollama.ai", "library", "llama3", "7b"),
        Path("ollama.com", "library", "llama3", "7b"),
        Path("localhost:5000", "library", "llama3", "13b"),
    ]


@pytest.fixture()
def populated_root(models_root: Path, manifest_layout: list[Path]) -> Path:
    """A real models root containing the manifests of ``manifest_layout``."""
    for rel in manifest_layout:
        p = models_root / "manifests" / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(f'{{"source": "{rel.parts[0]}"}}', encoding="utf-8")
    return models_root


@pytest.fixture()
def fake_tree(fake_root: Path, manifest_layout: list[Path]) -> FakeDirectoryTree:
    """An in-memory tree with the same manifests as ``populated_root``."""
    tree = FakeDirectoryTree()
    for rel in manifest_layout:
        tree.add_file(fake_root / "manifests" / rel, rel.parts[0].encode())
    return tree


@pytest.fixture()
def empty_tree() -> FakeDirectoryTree:
    return FakeDirectoryTree()
