"""
aumai-modelstore quickstart — working demo of reference parsing, blob paths,
and the registry domain migration.

Run directly:

    python examples/quickstart.py

All demos use a temporary directory and clean up after themselves.
"""

from __future__ import annotations

import hashlib
import pathlib
import tempfile


# ---------------------------------------------------------------------------
# Demo 1: Resolve model references
# ---------------------------------------------------------------------------

def demo_parse_references() -> None:
    """Show how omitted reference parts are filled with defaults."""
    print("\n=== Demo 1: Parse model references ===")

    from aumai_modelstore.core import parse_model_reference

    for raw in (
        "mistral",
        "llama3:8b",
        "jdoe/phi:3b",
        "localhost:5000/team/llama3:13b",
        "http://example.com/ns/repo:tag",
    ):
        ref = parse_model_reference(raw)
        print(f"  {raw:<34} -> {ref.full_tagname}")
        print(f"  {'':<34}    short: {ref.short_tagname}  base: {ref.base_url}")


# ---------------------------------------------------------------------------
# Demo 2: Blob paths
# ---------------------------------------------------------------------------

def demo_blob_paths(models_root: pathlib.Path) -> None:
    """Map digests to blob files and show a rejected digest."""
    print("\n=== Demo 2: Blob paths ===")

    from aumai_modelstore.core import get_blobs_path
    from aumai_modelstore.errors import InvalidDigestFormatError

    digest = "sha256:" + hashlib.sha256(b"weights").hexdigest()
    print(f"  blobs dir : {get_blobs_path(models_root)}")
    print(f"  {digest[:20]}... -> {get_blobs_path(models_root, digest)}")

    try:
        get_blobs_path(models_root, "../sha256-deadbeef")
    except InvalidDigestFormatError as exc:
        print(f"  rejected  : {exc}")


# ---------------------------------------------------------------------------
# Demo 3: Registry domain migration
# ---------------------------------------------------------------------------

def demo_migration(models_root: pathlib.Path) -> None:
    """Lay out legacy manifests and migrate them to the canonical domain."""
    print("\n=== Demo 3: Registry domain migration ===")

    from aumai_modelstore.config import StoreConfig
    from aumai_modelstore.core import ModelStore

    for rel in (
        ("registry.ollama.ai", "library", "mistral", "latest"),
        ("registry.ollama.ai", "library", "llama3", "7b"),
        ("ollama.com", "library", "llama3", "7b"),
        ("localhost:5000", "library", "llama3", "13b"),
    ):
        path = models_root.joinpath("manifests", *rel)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{}", encoding="utf-8")

    store = ModelStore(StoreConfig(models_root=models_root))
    report = store.migrate()
    for src, dst in report.moved:
        print(f"  moved   : {src.relative_to(models_root)} -> {dst.relative_to(models_root)}")
    for src in report.skipped:
        print(f"  skipped : {src.relative_to(models_root)}")

    again = store.migrate()
    print(f"  second pass moved {len(again.moved)} manifests")


def main() -> None:
    demo_parse_references()
    with tempfile.TemporaryDirectory() as tmp:
        models_root = pathlib.Path(tmp) / "models"
        demo_blob_paths(models_root)
        demo_migration(models_root)
    print("\nDone.")


if __name__ == "__main__":
    main()
