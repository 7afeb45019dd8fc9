"""Documentation archive creation and docs tree checks.

The registry serves docs at ``/{package}/{version}/...``. A docs tree with
a top-level entry named like a version (``1.0.0/``) would shadow those
URLs, so such trees are rejected before anything is uploaded.
"""

from __future__ import annotations

from pathlib import Path

from pkgpub.core.result import Err, Ok, Result
from pkgpub.core.semver import is_version
from pkgpub.services.archive import ArchiveArtifact, tar_bytes
from pkgpub.services.errors import PublishError

__all__ = [
    "DOCS_DIR_CANDIDATES",
    "find_docs_dir",
    "collect_docs_files",
    "check_docs_tree",
    "build_docs",
]

DOCS_DIR_CANDIDATES: tuple[str, ...] = ("doc", "docs")


def find_docs_dir(project_root: Path) -> Result[Path, PublishError]:
    """Return ``doc/`` if present, else ``docs/``."""
    for name in DOCS_DIR_CANDIDATES:
        candidate = project_root / name
        if candidate.is_dir():
            return Ok(candidate)
    return Err(
        PublishError(
            kind="missing_docs",
            message="Documentation could not be found",
            hint="Please ensure documentation is in the doc/ or docs/ directory",
        )
    )


def collect_docs_files(doc_root: Path) -> list[tuple[str, bytes]]:
    """Every regular file under ``doc_root`` with its relative posix path."""
    return [
        (path.relative_to(doc_root).as_posix(), path.read_bytes())
        for path in sorted(doc_root.rglob("*"))
        if path.is_file()
    ]


def check_docs_tree(paths: list[str]) -> Result[None, PublishError]:
    """Reject top-level path segments that parse as a version."""
    for path in paths:
        top = path.split("/", 1)[0]
        if is_version(top):
            return Err(
                PublishError(
                    kind="invalid_docs_tree",
                    message=f"Invalid filename: top-level filenames cannot match a semantic version pattern: {top}",
                    hint=f"Rename or remove {path}",
                )
            )
    return Ok(None)


def build_docs(doc_root: Path) -> Result[ArchiveArtifact, PublishError]:
    """Package ``doc_root`` as a gzip-compressed tar.

    ``index.html`` must exist directly under ``doc_root``. The archive is
    fully built in memory before it is returned.
    """
    index = doc_root / "index.html"
    if not index.is_file():
        return Err(
            PublishError(
                kind="missing_index",
                message=f"File not found: {index}",
                hint="Generate the documentation before publishing it",
            )
        )

    try:
        # Empty directories count too, so look at the entries, not the files.
        checked = check_docs_tree(sorted(entry.name for entry in doc_root.iterdir()))
        if isinstance(checked, Err):
            return checked
        files = collect_docs_files(doc_root)
    except OSError as e:
        return Err(PublishError(kind="io_error", message=f"Cannot read docs: {e}"))

    return Ok(ArchiveArtifact.from_bytes(tar_bytes(files, compress=True)))
