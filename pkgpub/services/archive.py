"""Release archive creation.

Layout of a release archive (uncompressed outer tar):

- ``VERSION``          archive format version
- ``metadata.json``    package name, version, requirements, files, config
- ``contents.tar.gz``  the package files

Tar members carry a fixed mtime and gzip uses mtime 0, so the same build
metadata always produces the same bytes (and the same checksum).
"""

from __future__ import annotations

import gzip
import hashlib
import io
import json
import tarfile
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from pkgpub.project.metadata import BuildMetadata

__all__ = ["ArchiveArtifact", "ARCHIVE_FORMAT_VERSION", "build_release", "tar_bytes"]

ARCHIVE_FORMAT_VERSION = "3"


@dataclass(frozen=True, slots=True)
class ArchiveArtifact:
    """An archive ready for upload.

    Attributes:
        data: Exact bytes that are transmitted
        checksum: SHA-256 digest of ``data``
    """

    data: bytes
    checksum: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> ArchiveArtifact:
        return cls(data=data, checksum=hashlib.sha256(data).digest())

    @property
    def checksum_hex(self) -> str:
        return self.checksum.hex()

    @property
    def size(self) -> int:
        return len(self.data)


def tar_bytes(entries: Iterable[tuple[str, bytes]], *, compress: bool = False) -> bytes:
    """Build a tar archive in memory from (path, content) pairs."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.PAX_FORMAT) as tar:
        for path, content in entries:
            info = tarfile.TarInfo(name=path)
            info.size = len(content)
            info.mode = 0o644
            info.mtime = 0
            tar.addfile(info, io.BytesIO(content))
    data = buf.getvalue()
    if compress:
        return gzip.compress(data, mtime=0)
    return data


def _jsonable(value: object) -> object:
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, tuple | list):
        return [_jsonable(v) for v in value]
    return value


def _metadata_json(meta: BuildMetadata) -> bytes:
    config = {k: v for k, v in meta.package_config.items() if k not in ("requirements", "files")}
    doc = {
        "name": meta.name,
        "version": meta.version,
        "files": [path for path, _ in meta.files],
        "requirements": [
            {
                "name": req.name,
                "requirement": req.requirement,
                "optional": req.optional,
                "app": req.app or req.name,
            }
            for req in meta.requirements
        ],
        **{k: _jsonable(v) for k, v in config.items() if v},
    }
    return (json.dumps(doc, indent=2, sort_keys=True) + "\n").encode("utf-8")


def build_release(meta: BuildMetadata) -> ArchiveArtifact:
    """Create the release archive for ``meta``; the checksum covers the returned bytes."""
    contents = tar_bytes(meta.files, compress=True)
    outer = tar_bytes(
        [
            ("VERSION", ARCHIVE_FORMAT_VERSION.encode("ascii")),
            ("metadata.json", _metadata_json(meta)),
            ("contents.tar.gz", contents),
        ]
    )
    return ArchiveArtifact.from_bytes(outer)
