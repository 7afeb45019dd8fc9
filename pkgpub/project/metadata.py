"""Build metadata read from the project manifest (``pkgpub.toml``).

The manifest names the package, its version, its dependencies and which
files go into the release. Everything is read once per invocation into an
immutable ``BuildMetadata``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath, PureWindowsPath
from types import MappingProxyType

from pkgpub.core.result import Err, Ok, Result
from pkgpub.core.semver import is_version
from pkgpub.core.structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_list,
    get_str,
    get_str_list,
    get_table,
)
from pkgpub.services.errors import PublishError

__all__ = [
    "MANIFEST_NAME",
    "DEFAULT_FILES",
    "BuildMetadata",
    "Requirement",
    "load_build_metadata",
    "expand_files",
]

MANIFEST_NAME = "pkgpub.toml"

DEFAULT_FILES: tuple[str, ...] = (
    "lib",
    "priv",
    "src",
    MANIFEST_NAME,
    "README*",
    "readme*",
    "LICENSE*",
    "license*",
    "CHANGELOG*",
    "changelog*",
)


@dataclass(frozen=True, slots=True)
class Requirement:
    name: str
    requirement: str
    optional: bool = False
    app: str | None = None


def _empty_config() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class BuildMetadata:
    """Everything the publish workflow needs to know about the local build.

    Attributes:
        name: Package name
        version: Package version (semantic version)
        files: (relative posix path, content) pairs in archive order
        exclude_deps: Dependencies that are not registry packages
        package_config: Optional fields (description, licenses, links,
            maintainers, build_tools, requirements)
        docs_command: Command that generates the documentation, if any
    """

    name: str
    version: str
    files: tuple[tuple[str, bytes], ...] = ()
    exclude_deps: frozenset[str] = frozenset()
    package_config: Mapping[str, object] = field(default_factory=_empty_config)
    docs_command: tuple[str, ...] | None = None

    @property
    def requirements(self) -> tuple[Requirement, ...]:
        reqs = self.package_config.get("requirements", ())
        if isinstance(reqs, tuple):
            return tuple(r for r in reqs if isinstance(r, Requirement))
        return ()


def expand_files(root: Path, patterns: list[str]) -> Result[list[tuple[str, bytes]], PublishError]:
    """Expand manifest file patterns to (relative path, content) pairs.

    Directories are walked recursively; only regular files are included.
    Paths are relative to ``root`` and never escape it.
    """
    root = root.resolve()
    seen: set[str] = set()
    out: list[tuple[str, bytes]] = []

    for pattern in patterns:
        if PurePosixPath(pattern).is_absolute() or PureWindowsPath(pattern).is_absolute():
            return Err(
                PublishError(
                    kind="invalid_manifest",
                    message=f"File pattern must be relative to the project: {pattern}",
                )
            )
        for match in sorted(root.glob(pattern)):
            candidates = sorted(match.rglob("*")) if match.is_dir() else [match]
            for path in candidates:
                if not path.is_file():
                    continue
                try:
                    rel = path.resolve().relative_to(root).as_posix()
                except ValueError:
                    return Err(
                        PublishError(
                            kind="invalid_manifest",
                            message=f"File outside of project: {path}",
                        )
                    )
                if rel in seen:
                    continue
                seen.add(rel)
                try:
                    out.append((rel, path.read_bytes()))
                except OSError as e:
                    return Err(PublishError(kind="io_error", message=f"Cannot read {rel}: {e}"))

    return Ok(out)


def _parse_dependencies(
    items: list[object],
) -> Result[tuple[tuple[Requirement, ...], frozenset[str]], PublishError]:
    requirements: list[Requirement] = []
    excluded: set[str] = set()

    for item in items:
        dep = as_str_dict(item)
        name = get_str(dep, "name") if dep is not None else None
        if dep is None or name is None:
            return Err(
                PublishError(
                    kind="invalid_manifest",
                    message="Every [[dependencies]] entry needs a name",
                )
            )
        # Path and git dependencies are not resolvable from the registry.
        if "path" in dep or "git" in dep:
            excluded.add(name)
            continue
        requirements.append(
            Requirement(
                name=name,
                requirement=get_str(dep, "requirement") or ">= 0.0.0",
                optional=get_bool(dep, "optional") or False,
                app=get_str(dep, "app"),
            )
        )

    return Ok((tuple(requirements), frozenset(excluded)))


def _read_manifest(path: Path) -> Result[StrDict, PublishError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(
            PublishError(
                kind="invalid_manifest",
                message=f"Manifest not found: {path}",
                hint=f"Run pkgpub from the project root (the directory with {MANIFEST_NAME}).",
            )
        )
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        return Err(PublishError(kind="invalid_manifest", message=f"Invalid {path.name}: {e}"))
    except OSError as e:
        return Err(PublishError(kind="io_error", message=f"Cannot read {path}: {e}"))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(PublishError(kind="invalid_manifest", message="Manifest root must be a table"))
    return Ok(data)


def load_build_metadata(project_root: Path) -> Result[BuildMetadata, PublishError]:
    """Read ``pkgpub.toml`` and collect the package files.

    Args:
        project_root: Directory containing the manifest

    Returns:
        Ok(BuildMetadata), or Err(PublishError) for a missing/invalid manifest
    """
    manifest = _read_manifest(project_root / MANIFEST_NAME)
    if isinstance(manifest, Err):
        return manifest

    package = get_table(manifest.value, "package") or {}
    name = get_str(package, "name")
    version = get_str(package, "version")
    if name is None or version is None:
        return Err(
            PublishError(
                kind="invalid_manifest",
                message="[package] name and version are required",
            )
        )
    if not is_version(version):
        return Err(
            PublishError(
                kind="invalid_manifest",
                message=f"Invalid version {version!r}",
                hint="Versions follow semantic versioning, e.g. 1.0.0 or 1.0.0-rc.1",
            )
        )

    deps = _parse_dependencies(get_list(manifest.value, "dependencies") or [])
    if isinstance(deps, Err):
        return deps
    requirements, excluded = deps.value

    patterns = get_str_list(package, "files")
    files = expand_files(project_root, patterns if patterns is not None else list(DEFAULT_FILES))
    if isinstance(files, Err):
        return files

    links = get_table(package, "links") or {}
    package_config: dict[str, object] = {
        "description": get_str(package, "description"),
        "licenses": tuple(get_str_list(package, "licenses") or ()),
        "maintainers": tuple(get_str_list(package, "maintainers") or ()),
        "build_tools": tuple(get_str_list(package, "build_tools") or ()),
        "links": MappingProxyType({k: v for k, v in links.items() if isinstance(v, str)}),
        "files": tuple(patterns if patterns is not None else DEFAULT_FILES),
        "requirements": requirements,
    }

    docs = get_table(manifest.value, "docs") or {}
    docs_command = get_str_list(docs, "command")

    return Ok(
        BuildMetadata(
            name=name,
            version=version,
            files=tuple(files.value),
            exclude_deps=excluded,
            package_config=MappingProxyType(package_config),
            docs_command=tuple(docs_command) if docs_command else None,
        )
    )
