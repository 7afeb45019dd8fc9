"""Summary of what is about to be published, shown before confirmation."""

from __future__ import annotations

from collections.abc import Mapping

from pkgpub.output.console import ConsoleProtocol, Style
from pkgpub.project.metadata import BuildMetadata


def _str_items(value: object) -> list[str]:
    if isinstance(value, tuple | list):
        return [str(v) for v in value]
    return []


def print_build_info(meta: BuildMetadata, console: ConsoleProtocol) -> None:
    config = meta.package_config

    if meta.requirements:
        console.print("  Dependencies:")
        for req in meta.requirements:
            extra = " (optional)" if req.optional else ""
            app = f" (app: {req.app})" if req.app else ""
            console.print(f"    {req.name} {req.requirement}{app}{extra}")

    if meta.exclude_deps:
        console.print("  Excluded dependencies (not part of the registry package):", Style.WARNING)
        for dep in sorted(meta.exclude_deps):
            console.print(f"    {dep}", Style.WARNING)

    console.print("  Files:")
    if meta.files:
        for path, _content in meta.files:
            console.print(f"    {path}", Style.DIM)
    else:
        console.warning("no files matched the package file patterns")

    description = config.get("description")
    if isinstance(description, str) and description:
        console.print(f"  Description: {description}")
    else:
        console.warning("missing description")

    licenses = _str_items(config.get("licenses"))
    if licenses:
        console.print(f"  Licenses: {', '.join(licenses)}")
    else:
        console.warning("missing licenses")

    links = config.get("links")
    if isinstance(links, Mapping) and links:
        console.print("  Links:")
        for label, url in links.items():
            console.print(f"    {label}: {url}")

    maintainers = _str_items(config.get("maintainers"))
    if maintainers:
        console.print(f"  Maintainers: {', '.join(maintainers)}")

    build_tools = _str_items(config.get("build_tools"))
    if build_tools:
        console.print(f"  Build tools: {', '.join(build_tools)}")
