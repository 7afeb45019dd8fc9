"""Public URLs shown to the user after a publish."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from pkgpub.core.config import Config


def package_url(config: Config, name: str, version: str | None = None, organization: str | None = None) -> str:
    parts = [config.package_url]
    if not config.is_default_organization(organization):
        parts.append(organization or "")
    parts.append(name)
    if version:
        parts.append(version)
    return "/".join(parts)


def docs_url(config: Config, name: str, version: str | None = None, organization: str | None = None) -> str:
    """Docs URL; organization docs live on the ``{org}.`` subdomain of the docs host."""
    base = config.docs_url
    if not config.is_default_organization(organization):
        scheme, netloc, path, query, fragment = urlsplit(base)
        base = urlunsplit((scheme, f"{organization}.{netloc}", path, query, fragment))
    url = f"{base}/{name}"
    if version:
        url += f"/{version}"
    return url
