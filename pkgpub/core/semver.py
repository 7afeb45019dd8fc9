from __future__ import annotations

import re
from dataclasses import dataclass

# major.minor.patch with optional pre-release and build metadata.
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int
    pre: str | None = None
    build: str | None = None

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            out += f"-{self.pre}"
        if self.build:
            out += f"+{self.build}"
        return out


def parse_version(text: str) -> Version | None:
    m = _SEMVER_RE.match(text)
    if m is None:
        return None
    return Version(int(m.group(1)), int(m.group(2)), int(m.group(3)), m.group(4), m.group(5))


def is_version(text: str) -> bool:
    return parse_version(text) is not None


def clean_version(text: str) -> str:
    """Drop surrounding whitespace and a leading ``v`` (``v1.2.3`` -> ``1.2.3``)."""
    text = text.strip()
    if text.startswith("v"):
        return text[1:]
    return text
