"""Typed user configuration.

The configuration is read once per invocation from a TOML file and then
passed explicitly to the registry gateway and the orchestrators.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str

__all__ = [
    "Config",
    "ConfigError",
    "config_path",
    "load_config",
    "load_config_or_default",
    "apply_env_overrides",
    "DEFAULT_API_URL",
    "DEFAULT_ORGANIZATION",
]

DEFAULT_API_URL = "https://hex.pm/api"
DEFAULT_ORGANIZATION = "hexpm"
DEFAULT_PACKAGE_URL = "https://hex.pm/packages"
DEFAULT_DOCS_URL = "https://hexdocs.pm"
DEFAULT_COC_URL = "https://hex.pm/policies/codeofconduct"
DEFAULT_HTTP_TIMEOUT = 60.0

ENV_HOME = "PKGPUB_HOME"
ENV_API_URL = "PKGPUB_API_URL"
ENV_API_KEY = "PKGPUB_API_KEY"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Registry endpoints and credentials."""

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    default_organization: str = DEFAULT_ORGANIZATION
    package_url: str = DEFAULT_PACKAGE_URL
    docs_url: str = DEFAULT_DOCS_URL
    code_of_conduct_url: str = DEFAULT_COC_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        timeout = get_float(data, "http_timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError("http_timeout must be positive")

        return cls(
            api_url=(get_str(data, "api_url") or DEFAULT_API_URL).rstrip("/"),
            api_key=get_str(data, "api_key"),
            default_organization=get_str(data, "default_organization") or DEFAULT_ORGANIZATION,
            package_url=(get_str(data, "package_url") or DEFAULT_PACKAGE_URL).rstrip("/"),
            docs_url=(get_str(data, "docs_url") or DEFAULT_DOCS_URL).rstrip("/"),
            code_of_conduct_url=get_str(data, "code_of_conduct_url") or DEFAULT_COC_URL,
            http_timeout=timeout or DEFAULT_HTTP_TIMEOUT,
        )

    def is_default_organization(self, organization: str | None) -> bool:
        """True when ``organization`` means the public repository."""
        return organization is None or organization == self.default_organization


def config_path(env: Mapping[str, str] | None = None) -> Path:
    """Location of the user config file (``$PKGPUB_HOME/config.toml``)."""
    env = os.environ if env is None else env
    home = env.get(ENV_HOME)
    base = Path(home).expanduser() if home else Path.home() / ".pkgpub"
    return base / "config.toml"


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to config.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def apply_env_overrides(config: Config, env: Mapping[str, str] | None = None) -> Config:
    """Environment variables win over the config file."""
    env = os.environ if env is None else env
    api_url = env.get(ENV_API_URL, "").strip()
    api_key = env.get(ENV_API_KEY, "").strip()
    if api_url:
        config = replace(config, api_url=api_url.rstrip("/"))
    if api_key:
        config = replace(config, api_key=api_key)
    return config


def load_config_or_default(
    path: Path | None = None, env: Mapping[str, str] | None = None
) -> Result[Config, ConfigError]:
    """Load the user config; a missing file yields the defaults.

    Syntax errors are still reported, only absence is tolerated.
    """
    path = path or config_path(env)
    if not path.exists():
        return Ok(apply_env_overrides(Config(), env))

    result = load_config(path)
    if isinstance(result, Err):
        return result
    return Ok(apply_env_overrides(result.value, env))
