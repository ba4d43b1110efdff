"""Options model, target parsing, and the optional settings file.

The settings file lives at ~/.config/ssh-copy-id/config.yaml (or the path in
SSH_COPY_ID_CONFIG) and only supplies defaults; command-line flags win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ssh_copy_id.errors import ConfigError, TargetError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

APP_NAME = "ssh-copy-id"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / APP_NAME
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_CONFIG_VAR = "SSH_COPY_ID_CONFIG"
SUPPORTED_CONFIG_VERSION = 1

DEFAULT_PORT = 22
FALLBACK_USER = "user"

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Options:
    """Everything one copy run needs, fixed once argv has been parsed."""

    user: str
    host: str
    port: int = DEFAULT_PORT
    identity_file: str | None = None
    key_file: str | None = None
    force: bool = False
    dry_run: bool = False
    quiet: bool = False
    ssh_options: str = ""
    ssh_config: str | None = None

    def __post_init__(self) -> None:
        if not self.host:
            raise TargetError("No host specified.")

    @property
    def target(self) -> str:
        """Return the SSH destination string."""
        return f"{self.user}@{self.host}"

    @property
    def display_target(self) -> str:
        if self.port != DEFAULT_PORT:
            return f"{self.target}:{self.port}"
        return self.target


@dataclass(frozen=True, slots=True)
class Settings:
    """Defaults read from the settings file."""

    port: int | None = None
    identity_file: str | None = None
    ssh_options: str | None = None
    ssh_config: str | None = None
    quiet: bool = False
    config_path: Path | None = None


# ---------------------------------------------------------------------------
# Target parsing
# ---------------------------------------------------------------------------


def default_user() -> str:
    """Name of the invoking account, or ``"user"`` when it can't be found."""
    return os.environ.get("USERNAME") or os.environ.get("USER") or FALLBACK_USER


def parse_target(target: str) -> tuple[str, str]:
    """Split ``[user@]host`` into ``(user, host)``.

    Only the first ``@`` separates; anything after it belongs to the host.
    A missing or empty user falls back to :func:`default_user`.
    """
    user, sep, host = target.partition("@")
    if not sep:
        user, host = "", target
    if not host:
        raise TargetError(f"No host specified in target '{target}'.")
    return (user or default_user()), host


# ---------------------------------------------------------------------------
# Settings loader
# ---------------------------------------------------------------------------


def get_config_path() -> Path:
    """Determine which settings file to use."""
    env = os.environ.get(ENV_CONFIG_VAR)
    if env:
        return Path(env).expanduser().resolve()
    return DEFAULT_CONFIG_PATH


def _expect_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'defaults.{key}' must be a string.")
    return value


def _parse_port(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError("'defaults.port' must be an integer.")
    if not 1 <= value <= 65535:
        raise ConfigError(f"'defaults.port' {value} is outside 1-65535.")
    return value


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate the settings file.

    A missing file at the default location just means "no defaults". A file
    named explicitly (argument or env var) has to exist.
    """
    explicit = path is not None or bool(os.environ.get(ENV_CONFIG_VAR))
    config_path = path or get_config_path()

    if not config_path.exists():
        if not explicit:
            return Settings()
        raise ConfigError(
            f"Config file not found at {config_path}\n"
            f"Unset {ENV_CONFIG_VAR} or point it at an existing file."
        )

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}") from exc

    if raw is None:
        return Settings(config_path=config_path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must be a YAML mapping at the top level.")

    version = raw.get("version", SUPPORTED_CONFIG_VERSION)
    if version != SUPPORTED_CONFIG_VERSION:
        raise ConfigError(
            f"Unsupported config version {version}. Expected {SUPPORTED_CONFIG_VERSION}."
        )

    defaults = raw.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError("'defaults' must be a mapping.")

    quiet = defaults.get("quiet", False)
    if not isinstance(quiet, bool):
        raise ConfigError("'defaults.quiet' must be true or false.")

    return Settings(
        port=_parse_port(defaults.get("port")),
        identity_file=_expect_str(defaults, "identity_file"),
        ssh_options=_expect_str(defaults, "ssh_options"),
        ssh_config=_expect_str(defaults, "ssh_config"),
        quiet=quiet,
        config_path=config_path,
    )


def build_options(
    target: str,
    settings: Settings | None = None,
    *,
    identity_file: str | None = None,
    key_file: str | None = None,
    port: int | None = None,
    force: bool = False,
    dry_run: bool = False,
    quiet: bool = False,
    ssh_options: str | None = None,
    ssh_config: str | None = None,
) -> Options:
    """Merge command-line values over *settings* into an :class:`Options`."""
    settings = settings or Settings()
    user, host = parse_target(target)

    def pick(cli_value, file_value, fallback=None):
        if cli_value is not None:
            return cli_value
        if file_value is not None:
            return file_value
        return fallback

    return Options(
        user=user,
        host=host,
        port=pick(port, settings.port, DEFAULT_PORT),
        identity_file=pick(identity_file, settings.identity_file),
        key_file=key_file,
        force=force,
        dry_run=dry_run,
        quiet=quiet or settings.quiet,
        ssh_options=pick(ssh_options, settings.ssh_options, ""),
        ssh_config=pick(ssh_config, settings.ssh_config),
    )
