"""Public key lookup: which file to upload, and reading it.

Resolution order is explicit key file, then identity file (with ``.pub``
added), then ``~/.ssh/id_rsa.pub``.
"""

from __future__ import annotations

from pathlib import Path

from ssh_copy_id.config import Options
from ssh_copy_id.errors import KeyFileError

PUBLIC_SUFFIX = ".pub"
HOME_ALIAS = "~"
DEFAULT_KEY_NAME = "id_rsa.pub"


def home_dir() -> Path:
    return Path.home()


def expand_home(path: str, home: Path | None = None) -> str:
    """Replace a leading ``~`` with the home directory."""
    if not path.startswith(HOME_ALIAS):
        return path
    return f"{home or home_dir()}{path[len(HOME_ALIAS):]}"


def resolve_public_key_path(options: Options, home: Path | None = None) -> Path:
    """Return the public key file that should be copied for *options*."""
    home = home or home_dir()

    if options.key_file:
        raw = options.key_file
    elif options.identity_file:
        raw = options.identity_file
        if not raw.endswith(PUBLIC_SUFFIX):
            raw += PUBLIC_SUFFIX
    else:
        return home / ".ssh" / DEFAULT_KEY_NAME

    return Path(expand_home(raw, home))


def private_key_path(public_path: Path) -> Path:
    """Strip the ``.pub`` suffix to get the companion private key."""
    name = str(public_path)
    if name.endswith(PUBLIC_SUFFIX):
        return Path(name[: -len(PUBLIC_SUFFIX)])
    return public_path


def keygen_suggestion(public_path: Path) -> list[str]:
    """Lines pointing at ``ssh-keygen -y`` when only the private key exists."""
    private = private_key_path(public_path)
    if private == public_path or not private.is_file():
        return []
    return [
        f"Private key found: {private}",
        f"Generate public key: ssh-keygen -y -f {private} > {public_path}",
    ]


def read_public_key(path: Path) -> str:
    """Read the key file and strip surrounding whitespace.

    Raises ``KeyFileError`` if the file is missing, unreadable, or blank.
    """
    try:
        content = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as exc:
        raise KeyFileError(
            f"Public key not found: {path}", suggestion=keygen_suggestion(path)
        ) from exc
    except UnicodeDecodeError as exc:
        raise KeyFileError(f"Cannot read public key {path}: not UTF-8 text") from exc
    except OSError as exc:
        raise KeyFileError(f"Cannot read public key {path}: {exc.strerror or exc}") from exc

    if not content:
        raise KeyFileError(f"Public key file is empty: {path}")
    return content
