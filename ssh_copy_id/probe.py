"""Login probes: a no-op ``exit 0`` over ssh to test authentication."""

from __future__ import annotations

from pathlib import Path

from ssh_copy_id.config import Options
from ssh_copy_id.errors import ConnectionFailedError
from ssh_copy_id.executor import Runner
from ssh_copy_id.ssh import PROBE_COMMAND, run_remote_command

# Key authentication only: no prompts, no password fallback.
KEY_ONLY_ARGS = ["-o", "BatchMode=yes", "-o", "PasswordAuthentication=no"]


def probe_login(options: Options, *, runner: Runner | None = None) -> bool:
    """Check that the target accepts a login with the usual auth methods."""
    code, _ = run_remote_command(options, PROBE_COMMAND, runner=runner)
    return code == 0


def ensure_login(options: Options, *, runner: Runner | None = None) -> None:
    """Like :func:`probe_login` but raises ``ConnectionFailedError`` on failure."""
    if not probe_login(options, runner=runner):
        raise ConnectionFailedError(
            f"Failed to connect to {options.display_target}. Check login credentials."
        )


def verify_key_login(
    options: Options, private_key: Path, *, runner: Runner | None = None
) -> bool:
    """Check that *private_key* alone now gets us in."""
    code, _ = run_remote_command(
        options,
        PROBE_COMMAND,
        extra_args=["-i", str(private_key), *KEY_ONLY_ARGS],
        runner=runner,
    )
    return code == 0
