"""SSH command building and remote command strings.

Builds ``ssh`` argument lists from Options, respecting custom ports, an
alternative ssh_config and passthrough ``-o`` options. Never talks SSH
itself; the installed client does that.
"""

from __future__ import annotations

import shutil

from ssh_copy_id.config import DEFAULT_PORT, Options
from ssh_copy_id.errors import ToolNotFoundError
from ssh_copy_id.executor import Runner, run_capture
from ssh_copy_id.keys import expand_home

SSH_BINARY = "ssh"

# New host keys are accepted without a prompt; changed ones are still refused.
HOST_KEY_POLICY = "StrictHostKeyChecking=accept-new"

AUTHORIZED_KEYS = "~/.ssh/authorized_keys"

PROBE_COMMAND = "exit 0"
MKDIR_COMMAND = "mkdir -p ~/.ssh && chmod 700 ~/.ssh"
READ_KEYS_COMMAND = f"cat {AUTHORIZED_KEYS} 2>/dev/null"


def ssh_available() -> bool:
    return shutil.which(SSH_BINARY) is not None


def require_ssh() -> None:
    """Raise ``ToolNotFoundError`` unless the ssh client is on PATH."""
    if not ssh_available():
        raise ToolNotFoundError(
            "SSH client not found. Please install OpenSSH and make sure 'ssh' is on PATH."
        )


def quote_single(text: str) -> str:
    """Escape *text* for use inside a single-quoted POSIX shell string."""
    return text.replace("'", "'\\''")


def append_key_command(key: str) -> str:
    """Remote command that appends *key* and locks down the file."""
    return (
        f"echo '{quote_single(key)}' >> {AUTHORIZED_KEYS}"
        f" && chmod 600 {AUTHORIZED_KEYS}"
    )


def build_ssh_command(
    options: Options,
    remote_command: str,
    *,
    extra_args: list[str] | None = None,
) -> list[str]:
    """Build a complete ``ssh`` command list running *remote_command*.

    Parameters
    ----------
    options:
        The parsed copy options (target, port, config file, ``-o`` value).
    remote_command:
        Shell command for the remote side. Passed as one argv element, so
        only the remote shell interprets it.
    extra_args:
        Additional CLI flags inserted before the destination.
    """
    cmd: list[str] = [SSH_BINARY]

    if options.ssh_config:
        cmd.extend(["-F", expand_home(options.ssh_config)])

    # Port (only if not default)
    if options.port != DEFAULT_PORT:
        cmd.extend(["-p", str(options.port)])

    if options.ssh_options:
        cmd.extend(["-o", options.ssh_options])

    cmd.extend(["-o", HOST_KEY_POLICY])

    if extra_args:
        cmd.extend(extra_args)

    cmd.append(options.target)
    cmd.append(remote_command)
    return cmd


def run_remote_command(
    options: Options,
    remote_command: str,
    *,
    extra_args: list[str] | None = None,
    runner: Runner | None = None,
) -> tuple[int, str]:
    """Run *remote_command* on the target and return (exit_code, stdout)."""
    cmd = build_ssh_command(options, remote_command, extra_args=extra_args)
    return (runner or run_capture)(cmd)
