"""Remote installer: put a public key into ~/.ssh/authorized_keys.

Each step is its own ssh invocation against the same target:

1. create ~/.ssh (mode 700)
2. read authorized_keys and stop if the key is already there (skipped with force)
3. append the key and chmod the file to 600
"""

from __future__ import annotations

from enum import Enum

from ssh_copy_id.config import Options
from ssh_copy_id.errors import RemoteMutationError
from ssh_copy_id.executor import Runner
from ssh_copy_id.ssh import (
    AUTHORIZED_KEYS,
    MKDIR_COMMAND,
    READ_KEYS_COMMAND,
    append_key_command,
    build_ssh_command,
    run_remote_command,
)
from ssh_copy_id.utils import print_info


class InstallOutcome(str, Enum):
    ADDED = "added"
    ALREADY_INSTALLED = "already_installed"


def fetch_authorized_keys(options: Options, *, runner: Runner | None = None) -> str:
    """Return the remote authorized_keys text.

    A failed read (no file, permission problem, anything) comes back as an
    empty string, so the caller goes on to append.
    """
    code, output = run_remote_command(options, READ_KEYS_COMMAND, runner=runner)
    if code != 0:
        return ""
    return output


def install_key(
    options: Options, key: str, *, runner: Runner | None = None
) -> InstallOutcome:
    """Install *key* on the target described by *options*.

    Raises ``RemoteMutationError`` if the directory can't be created or the
    append fails.
    """
    print_info("Creating ~/.ssh directory...")
    code, _ = run_remote_command(options, MKDIR_COMMAND, runner=runner)
    if code != 0:
        raise RemoteMutationError(
            f"Could not create ~/.ssh on {options.display_target} (ssh exit code {code})."
        )

    if not options.force:
        existing = fetch_authorized_keys(options, runner=runner)
        if key in existing:
            print_info("Key already exists on server.")
            return InstallOutcome.ALREADY_INSTALLED

    print_info(f"Adding key to {AUTHORIZED_KEYS}...")
    code, _ = run_remote_command(options, append_key_command(key), runner=runner)
    if code != 0:
        raise RemoteMutationError(
            f"Could not update {AUTHORIZED_KEYS} on {options.display_target} "
            f"(ssh exit code {code})."
        )
    return InstallOutcome.ADDED


def planned_commands(options: Options, key_placeholder: str) -> list[list[str]]:
    """The ssh commands a real run would issue, for dry-run output."""
    commands = [build_ssh_command(options, MKDIR_COMMAND)]
    if not options.force:
        commands.append(build_ssh_command(options, READ_KEYS_COMMAND))
    commands.append(build_ssh_command(options, append_key_command(key_placeholder)))
    return commands
