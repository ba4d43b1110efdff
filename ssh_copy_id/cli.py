"""Typer CLI application for ssh-copy-id.

One command: ``ssh-copy-id [options] [user@]host``. Parsing problems exit
with status 1 (not click's 2), and ``-h``/``--help`` anywhere wins over
everything else.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import click
import typer
from typer.core import TyperCommand

from ssh_copy_id import __version__
from ssh_copy_id.config import Options, Settings, build_options, load_settings
from ssh_copy_id.errors import ConfigError, CopyIdError, KeyFileError, TargetError
from ssh_copy_id.installer import InstallOutcome, install_key, planned_commands
from ssh_copy_id.keys import private_key_path, read_public_key, resolve_public_key_path
from ssh_copy_id.probe import ensure_login, verify_key_login
from ssh_copy_id.ssh import AUTHORIZED_KEYS, PROBE_COMMAND, build_ssh_command, require_ssh
from ssh_copy_id.utils import (
    console,
    print_command_preview,
    print_dry_run,
    print_error,
    print_hint,
    print_info,
    print_success,
    print_warning,
    set_quiet,
)

USAGE_EXIT_CODE = 1

EXAMPLES = """\
Examples:

  ssh-copy-id user@example.com

  ssh-copy-id -i ~/.ssh/id_ed25519.pub user@192.168.1.100

  ssh-copy-id -p 2222 -f root@server.local
"""


def usage_error_types(*objs: object) -> tuple[type[Exception], ...]:
    """``UsageError`` classes of every click the given objects are built on.

    Newer typer releases ship their own copy of click, so the command's
    errors may not derive from the separately installed ``click.UsageError``.
    """
    found: set[type[Exception]] = {click.UsageError}
    for obj in objs:
        for klass in type(obj).__mro__:
            module = sys.modules.get(klass.__module__)
            candidate = getattr(module, "UsageError", None)
            if isinstance(candidate, type) and issubclass(candidate, Exception):
                found.add(candidate)
    return tuple(found)


class CopyIdCommand(TyperCommand):
    """Command class that reports usage errors with exit status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if any(arg in ctx.help_option_names for arg in args):
            args = [ctx.help_option_names[-1]]
        try:
            return super().parse_args(ctx, args)
        except usage_error_types(self, ctx) as exc:
            exc.exit_code = USAGE_EXIT_CODE
            raise


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="ssh-copy-id",
    help="Copy your public SSH key to a remote server.",
    rich_markup_mode="rich",
    add_completion=False,
)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_settings_or_exit() -> Settings:
    """Load the settings file, printing a helpful error and exiting on failure."""
    try:
        return load_settings()
    except ConfigError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


def _build_options_or_exit(ctx: typer.Context, target: str, **values) -> Options:
    settings = _load_settings_or_exit()
    try:
        return build_options(target, settings, **values)
    except TargetError as exc:
        console.print(ctx.get_usage(), highlight=False, markup=False)
        print_error(str(exc))
        raise typer.Exit(USAGE_EXIT_CODE)


def _report_and_exit(exc: CopyIdError) -> NoReturn:
    print_error(str(exc))
    if isinstance(exc, KeyFileError):
        for line in exc.suggestion:
            print_hint(line)
    raise typer.Exit(1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ssh-copy-id [bold]{__version__}[/bold]")
        raise typer.Exit()


def _dry_run(options: Options, key_path: Path) -> None:
    print_dry_run(f"Key would be added to {AUTHORIZED_KEYS}")
    if not key_path.is_file():
        print_warning(f"Public key not found: {key_path}")

    print_command_preview(build_ssh_command(options, PROBE_COMMAND))
    for cmd in planned_commands(options, f"<contents of {key_path}>"):
        print_command_preview(cmd)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@app.command(cls=CopyIdCommand, context_settings=CONTEXT_SETTINGS, epilog=EXAMPLES)
def main(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(metavar="[USER@]HOST", help="Remote login target.")],
    identity_file: Annotated[
        Optional[str],
        typer.Option(
            "--identity_file", "-i",
            help="Key to copy; '.pub' is added if missing (default: ~/.ssh/id_rsa.pub).",
        ),
    ] = None,
    key_file: Annotated[
        Optional[str],
        typer.Option("--key_file", "-k", help="Exact public key file to copy; wins over -i."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", min=1, max=65535, help="SSH port (default: 22)."),
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Don't check for existing keys.")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry_run", "-n", help="Show what would be done, but don't execute.")
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Quiet mode.")] = False,
    ssh_options: Annotated[
        Optional[str],
        typer.Option("--ssh_options", "-o", help="Additional SSH option, passed as 'ssh -o'."),
    ] = None,
    ssh_config: Annotated[
        Optional[str],
        typer.Option("--ssh_config", "-F", help="SSH configuration file, passed as 'ssh -F'."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
):
    """Copy your public SSH key to a remote server."""
    options = _build_options_or_exit(
        ctx,
        target,
        identity_file=identity_file,
        key_file=key_file,
        port=port,
        force=force,
        dry_run=dry_run,
        quiet=quiet,
        ssh_options=ssh_options,
        ssh_config=ssh_config,
    )
    set_quiet(options.quiet)

    try:
        require_ssh()
    except CopyIdError as exc:
        _report_and_exit(exc)

    key_path = resolve_public_key_path(options)
    print_info(f"Copying key: {key_path}")
    print_info(f"To server: {options.display_target}")

    if options.dry_run:
        _dry_run(options, key_path)
        raise typer.Exit(0)

    try:
        key = read_public_key(key_path)

        print_info("Testing connection...")
        ensure_login(options)

        outcome = install_key(options, key)
    except CopyIdError as exc:
        _report_and_exit(exc)

    if outcome is InstallOutcome.ADDED:
        print_success("Key copied successfully!")

    if not options.quiet:
        print_info("Testing connection with key...")
        if verify_key_login(options, private_key_path(key_path)):
            print_success("Connection with key works!")
        else:
            print_warning("Connection with key failed.")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def app_entry() -> None:
    """Console script entry point for ``ssh-copy-id``."""
    app()
