"""Subprocess runner for ssh invocations.

Every call blocks until ssh exits. There is no timeout: ssh may be waiting
on a password prompt, and it enforces its own connect timeouts.
"""

from __future__ import annotations

import os
import subprocess
from typing import Callable

from ssh_copy_id.utils import console, print_error

Runner = Callable[[list[str]], tuple[int, str]]


def run_capture(cmd: list[str]) -> tuple[int, str]:
    """Run a command, capturing stdout and leaving stdin/stderr on the terminal.

    ssh reads passwords from the terminal, so prompts still reach the user.
    Returns (exit_code, stdout_text).
    """
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            env=os.environ.copy(),
        )
        return result.returncode, result.stdout or ""
    except FileNotFoundError:
        print_error(f"Command not found: {cmd[0]}")
        return 127, ""
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130, ""
