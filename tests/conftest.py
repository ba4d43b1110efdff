"""Shared fixtures: a fake ssh runner that emulates the remote side."""

from __future__ import annotations

from pathlib import Path

import pytest

from ssh_copy_id.config import Options

APPEND_PREFIX = "echo '"
APPEND_SUFFIX = "' >> ~/.ssh/authorized_keys && chmod 600 ~/.ssh/authorized_keys"


class FakeRemote:
    """Stands in for ``executor.run_capture``.

    Looks at the remote command (last argv element) and acts on an in-memory
    ``authorized_keys`` string. Exit codes per step can be overridden.
    """

    def __init__(self, authorized_keys: str | None = None) -> None:
        self.authorized_keys = authorized_keys
        self.ssh_dir = authorized_keys is not None
        self.calls: list[list[str]] = []
        self.probe_code = 0
        self.key_probe_code = 0
        self.mkdir_code = 0
        self.read_code: int | None = None
        self.append_code = 0

    def __call__(self, cmd: list[str]) -> tuple[int, str]:
        self.calls.append(list(cmd))
        remote = cmd[-1]

        if remote == "exit 0":
            return (self.key_probe_code if "-i" in cmd else self.probe_code), ""

        if remote.startswith("mkdir -p ~/.ssh"):
            if self.mkdir_code == 0:
                self.ssh_dir = True
            return self.mkdir_code, ""

        if remote.startswith("cat ~/.ssh/authorized_keys"):
            if self.read_code is not None:
                return self.read_code, ""
            if self.authorized_keys is None:
                return 1, ""
            return 0, self.authorized_keys

        if remote.startswith(APPEND_PREFIX) and remote.endswith(APPEND_SUFFIX):
            if self.append_code != 0:
                return self.append_code, ""
            escaped = remote[len(APPEND_PREFIX):-len(APPEND_SUFFIX)]
            key = escaped.replace("'\\''", "'")
            self.authorized_keys = (self.authorized_keys or "") + key + "\n"
            return 0, ""

        raise AssertionError(f"unexpected remote command: {remote!r}")

    @property
    def remote_commands(self) -> list[str]:
        return [c[-1] for c in self.calls]

    def appends(self) -> int:
        return sum(1 for c in self.remote_commands if c.startswith(APPEND_PREFIX))


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def options() -> Options:
    return Options(user="alice", host="server.example.com")


@pytest.fixture()
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    (h / ".ssh").mkdir(parents=True)
    return h


@pytest.fixture(autouse=True)
def _reset_quiet():
    from ssh_copy_id.utils import set_quiet

    set_quiet(False)
    yield
    set_quiet(False)
