"""Tests for ssh_copy_id.installer and ssh_copy_id.probe against a fake remote."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from ssh_copy_id.config import Options
from ssh_copy_id.errors import ConnectionFailedError, RemoteMutationError
from ssh_copy_id.installer import (
    InstallOutcome,
    fetch_authorized_keys,
    install_key,
    planned_commands,
)
from ssh_copy_id.probe import ensure_login, probe_login, verify_key_login

SAMPLE_KEY = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIOu7 alice@laptop"

# ---------------------------------------------------------------------------
# Tests: install
# ---------------------------------------------------------------------------


class TestInstallKey:
    def test_fresh_host(self, options: Options, remote: FakeRemote):
        outcome = install_key(options, SAMPLE_KEY, runner=remote)
        assert outcome is InstallOutcome.ADDED
        assert remote.authorized_keys == SAMPLE_KEY + "\n"
        assert remote.ssh_dir is True
        assert remote.remote_commands[0] == "mkdir -p ~/.ssh && chmod 700 ~/.ssh"
        assert remote.remote_commands[1].startswith("cat ~/.ssh/authorized_keys")

    def test_idempotent_without_force(self, options: Options, remote: FakeRemote):
        assert install_key(options, SAMPLE_KEY, runner=remote) is InstallOutcome.ADDED
        assert install_key(options, SAMPLE_KEY, runner=remote) is InstallOutcome.ALREADY_INSTALLED
        assert remote.appends() == 1
        assert remote.authorized_keys.count(SAMPLE_KEY) == 1

    def test_already_installed_among_others(self, options: Options, remote: FakeRemote):
        remote.authorized_keys = f"ssh-rsa OTHER bob@x\n{SAMPLE_KEY}\n"
        assert install_key(options, SAMPLE_KEY, runner=remote) is InstallOutcome.ALREADY_INSTALLED
        assert remote.appends() == 0

    def test_force_appends_twice(self, options: Options, remote: FakeRemote):
        forced = replace(options, force=True)
        install_key(forced, SAMPLE_KEY, runner=remote)
        install_key(forced, SAMPLE_KEY, runner=remote)
        assert remote.appends() == 2
        assert remote.authorized_keys.count(SAMPLE_KEY) == 2

    def test_force_skips_read(self, options: Options, remote: FakeRemote):
        install_key(replace(options, force=True), SAMPLE_KEY, runner=remote)
        assert not any(c.startswith("cat ") for c in remote.remote_commands)

    def test_read_failure_fails_open(self, options: Options, remote: FakeRemote):
        remote.authorized_keys = SAMPLE_KEY + "\n"
        remote.read_code = 255
        outcome = install_key(options, SAMPLE_KEY, runner=remote)
        assert outcome is InstallOutcome.ADDED
        assert remote.authorized_keys.count(SAMPLE_KEY) == 2

    def test_mkdir_failure(self, options: Options, remote: FakeRemote):
        remote.mkdir_code = 1
        with pytest.raises(RemoteMutationError, match="Could not create ~/.ssh"):
            install_key(options, SAMPLE_KEY, runner=remote)
        assert len(remote.calls) == 1

    def test_append_failure(self, options: Options, remote: FakeRemote):
        remote.append_code = 1
        with pytest.raises(RemoteMutationError, match="Could not update"):
            install_key(options, SAMPLE_KEY, runner=remote)

    def test_key_with_single_quote_survives(self, options: Options, remote: FakeRemote):
        key = "ssh-rsa AAAA o'brien@host"
        install_key(options, key, runner=remote)
        assert remote.authorized_keys == key + "\n"

    def test_custom_port_used_for_every_step(self, remote: FakeRemote):
        opts = Options(user="root", host="box", port=2222)
        install_key(opts, SAMPLE_KEY, runner=remote)
        for cmd in remote.calls:
            assert cmd[cmd.index("-p") + 1] == "2222"
            assert cmd[-2] == "root@box"


class TestFetchAuthorizedKeys:
    def test_missing_file_is_empty(self, options: Options, remote: FakeRemote):
        assert fetch_authorized_keys(options, runner=remote) == ""

    def test_returns_contents(self, options: Options, remote: FakeRemote):
        remote.authorized_keys = "ssh-rsa X a@b\n"
        assert fetch_authorized_keys(options, runner=remote) == "ssh-rsa X a@b\n"


class TestPlannedCommands:
    def test_with_duplicate_check(self, options: Options):
        remotes = [c[-1] for c in planned_commands(options, "<key>")]
        assert remotes[0].startswith("mkdir")
        assert remotes[1].startswith("cat")
        assert remotes[2].startswith("echo '<key>'")

    def test_force_has_no_read(self, options: Options):
        cmds = planned_commands(replace(options, force=True), "<key>")
        assert len(cmds) == 2


# ---------------------------------------------------------------------------
# Tests: probes
# ---------------------------------------------------------------------------


class TestProbe:
    def test_probe_ok(self, options: Options, remote: FakeRemote):
        assert probe_login(options, runner=remote) is True
        assert remote.remote_commands == ["exit 0"]
        assert "-i" not in remote.calls[0]

    def test_probe_fails(self, options: Options, remote: FakeRemote):
        remote.probe_code = 255
        assert probe_login(options, runner=remote) is False

    def test_ensure_login_raises(self, options: Options, remote: FakeRemote):
        remote.probe_code = 255
        with pytest.raises(ConnectionFailedError, match="Check login credentials"):
            ensure_login(options, runner=remote)

    def test_verify_forces_key_auth(self, options: Options, remote: FakeRemote):
        assert verify_key_login(options, Path("/k/id_ed25519"), runner=remote) is True
        cmd = remote.calls[0]
        assert cmd[cmd.index("-i") + 1] == "/k/id_ed25519"
        assert "BatchMode=yes" in cmd
        assert "PasswordAuthentication=no" in cmd
        assert "StrictHostKeyChecking=accept-new" in cmd

    def test_verify_fails(self, options: Options, remote: FakeRemote):
        remote.key_probe_code = 255
        assert verify_key_login(options, Path("/k/id"), runner=remote) is False
