"""
Tests for running the nettune client.

POSIX tests use small shell scripts standing in for the nettune binary.
"""

import os
import signal
from unittest.mock import Mock, patch

import pytest

from helpers import write_executable
from nettune_launcher.core.exceptions import SpawnError
from nettune_launcher.process.spawner import (
    build_command,
    build_environment,
    exit_status,
    run_client,
)


def fake_binary(tmp_path, body):
    return write_executable(tmp_path / "nettune", f"#!/bin/sh\n{body}\n".encode())


class TestBuildCommand:
    """Tests for build_command and build_environment."""

    def test_inserts_client_subcommand(self, tmp_path):
        binary = tmp_path / "nettune"

        assert build_command(binary, ["--server", "http://x", "--api-key", "k"]) == [
            str(binary),
            "client",
            "--server",
            "http://x",
            "--api-key",
            "k",
        ]

    def test_no_arguments(self):
        assert build_command("/bin/nettune", []) == ["/bin/nettune", "client"]

    def test_environment_overrides_win(self):
        env = build_environment({"A": "override", "C": 3}, base={"A": "1", "B": "2"})

        assert env == {"A": "override", "B": "2", "C": "3"}

    def test_environment_defaults_to_process(self, monkeypatch):
        monkeypatch.setenv("NETTUNE_SPAWN_TEST", "yes")

        assert build_environment()["NETTUNE_SPAWN_TEST"] == "yes"


class TestExitStatus:
    """Tests for exit_status."""

    @pytest.mark.parametrize("returncode", [0, 1, 7, 255])
    def test_passthrough(self, returncode):
        assert exit_status(returncode) == returncode

    def test_signal_maps_to_shell_status(self):
        assert exit_status(-signal.SIGTERM) == 128 + signal.SIGTERM
        assert exit_status(-9) == 137


class TestRunClient:
    """Tests for run_client."""

    def test_missing_binary(self, tmp_path):
        with pytest.raises(SpawnError, match="Failed to spawn"):
            run_client(tmp_path / "missing")

    @pytest.mark.posix
    def test_not_executable(self, tmp_path):
        binary = tmp_path / "nettune"
        binary.write_bytes(b"#!/bin/sh\nexit 0\n")
        binary.chmod(0o644)

        with pytest.raises(SpawnError):
            run_client(binary)

    @pytest.mark.posix
    def test_arguments_are_passed_verbatim(self, tmp_path):
        binary = fake_binary(tmp_path, "printf '%s\\n' \"$@\"")
        out = tmp_path / "out.txt"

        with open(out, "wb") as stdout:
            status = run_client(binary, ["--flag", "two words", "--"], stdout=stdout)

        assert status == 0
        assert out.read_text().splitlines() == ["client", "--flag", "two words", "--"]

    @pytest.mark.posix
    def test_stdio_is_passed_through_unchanged(self, tmp_path):
        binary = fake_binary(tmp_path, "exec cat")
        payload = b'{"jsonrpc":"2.0","id":1}\n\x00\xff binary-safe\r\n'
        stdin_file = tmp_path / "in.bin"
        stdin_file.write_bytes(payload)
        out = tmp_path / "out.bin"

        with open(stdin_file, "rb") as stdin, open(out, "wb") as stdout:
            status = run_client(binary, stdin=stdin, stdout=stdout)

        assert status == 0
        assert out.read_bytes() == payload

    @pytest.mark.posix
    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NETTUNE_INHERITED", "from-parent")
        binary = fake_binary(
            tmp_path, 'echo "$NETTUNE_INHERITED $NETTUNE_LOG_LEVEL"'
        )
        out = tmp_path / "out.txt"

        with open(out, "wb") as stdout:
            run_client(binary, env_overrides={"NETTUNE_LOG_LEVEL": "debug"}, stdout=stdout)

        assert out.read_text().strip() == "from-parent debug"

    @pytest.mark.posix
    def test_exit_code_propagates(self, tmp_path):
        binary = fake_binary(tmp_path, "exit 7")

        assert run_client(binary) == 7

    @pytest.mark.posix
    def test_killed_child(self, tmp_path):
        binary = fake_binary(tmp_path, "kill -TERM $$")

        assert run_client(binary) == 128 + signal.SIGTERM

    @pytest.mark.posix
    def test_handlers_restored_after_run(self, tmp_path):
        binary = fake_binary(tmp_path, "exit 0")
        before = signal.getsignal(signal.SIGTERM)

        run_client(binary)

        assert signal.getsignal(signal.SIGTERM) == before

    @pytest.mark.posix
    def test_signal_during_startup_reaches_child(self, tmp_path):
        child = Mock()
        child.pid = 4242
        child.wait.return_value = 0

        def start_child(*args, **kwargs):
            os.kill(os.getpid(), signal.SIGTERM)
            return child

        with patch(
            "nettune_launcher.process.spawner.subprocess.Popen", side_effect=start_child
        ):
            status = run_client(tmp_path / "nettune")

        assert status == 0
        child.send_signal.assert_called_once_with(signal.SIGTERM)

    def test_handlers_restored_after_spawn_failure(self, tmp_path):
        before = signal.getsignal(signal.SIGINT)

        with pytest.raises(SpawnError):
            run_client(tmp_path / "missing")

        assert signal.getsignal(signal.SIGINT) == before
