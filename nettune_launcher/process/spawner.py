"""
Run the nettune binary in client mode with transparent stdio.

The launcher is usually started by an MCP client that speaks a protocol
over stdin/stdout. The child therefore inherits the launcher's standard
streams directly (no pipes, no buffering, no re-encoding) and the launcher
itself never writes to stdout.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import IO, Dict, List, Mapping, Optional, Sequence, Union

from nettune_launcher.core.exceptions import SpawnError

from .signals import SignalRelay

logger = logging.getLogger(__name__)

CLIENT_SUBCOMMAND = "client"

StdStream = Optional[Union[IO, int]]


def build_command(binary_path: Union[str, Path], args: Sequence[str]) -> List[str]:
    """Argument vector for `nettune client <args...>`."""
    return [str(binary_path), CLIENT_SUBCOMMAND, *args]


def build_environment(
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Child environment: the parent's environment with overrides applied.

    Overrides win on key collisions.
    """
    env = dict(os.environ if base is None else base)
    if overrides:
        env.update({str(k): str(v) for k, v in overrides.items()})
    return env


def exit_status(returncode: int) -> int:
    """
    Convert a Popen return code to a process exit status.

    A child killed by signal N (negative return code) maps to 128 + N, the
    status a shell would report.
    """
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


def run_client(
    binary_path: Union[str, Path],
    args: Sequence[str] = (),
    env_overrides: Optional[Mapping[str, str]] = None,
    stdin: StdStream = None,
    stdout: StdStream = None,
    stderr: StdStream = None,
) -> int:
    """
    Run `nettune client <args...>` and wait for it to finish.

    Standard streams default to the launcher's own (inherited). Explicit
    file objects or descriptors are handed to the child as-is.

    While the child runs, SIGINT/SIGTERM/SIGHUP received by the launcher are
    forwarded to it.

    Args:
        binary_path: Path to the nettune executable
        args: Arguments after the `client` subcommand
        env_overrides: Environment variables to set for the child
        stdin, stdout, stderr: Optional replacement streams

    Returns:
        The child's exit status

    Raises:
        SpawnError: If the executable could not be started
    """
    command = build_command(binary_path, args)
    env = build_environment(env_overrides)

    logger.debug(f"Starting: {' '.join(command)}")

    # Signals that arrive while the child is starting are held until attach()
    with SignalRelay() as relay:
        try:
            process = subprocess.Popen(
                command, env=env, stdin=stdin, stdout=stdout, stderr=stderr
            )
        except OSError as e:
            raise SpawnError(
                f"Failed to spawn nettune client {binary_path}: {e}"
            ) from e

        relay.attach(process)
        returncode = process.wait()

    status = exit_status(returncode)
    logger.debug(f"nettune client exited with status {status}")
    return status


__all__ = [
    "CLIENT_SUBCOMMAND",
    "build_command",
    "build_environment",
    "exit_status",
    "run_client",
]
