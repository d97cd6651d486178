"""
Child process handling: spawning nettune and relaying signals to it.
"""

from .signals import SignalRelay, FORWARDED_SIGNALS

from .spawner import (
    CLIENT_SUBCOMMAND,
    build_command,
    build_environment,
    exit_status,
    run_client,
)

__all__ = [
    "SignalRelay",
    "FORWARDED_SIGNALS",
    "CLIENT_SUBCOMMAND",
    "build_command",
    "build_environment",
    "exit_status",
    "run_client",
]
