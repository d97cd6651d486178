"""
Run command implementation.

Ensures the nettune binary is installed, then runs it in client mode with
the launcher's stdio and signals passed through.
"""

import logging

from nettune_launcher.binary import BinaryManager
from nettune_launcher.cli.utils import load_config_from_args, log_progress
from nettune_launcher.process import run_client

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit status of the nettune client
    """
    config = load_config_from_args(args)
    manager = BinaryManager(config)

    binary_path = manager.ensure_binary(progress_callback=log_progress)

    return run_client(binary_path, args.client_args, env_overrides=config.env)
