"""
Ensure command implementation.

Installs the nettune binary if needed and prints its path.
"""

import logging

from nettune_launcher.binary import BinaryManager
from nettune_launcher.cli.utils import load_config_from_args, log_progress

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the ensure command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config_from_args(args)
    manager = BinaryManager(config)

    binary_path = manager.ensure_binary(progress_callback=log_progress)

    print(binary_path)
    return 0
