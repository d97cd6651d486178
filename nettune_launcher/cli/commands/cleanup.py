"""
Cleanup command implementation.

Removes staging files left in the cache by interrupted downloads.
"""

import logging

from nettune_launcher.binary import CacheStore
from nettune_launcher.cli.utils import load_config_from_args

logger = logging.getLogger(__name__)


def run(args) -> int:
    config = load_config_from_args(args)
    cache = CacheStore(config)

    removed = cache.remove_orphaned_temp_files(max_age_hours=args.max_age_hours)

    logger.info(f"Removed {removed} orphaned download(s) from {config.cache_dir}")
    return 0
