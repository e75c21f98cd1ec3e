"""
Resolve command implementation.

Merges the manifest layers for one target/platform/profile and prints the
resulting configuration.
"""

import logging

from fel4kit.cli.utils import format_config, resolve_from_args

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = resolve_from_args(args)
    logger.debug(
        f"Resolved {config.target}/{config.platform}/{config.build_profile}"
    )

    print(format_config(config.to_dict(), getattr(args, "format", "json")))
    return 0
