"""
Check command implementation.

Validates every layer of the manifest and every target/platform/profile
combination.
"""

import logging

from fel4kit.cli.utils import load_manifest_from_args
from fel4kit.config.validation import ManifestValidator, format_validation_results

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the manifest is valid, 1 if errors were found)
    """
    manifest = load_manifest_from_args(args)

    result = ManifestValidator().validate(manifest.layers)
    print(format_validation_results(result))

    if not result.valid:
        logger.debug(
            f"{sum(1 for i in result.issues if i.level == 'error')} error(s) found"
        )
        return 1
    return 0
