"""
CMake arguments command implementation.

Prints one -D cache argument per line for the resolved configuration.
"""

import logging

from fel4kit.cli.utils import resolve_from_args
from fel4kit.cmake.definitions import generate_cmake_args

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cmake-args command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = resolve_from_args(args)

    for arg in generate_cmake_args(config):
        print(arg)
    return 0
