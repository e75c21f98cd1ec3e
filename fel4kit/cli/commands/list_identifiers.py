"""
List command implementation.

Prints the canonical names of supported targets, platforms and build profiles.
"""

import logging

from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget

logger = logging.getLogger(__name__)

IDENTIFIER_KINDS = {
    "targets": SupportedTarget,
    "platforms": SupportedPlatform,
    "profiles": BuildProfile,
}


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    kind = getattr(args, "kind", None)

    if kind:
        for name in IDENTIFIER_KINDS[kind].all_names():
            print(name)
        return 0

    for title, identifier_type in IDENTIFIER_KINDS.items():
        print(f"{title}:")
        for name in identifier_type.all_names():
            print(f"  {name}")

    return 0
