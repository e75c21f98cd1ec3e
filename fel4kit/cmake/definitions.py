"""
CMake cache definitions for resolved fel4 configurations.

The seL4 kernel build is configured through CMake cache variables. This module
turns a Fel4Config into those variables and into ready-to-use -D arguments.
"""

import logging
from typing import Dict, List

from fel4kit.config.resolver import Fel4Config
from fel4kit.config.values import FlatTomlValue, FlatValueKind
from fel4kit.core.exceptions import MergeError

logger = logging.getLogger(__name__)

RESERVED_VARIABLES = (
    "FEL4_TARGET",
    "FEL4_PLATFORM",
    "FEL4_BUILD_PROFILE",
    "FEL4_ARTIFACT_PATH",
    "FEL4_TARGET_SPECS_PATH",
)


def cmake_cache_type(value: FlatTomlValue) -> str:
    """
    CMake cache entry type for a flat value.

    Args:
        value: Property value

    Returns:
        "BOOL" for booleans, "STRING" otherwise
    """
    if value.kind is FlatValueKind.BOOLEAN:
        return "BOOL"
    return "STRING"


def generate_cmake_definitions(config: Fel4Config) -> Dict[str, str]:
    """
    Generate CMake variables for a resolved configuration.

    Args:
        config: Resolved configuration

    Returns:
        Dictionary of CMake variable names to values

    Raises:
        MergeError: If a property uses one of the reserved FEL4_* names

    Example:
        >>> vars = generate_cmake_definitions(config)
        >>> print(vars["FEL4_PLATFORM"])
        'pc99'
    """
    vars = {
        "FEL4_TARGET": config.target.full_name,
        "FEL4_PLATFORM": config.platform.full_name,
        "FEL4_BUILD_PROFILE": config.build_profile.full_name,
        "FEL4_ARTIFACT_PATH": config.artifact_path,
        "FEL4_TARGET_SPECS_PATH": config.target_specs_path,
    }

    for name, value in config.properties.items():
        if name in RESERVED_VARIABLES:
            raise MergeError(
                f"Property '{name}' clashes with a reserved CMake variable"
            )
        vars[name] = value.to_text()

    return vars


def generate_cmake_args(config: Fel4Config) -> List[str]:
    """
    Generate cmake -D arguments for a resolved configuration.

    Reserved FEL4_* variables come first, followed by the properties in name
    order.

    Args:
        config: Resolved configuration

    Returns:
        List of arguments such as "-DKernelPrinting:BOOL=ON"
    """
    args = []

    for key, value in generate_cmake_definitions(config).items():
        if key in config.properties:
            cache_type = cmake_cache_type(config.properties[key])
        else:
            cache_type = "STRING"
        args.append(f"-D{key}:{cache_type}={value}")

    logger.debug(f"Generated {len(args)} CMake arguments for {config.target}")
    return args
