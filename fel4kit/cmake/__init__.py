"""
CMake integration module for fel4kit.

This module turns resolved configurations into CMake cache definitions for
the native seL4 build.
"""

from .definitions import (
    RESERVED_VARIABLES,
    cmake_cache_type,
    generate_cmake_definitions,
    generate_cmake_args,
)

__all__ = [
    "RESERVED_VARIABLES",
    "cmake_cache_type",
    "generate_cmake_definitions",
    "generate_cmake_args",
]
