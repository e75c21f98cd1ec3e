"""
Core functionality for fel4kit.

This package contains the identifier enumerations and the exception hierarchy
that the configuration modules depend on.
"""

from .identifiers import (
    SupportedTarget,
    SupportedPlatform,
    BuildProfile,
    DEFAULT_PLATFORMS,
)

from .exceptions import (
    Fel4KitError,
    ConfigResolutionError,
    UnknownIdentifierError,
    ShapeError,
    UnsupportedNestedValueError,
    UnsupportedValueTypeError,
    InvalidSectionError,
    InvalidPathValueError,
    MergeError,
    DuplicateLayerDefinitionError,
    DuplicatePropertyNameError,
    InvalidPropertyNameError,
    MissingRequiredPathError,
    ManifestError,
)

__all__ = [
    # Identifiers
    "SupportedTarget",
    "SupportedPlatform",
    "BuildProfile",
    "DEFAULT_PLATFORMS",
    # Exceptions
    "Fel4KitError",
    "ConfigResolutionError",
    "UnknownIdentifierError",
    "ShapeError",
    "UnsupportedNestedValueError",
    "UnsupportedValueTypeError",
    "InvalidSectionError",
    "InvalidPathValueError",
    "MergeError",
    "DuplicateLayerDefinitionError",
    "DuplicatePropertyNameError",
    "InvalidPropertyNameError",
    "MissingRequiredPathError",
    "ManifestError",
]
