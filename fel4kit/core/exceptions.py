"""
Centralized exception hierarchy for fel4kit.

Every failure of configuration resolution is a local validation error raised
to the caller with enough context (layer name, property name, offending
token) to correct the configuration. Nothing here is retried.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class Fel4KitError(Exception):
    """Base exception for all fel4kit errors."""

    pass


class ConfigResolutionError(Fel4KitError):
    """Base exception for errors raised while resolving a configuration."""

    pass


# ============================================================================
# Identifier Exceptions
# ============================================================================


class UnknownIdentifierError(ConfigResolutionError, ValueError):
    """Raised when a target, platform, profile or scope token is not recognized."""

    def __init__(self, kind: str, value: object, valid_names: Sequence[str]):
        self.kind = kind
        self.value = value
        self.valid_names = list(valid_names)
        super().__init__(
            f"Unknown {kind}: {value!r} "
            f"(expected one of: {', '.join(self.valid_names)})"
        )


# ============================================================================
# Shape Exceptions
# ============================================================================


class ShapeError(ConfigResolutionError):
    """Base exception for values that do not fit the flat value domain."""

    pass


class UnsupportedNestedValueError(ShapeError):
    """Raised when a table or array appears where a scalar is required."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Property '{path}' holds a nested table or array; "
            "only strings, integers, floats, booleans and datetimes are allowed"
        )


class UnsupportedValueTypeError(ShapeError):
    """Raised when a scalar of an unsupported Python type is supplied."""

    def __init__(self, path: str, type_name: str):
        self.path = path
        self.type_name = type_name
        super().__init__(f"Property '{path}' has unsupported value type: {type_name}")


class InvalidSectionError(ShapeError):
    """Raised when a section body is not a table."""

    def __init__(self, layer: str, type_name: str):
        self.layer = layer
        self.type_name = type_name
        super().__init__(f"Layer '{layer}' must be a table, got {type_name}")


class InvalidPathValueError(ShapeError):
    """Raised when a reserved path key is not a non-empty string."""

    def __init__(self, layer: str, key: str):
        self.layer = layer
        self.key = key
        super().__init__(f"Layer '{layer}': '{key}' must be a non-empty string")


# ============================================================================
# Merge Exceptions
# ============================================================================


class MergeError(ConfigResolutionError):
    """Base exception for conflicting definitions."""

    pass


class DuplicateLayerDefinitionError(MergeError):
    """Raised when the same scope is defined by more than one layer."""

    def __init__(self, layer: str):
        self.layer = layer
        super().__init__(f"Layer '{layer}' is defined more than once")


class DuplicatePropertyNameError(MergeError):
    """Raised when a property name appears twice within one layer."""

    def __init__(self, layer: Optional[str], name: str):
        self.layer = layer
        self.name = name
        where = f"layer '{layer}'" if layer else "a layer"
        super().__init__(f"Property '{name}' is defined more than once in {where}")


class InvalidPropertyNameError(MergeError):
    """Raised when a property name is empty or not a string."""

    def __init__(self, layer: Optional[str], name: object):
        self.layer = layer
        self.name = name
        where = f" in layer '{layer}'" if layer else ""
        super().__init__(f"Invalid property name{where}: {name!r}")


# ============================================================================
# Completeness Exceptions
# ============================================================================


class MissingRequiredPathError(ConfigResolutionError):
    """Raised when no applicable layer defines a required path."""

    def __init__(self, path_name: str):
        self.path_name = path_name
        super().__init__(
            f"Missing required path '{path_name}': define it in the global "
            "layer or in one of the selected target, platform or profile layers"
        )


# ============================================================================
# Manifest Exceptions
# ============================================================================


class ManifestError(Fel4KitError):
    """Raised when a manifest file cannot be read or parsed."""

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest '{path}': {reason}")
