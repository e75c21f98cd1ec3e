"""Configuration module for fel4kit.

This module provides the flat value domain, the layered configuration model,
resolution of layers into a Fel4Config, manifest loading and validation.
"""

from fel4kit.config.values import (
    FlatValueKind,
    FlatTomlValue,
    FlatTomlProperty,
    to_flat_value,
)
from fel4kit.config.layers import (
    LayerScope,
    ConfigLayer,
    LayeredConfig,
    all_scope_names,
    parse_scope,
)
from fel4kit.config.resolver import (
    Fel4Config,
    resolve,
    resolve_names,
    resolve_matrix,
)
from fel4kit.config.loader import (
    Fel4Manifest,
    load_manifest,
    parse_manifest,
)
from fel4kit.config.validation import (
    ValidationIssue,
    ValidationResult,
    ManifestValidator,
    format_validation_results,
)

__all__ = [
    # Value domain
    "FlatValueKind",
    "FlatTomlValue",
    "FlatTomlProperty",
    "to_flat_value",
    # Layers
    "LayerScope",
    "ConfigLayer",
    "LayeredConfig",
    "all_scope_names",
    "parse_scope",
    # Resolution
    "Fel4Config",
    "resolve",
    "resolve_names",
    "resolve_matrix",
    # Manifest
    "Fel4Manifest",
    "load_manifest",
    "parse_manifest",
    "ValidationIssue",
    "ValidationResult",
    "ManifestValidator",
    "format_validation_results",
]
