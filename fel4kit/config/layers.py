"""Layered configuration model.

A fel4 configuration is written as sections at four specificity levels:

    global            applies to every build
    <target>          e.g. [x86_64-sel4-fel4]
    <platform>        e.g. [pc99]
    <profile>         e.g. [debug]

Each section becomes a ConfigLayer holding flat properties and, optionally,
the artifact and target-specs paths. Layers are only stored and validated
here; merging them is the resolver's job.

Example:
    >>> layered = LayeredConfig.from_mapping({
    ...     "global": {"artifact-path": "artifacts", "KernelPrinting": False},
    ...     "pc99": {"KernelX86MicroArch": "nehalem"},
    ... })
    >>> [layer.name for layer in layered.layers]
    ['global', 'pc99']
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from fel4kit.config.values import FlatTomlProperty, FlatTomlValue, to_flat_value
from fel4kit.core.exceptions import (
    DuplicateLayerDefinitionError,
    DuplicatePropertyNameError,
    InvalidPathValueError,
    InvalidPropertyNameError,
    InvalidSectionError,
    UnknownIdentifierError,
)
from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget

logger = logging.getLogger(__name__)

GLOBAL_SCOPE_NAME = "global"

ARTIFACT_PATH_KEY = "artifact-path"
TARGET_SPECS_PATH_KEY = "target-specs-path"

# Spellings accepted for the reserved path keys
_PATH_KEYS = {
    "artifact-path": ARTIFACT_PATH_KEY,
    "artifact_path": ARTIFACT_PATH_KEY,
    "target-specs-path": TARGET_SPECS_PATH_KEY,
    "target_specs_path": TARGET_SPECS_PATH_KEY,
}

LayerKey = Union[SupportedTarget, SupportedPlatform, BuildProfile, None]
SectionBody = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


class LayerScope(Enum):
    """Specificity level of a layer, lowest precedence first."""

    GLOBAL = 0
    TARGET = 1
    PLATFORM = 2
    PROFILE = 3


_SCOPE_TYPES = {
    SupportedTarget: LayerScope.TARGET,
    SupportedPlatform: LayerScope.PLATFORM,
    BuildProfile: LayerScope.PROFILE,
}


def all_scope_names() -> List[str]:
    """Every section name accepted in a layered configuration."""
    return (
        [GLOBAL_SCOPE_NAME]
        + SupportedTarget.all_names()
        + SupportedPlatform.all_names()
        + BuildProfile.all_names()
    )


def parse_scope(name: object) -> Tuple[LayerScope, LayerKey]:
    """
    Map a section name onto its scope and identifier.

    Args:
        name: "global" or a canonical target, platform or profile name

    Returns:
        (scope, key) where key is None for the global scope

    Raises:
        UnknownIdentifierError: If the name matches no scope
    """
    if name == GLOBAL_SCOPE_NAME:
        return LayerScope.GLOBAL, None
    for identifier_type, scope in _SCOPE_TYPES.items():
        if name in identifier_type.all_names():
            return scope, identifier_type.parse(name)
    raise UnknownIdentifierError("scope", name, all_scope_names())


def _iter_items(body: SectionBody, layer: str) -> Iterable[Tuple[Any, Any]]:
    """Yield (key, value) pairs from a mapping or a sequence of pairs."""
    # An empty YAML section ("debug:") loads as None
    if body is None:
        return ()
    if isinstance(body, Mapping):
        return body.items()
    if isinstance(body, (list, tuple)):
        for item in body:
            if not isinstance(item, tuple) or len(item) != 2:
                raise InvalidSectionError(layer, "array")
        return body
    raise InvalidSectionError(layer, type(body).__name__)


# ============================================================================
# ConfigLayer: one section of configuration
# ============================================================================


@dataclass(frozen=True)
class ConfigLayer:
    """One scope-specific slice of configuration.

    Attributes:
        scope: Specificity level
        key: Identifier the layer applies to (None for the global layer)
        artifact_path: Artifact output path, if this layer sets it
        target_specs_path: Target-specifications path, if this layer sets it
        properties: Flat properties in source order, names unique
    """

    scope: LayerScope
    key: LayerKey = None
    artifact_path: Optional[str] = None
    target_specs_path: Optional[str] = None
    properties: Tuple[FlatTomlProperty, ...] = field(default_factory=tuple)

    def __post_init__(self):
        expected = None if self.scope is LayerScope.GLOBAL else self.scope
        actual = _SCOPE_TYPES.get(type(self.key))
        if expected is not actual:
            raise ValueError(
                f"Layer key {self.key!r} does not match scope {self.scope.name}"
            )

        # Normalize lists into tuples so the layer stays immutable
        object.__setattr__(self, "properties", tuple(self.properties))

        seen = set()
        for prop in self.properties:
            if prop.name in seen:
                raise DuplicatePropertyNameError(self.name, prop.name)
            seen.add(prop.name)

    @property
    def name(self) -> str:
        """Section name: "global" or the canonical identifier name."""
        if self.key is None:
            return GLOBAL_SCOPE_NAME
        return self.key.full_name

    @property
    def is_empty(self) -> bool:
        """True if the layer sets no path and no property."""
        return (
            not self.properties
            and self.artifact_path is None
            and self.target_specs_path is None
        )

    def property_map(self) -> Dict[str, FlatTomlValue]:
        """Properties of this layer as a name -> value dict."""
        return {prop.name: prop.value for prop in self.properties}

    @classmethod
    def from_section(cls, scope_name: str, body: SectionBody) -> "ConfigLayer":
        """
        Build a layer from a raw configuration section.

        Args:
            scope_name: "global" or a canonical target/platform/profile name
            body: Mapping (or sequence of key/value pairs) of raw values

        Returns:
            Validated ConfigLayer

        Raises:
            UnknownIdentifierError: If scope_name is not a known scope
            DuplicatePropertyNameError: If a key appears twice in body
            UnsupportedNestedValueError: If a property value is a table or array
            InvalidPathValueError: If a path key is not a non-empty string
        """
        scope, key = parse_scope(scope_name)
        layer_name = scope_name

        paths: Dict[str, str] = {}
        properties: List[FlatTomlProperty] = []
        seen = set()

        for raw_key, raw_value in _iter_items(body, layer_name):
            if not isinstance(raw_key, str) or not raw_key:
                raise InvalidPropertyNameError(layer_name, raw_key)

            path_key = _PATH_KEYS.get(raw_key)
            if path_key is not None:
                if path_key in paths:
                    raise DuplicatePropertyNameError(layer_name, path_key)
                if not isinstance(raw_value, str) or not raw_value:
                    raise InvalidPathValueError(layer_name, raw_key)
                paths[path_key] = raw_value
                continue

            if raw_key in seen:
                raise DuplicatePropertyNameError(layer_name, raw_key)
            seen.add(raw_key)

            value = to_flat_value(raw_value, f"{layer_name}.{raw_key}")
            properties.append(FlatTomlProperty(raw_key, value))

        return cls(
            scope=scope,
            key=key,
            artifact_path=paths.get(ARTIFACT_PATH_KEY),
            target_specs_path=paths.get(TARGET_SPECS_PATH_KEY),
            properties=tuple(properties),
        )


# ============================================================================
# LayeredConfig: all sections of a configuration
# ============================================================================


class LayeredConfig:
    """Raw, pre-resolution configuration made of layers.

    Layers are kept in source order. Duplicate scopes are preserved so that
    check_unique_layers() can report them rather than silently picking one.
    """

    def __init__(self, layers: Iterable[ConfigLayer] = ()):
        self._layers: Tuple[ConfigLayer, ...] = tuple(layers)

    @classmethod
    def from_sections(
        cls, sections: Iterable[Tuple[str, SectionBody]]
    ) -> "LayeredConfig":
        """
        Build a layered configuration from (scope name, body) pairs.

        The same scope name may appear more than once; the duplication is
        reported at resolution time.
        """
        layers = []
        for scope_name, body in sections:
            layer = ConfigLayer.from_section(scope_name, body)
            logger.debug(
                f"Loaded layer '{layer.name}' with {len(layer.properties)} properties"
            )
            layers.append(layer)
        return cls(layers)

    @classmethod
    def from_mapping(cls, data: Mapping[str, SectionBody]) -> "LayeredConfig":
        """Build a layered configuration from a scope name -> body mapping."""
        return cls.from_sections(data.items())

    @property
    def layers(self) -> Tuple[ConfigLayer, ...]:
        return self._layers

    def global_layers(self) -> List[ConfigLayer]:
        return [layer for layer in self._layers if layer.scope is LayerScope.GLOBAL]

    def layers_for(self, scope: LayerScope, key: LayerKey = None) -> List[ConfigLayer]:
        """All layers with the given scope and key, in source order."""
        return [
            layer
            for layer in self._layers
            if layer.scope is scope and layer.key == key
        ]

    def scope_names(self) -> List[str]:
        """Section names in source order (duplicates included)."""
        return [layer.name for layer in self._layers]

    def duplicate_scope_names(self) -> List[str]:
        """Section names defined more than once, in order of first repetition."""
        seen = set()
        duplicates: List[str] = []
        for name in self.scope_names():
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        return duplicates

    def check_unique_layers(self) -> None:
        """
        Ensure each scope is defined at most once.

        Raises:
            DuplicateLayerDefinitionError: For the first scope defined twice
        """
        duplicates = self.duplicate_scope_names()
        if duplicates:
            raise DuplicateLayerDefinitionError(duplicates[0])

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self):
        return iter(self._layers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayeredConfig):
            return NotImplemented
        return self._layers == other._layers

    def __repr__(self) -> str:
        return f"LayeredConfig({', '.join(self.scope_names())})"
