"""Resolution of layered configuration into a concrete Fel4Config.

Layers are applied in strict precedence order:

    global -> target -> platform -> profile

A property defined by a later layer replaces the whole value of the same
property from an earlier layer. The artifact and target-specs paths follow
the same order. Resolution is a pure function of its inputs: the layered
configuration is never modified and no state is kept between calls.

Example:
    >>> layered = LayeredConfig.from_mapping({
    ...     "global": {
    ...         "artifact-path": "artifacts",
    ...         "target-specs-path": "target_specs",
    ...         "KernelPrinting": False,
    ...     },
    ...     "debug": {"KernelPrinting": True},
    ... })
    >>> config = resolve(layered, "x86_64-sel4-fel4", "pc99", "debug")
    >>> config.property("KernelPrinting")
    True
"""

import itertools
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from fel4kit.config.layers import (
    ARTIFACT_PATH_KEY,
    TARGET_SPECS_PATH_KEY,
    LayeredConfig,
    LayerScope,
)
from fel4kit.config.values import FlatTomlValue, FlatValueKind
from fel4kit.core.exceptions import MissingRequiredPathError
from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget

logger = logging.getLogger(__name__)

RawConfig = Union[LayeredConfig, Mapping[str, Any], Iterable[Tuple[str, Any]]]
TargetLike = Union[SupportedTarget, str]
PlatformLike = Union[SupportedPlatform, str]
ProfileLike = Union[BuildProfile, str]
Triple = Tuple[SupportedTarget, SupportedPlatform, BuildProfile]


# ============================================================================
# Fel4Config: Resolved Configuration
# ============================================================================


@dataclass(frozen=True)
class Fel4Config:
    """Fel4 configuration resolved for one target, platform and profile.

    Attributes:
        artifact_path: Artifact output path
        target_specs_path: Target specifications path
        target: Resolved target
        platform: Resolved platform
        build_profile: Resolved build profile
        properties: Read-only mapping of property name -> FlatTomlValue,
            ordered by name
    """

    artifact_path: str
    target_specs_path: str
    target: SupportedTarget
    platform: SupportedPlatform
    build_profile: BuildProfile
    properties: Mapping[str, FlatTomlValue]

    def __post_init__(self):
        frozen = MappingProxyType(dict(sorted(self.properties.items())))
        object.__setattr__(self, "properties", frozen)

    def __hash__(self) -> int:
        return hash(
            (
                self.artifact_path,
                self.target_specs_path,
                self.target,
                self.platform,
                self.build_profile,
                tuple(self.properties.items()),
            )
        )

    @property
    def triple(self) -> Triple:
        return (self.target, self.platform, self.build_profile)

    def property(self, name: str, default: Any = None) -> Any:
        """Python value of a property, or default if it is not set."""
        value = self.properties.get(name)
        if value is None:
            return default
        return value.to_python()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain, serializable dictionary.

        Returns:
            Dictionary with identifiers as canonical names and datetimes as
            ISO 8601 strings
        """
        properties = {}
        for name, value in self.properties.items():
            if value.kind is FlatValueKind.DATETIME:
                properties[name] = value.value.isoformat()
            else:
                properties[name] = value.to_python()

        return {
            "artifact_path": self.artifact_path,
            "target_specs_path": self.target_specs_path,
            "target": self.target.full_name,
            "platform": self.platform.full_name,
            "build_profile": self.build_profile.full_name,
            "properties": properties,
        }


# ============================================================================
# Resolution
# ============================================================================


def _as_layered(raw_config: RawConfig) -> LayeredConfig:
    if isinstance(raw_config, LayeredConfig):
        return raw_config
    if isinstance(raw_config, Mapping):
        return LayeredConfig.from_mapping(raw_config)
    return LayeredConfig.from_sections(raw_config)


def resolve(
    raw_config: RawConfig,
    target: TargetLike,
    platform: PlatformLike,
    profile: ProfileLike,
) -> Fel4Config:
    """
    Resolve a layered configuration for one target, platform and profile.

    Args:
        raw_config: LayeredConfig, or raw sections (scope name -> body mapping
            or sequence of (scope name, body) pairs)
        target: Target variant or canonical name
        platform: Platform variant or canonical name
        profile: Build profile variant or canonical name

    Returns:
        Immutable resolved configuration

    Raises:
        UnknownIdentifierError: If an identifier is not recognized
        DuplicateLayerDefinitionError: If a scope is defined more than once
        DuplicatePropertyNameError: If a layer repeats a property name
        UnsupportedNestedValueError: If raw sections hold nested values
        MissingRequiredPathError: If a required path is never defined
    """
    target = _coerce(SupportedTarget, target)
    platform = _coerce(SupportedPlatform, platform)
    profile = _coerce(BuildProfile, profile)

    layered = _as_layered(raw_config)
    layered.check_unique_layers()

    selected = [
        *layered.layers_for(LayerScope.GLOBAL),
        *layered.layers_for(LayerScope.TARGET, target),
        *layered.layers_for(LayerScope.PLATFORM, platform),
        *layered.layers_for(LayerScope.PROFILE, profile),
    ]

    properties: Dict[str, FlatTomlValue] = {}
    paths: Dict[str, Optional[str]] = {
        ARTIFACT_PATH_KEY: None,
        TARGET_SPECS_PATH_KEY: None,
    }

    for layer in selected:
        for prop in layer.properties:
            if prop.name in properties:
                logger.debug(
                    f"Layer '{layer.name}' overrides property '{prop.name}'"
                )
            properties[prop.name] = prop.value
        if layer.artifact_path is not None:
            paths[ARTIFACT_PATH_KEY] = layer.artifact_path
        if layer.target_specs_path is not None:
            paths[TARGET_SPECS_PATH_KEY] = layer.target_specs_path

    for path_name, value in paths.items():
        if value is None:
            raise MissingRequiredPathError(path_name)

    logger.debug(
        f"Resolved {target}/{platform}/{profile} from layers "
        f"{[layer.name for layer in selected]} ({len(properties)} properties)"
    )

    return Fel4Config(
        artifact_path=paths[ARTIFACT_PATH_KEY],
        target_specs_path=paths[TARGET_SPECS_PATH_KEY],
        target=target,
        platform=platform,
        build_profile=profile,
        properties=properties,
    )


def resolve_names(
    raw_config: RawConfig, target_name: str, platform_name: str, profile_name: str
) -> Fel4Config:
    """Resolve using canonical identifier names taken from text input."""
    return resolve(
        raw_config,
        SupportedTarget.parse(target_name),
        SupportedPlatform.parse(platform_name),
        BuildProfile.parse(profile_name),
    )


def resolve_matrix(
    raw_config: RawConfig,
    targets: Optional[Iterable[TargetLike]] = None,
    platforms: Optional[Iterable[PlatformLike]] = None,
    profiles: Optional[Iterable[ProfileLike]] = None,
) -> Dict[Triple, Fel4Config]:
    """
    Resolve every combination of the given identifiers.

    Args:
        raw_config: Layered configuration or raw sections
        targets: Targets to resolve (default: all)
        platforms: Platforms to resolve (default: all)
        profiles: Build profiles to resolve (default: all)

    Returns:
        Mapping of (target, platform, profile) -> Fel4Config

    Raises:
        ConfigResolutionError: The first failure; no partial result is returned
    """
    layered = _as_layered(raw_config)

    target_list = _coerce_all(SupportedTarget, targets)
    platform_list = _coerce_all(SupportedPlatform, platforms)
    profile_list = _coerce_all(BuildProfile, profiles)

    results: Dict[Triple, Fel4Config] = {}
    for triple in itertools.product(target_list, platform_list, profile_list):
        results[triple] = resolve(layered, *triple)
    return results


def _coerce(identifier_type, value):
    """Return value as a member of identifier_type, parsing strings."""
    if isinstance(value, identifier_type):
        return value
    return identifier_type.parse(value)


def _coerce_all(identifier_type, values):
    """Coerce each of values; None means every variant, an empty iterable none."""
    if values is None:
        return identifier_type.all_variants()
    return [_coerce(identifier_type, value) for value in values]
