"""Manifest loading for fel4kit.

This module reads fel4.toml (or an equivalent YAML file) and turns it into a
LayeredConfig plus the optional selection defaults of the [fel4] section.

TOML itself rejects repeated keys and tables. YAML silently keeps the last
duplicate key, so YAML manifests are read with a loader that keeps every
key/value pair and lets the layer model report the duplication.
"""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from fel4kit.config.layers import LayeredConfig
from fel4kit.config.resolver import Fel4Config, resolve
from fel4kit.core.exceptions import ManifestError
from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "fel4.toml"

SELECTION_SECTION = "fel4"
DEFAULT_TARGET_KEY = "default-target"
DEFAULT_PLATFORM_KEY = "default-platform"
DEFAULT_PROFILE_KEY = "default-profile"

_SELECTION_KEYS = {DEFAULT_TARGET_KEY, DEFAULT_PLATFORM_KEY, DEFAULT_PROFILE_KEY}

TOML_SUFFIXES = {".toml"}
YAML_SUFFIXES = {".yaml", ".yml"}


# ============================================================================
# YAML loader keeping duplicate keys
# ============================================================================


class PairsLoader(yaml.SafeLoader):
    """Safe YAML loader that builds mappings as lists of (key, value) pairs."""


def _construct_pairs(loader: PairsLoader, node: yaml.MappingNode) -> List[Tuple]:
    loader.flatten_mapping(node)
    return [
        (
            loader.construct_object(key_node, deep=True),
            loader.construct_object(value_node, deep=True),
        )
        for key_node, value_node in node.value
    ]


PairsLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_pairs
)


# ============================================================================
# Fel4Manifest
# ============================================================================


@dataclass(frozen=True)
class Fel4Manifest:
    """Parsed manifest: layered sections plus selection defaults.

    Attributes:
        path: File the manifest was read from (None for in-memory data)
        layers: Layered configuration sections
        default_target: Target used when none is requested
        default_platform: Platform used when none is requested
        default_profile: Build profile used when none is requested
    """

    path: Optional[Path]
    layers: LayeredConfig
    default_target: Optional[SupportedTarget] = None
    default_platform: Optional[SupportedPlatform] = None
    default_profile: Optional[BuildProfile] = None

    def select(
        self,
        target: Union[SupportedTarget, str, None] = None,
        platform: Union[SupportedPlatform, str, None] = None,
        profile: Union[BuildProfile, str, None] = None,
    ) -> Tuple[SupportedTarget, SupportedPlatform, BuildProfile]:
        """
        Pick the triple to resolve.

        Explicit arguments win, then the manifest defaults, then the first
        variant of each identifier set.
        """
        chosen_target = _first_set(
            target, self.default_target, SupportedTarget.all_variants()[0]
        )
        chosen_platform = _first_set(
            platform, self.default_platform, SupportedPlatform.all_variants()[0]
        )
        chosen_profile = _first_set(profile, self.default_profile, BuildProfile.DEBUG)

        if isinstance(chosen_target, str):
            chosen_target = SupportedTarget.parse(chosen_target)
        if isinstance(chosen_platform, str):
            chosen_platform = SupportedPlatform.parse(chosen_platform)
        if isinstance(chosen_profile, str):
            chosen_profile = BuildProfile.parse(chosen_profile)

        return chosen_target, chosen_platform, chosen_profile

    def resolve(
        self,
        target: Union[SupportedTarget, str, None] = None,
        platform: Union[SupportedPlatform, str, None] = None,
        profile: Union[BuildProfile, str, None] = None,
    ) -> Fel4Config:
        """Resolve this manifest for the selected triple."""
        return resolve(self.layers, *self.select(target, platform, profile))


def _first_set(*candidates):
    """Return the first candidate that is not None."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


# ============================================================================
# Loading
# ============================================================================


def load_manifest(path: Union[Path, str]) -> Fel4Manifest:
    """
    Load a fel4 manifest from disk.

    Args:
        path: Path to a .toml, .yaml or .yml manifest

    Returns:
        Parsed manifest

    Raises:
        ManifestError: If the file is missing, unreadable or not valid syntax
        ConfigResolutionError: If the sections are not a valid layered config
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix not in TOML_SUFFIXES | YAML_SUFFIXES:
        raise ManifestError(
            path, f"unsupported file type '{suffix}' (expected .toml, .yaml or .yml)"
        )
    if not path.exists():
        raise ManifestError(path, "file not found")

    logger.debug(f"Loading manifest from {path}")

    try:
        if suffix in TOML_SUFFIXES:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.load(f, Loader=PairsLoader)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(path, f"invalid TOML: {e}")
    except yaml.YAMLError as e:
        raise ManifestError(path, f"invalid YAML: {e}")
    except UnicodeDecodeError as e:
        raise ManifestError(path, f"not valid UTF-8: {e}")
    except OSError as e:
        raise ManifestError(path, f"cannot read file: {e}")

    if data is None:
        data = []

    return parse_manifest(data, path=path)


def parse_manifest(
    data: Union[Mapping[str, Any], Sequence[Tuple[str, Any]]],
    path: Optional[Path] = None,
) -> Fel4Manifest:
    """
    Build a manifest from already-parsed data.

    Args:
        data: Top-level table as a mapping or a sequence of (key, value) pairs
        path: Source file, for error messages

    Returns:
        Parsed manifest
    """
    if isinstance(data, Mapping):
        items = list(data.items())
    elif _is_pair_list(data):
        items = list(data)
    else:
        raise ManifestError(path or "<data>", "top level must be a table")

    selection: List[Tuple[str, Any]] = []
    sections: List[Tuple[str, Any]] = []
    for key, value in items:
        if key == SELECTION_SECTION:
            selection.extend(_section_items(value, path))
        else:
            sections.append((key, value))

    defaults = _parse_selection(selection, path)
    layers = LayeredConfig.from_sections(sections)

    logger.debug(
        f"Manifest {path or '<data>'}: {len(layers)} layers "
        f"({', '.join(layers.scope_names())})"
    )

    return Fel4Manifest(path=path, layers=layers, **defaults)


def _is_pair_list(data: Any) -> bool:
    """True for a list/tuple of (key, value) pairs, as built by PairsLoader."""
    return isinstance(data, (list, tuple)) and all(
        isinstance(item, tuple) and len(item) == 2 for item in data
    )


def _section_items(value: Any, path: Optional[Path]) -> List[Tuple[Any, Any]]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return list(value.items())
    if _is_pair_list(value):
        return list(value)
    raise ManifestError(path or "<data>", f"[{SELECTION_SECTION}] must be a table")


def _parse_selection(items: List[Tuple[Any, Any]], path: Optional[Path]) -> dict:
    """Parse the [fel4] section into default identifiers."""
    seen = set()
    defaults = {}

    for key, value in items:
        if key in seen:
            raise ManifestError(
                path or "<data>", f"[{SELECTION_SECTION}] repeats key '{key}'"
            )
        seen.add(key)

        if key not in _SELECTION_KEYS:
            logger.warning(
                f"Unknown key '{key}' in [{SELECTION_SECTION}] of "
                f"{path or '<data>'}; it will be ignored"
            )
            continue

        if key == DEFAULT_TARGET_KEY:
            defaults["default_target"] = SupportedTarget.parse(value)
        elif key == DEFAULT_PLATFORM_KEY:
            defaults["default_platform"] = SupportedPlatform.parse(value)
        else:
            defaults["default_profile"] = BuildProfile.parse(value)

    return defaults
