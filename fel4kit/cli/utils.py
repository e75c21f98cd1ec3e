"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import json
import logging
from typing import Any, Dict

import yaml

from fel4kit.config.loader import Fel4Manifest, load_manifest
from fel4kit.config.resolver import Fel4Config

logger = logging.getLogger(__name__)


def load_manifest_from_args(args) -> Fel4Manifest:
    """
    Load the manifest named by the --manifest option.

    Args:
        args: Parsed arguments with a manifest attribute

    Returns:
        Parsed manifest

    Raises:
        ManifestError: If the manifest cannot be read
    """
    logger.debug(f"Using manifest {args.manifest}")
    return load_manifest(args.manifest)


def resolve_from_args(args) -> Fel4Config:
    """
    Load the manifest and resolve it for the selection given on the command line.

    Unset options fall back to the manifest's [fel4] defaults.
    """
    manifest = load_manifest_from_args(args)
    return manifest.resolve(
        target=getattr(args, "target", None),
        platform=getattr(args, "platform", None),
        profile=getattr(args, "profile", None),
    )


def format_config(data: Dict[str, Any], output_format: str = "json") -> str:
    """
    Serialize a configuration dictionary for display.

    Args:
        data: Dictionary from Fel4Config.to_dict()
        output_format: "json" or "yaml"

    Returns:
        Serialized text
    """
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip()
    return json.dumps(data, indent=2)
