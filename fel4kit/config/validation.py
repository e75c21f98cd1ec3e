"""Manifest validation module for fel4kit.

Resolution stops at the first error. This module instead lints a layered
configuration as a whole: it tries every target/platform/profile combination
and collects all problems, plus warnings about suspicious but legal input.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from fel4kit.config.layers import LayeredConfig
from fel4kit.config.resolver import resolve
from fel4kit.config.values import FlatValueKind
from fel4kit.core.exceptions import (
    ConfigResolutionError,
    MergeError,
    MissingRequiredPathError,
    ShapeError,
)
from fel4kit.core.identifiers import (
    DEFAULT_PLATFORMS,
    BuildProfile,
    SupportedPlatform,
    SupportedTarget,
)


@dataclass
class ValidationIssue:
    """A single validation issue."""

    level: str  # 'error', 'warning', 'info'
    field: str  # Layer or property path
    message: str  # Human-readable message
    suggestion: str  # How to fix it


@dataclass
class ValidationResult:
    """Result of manifest validation."""

    valid: bool
    issues: List[ValidationIssue]


class ManifestValidator:
    """Validates a layered fel4 configuration."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []

    def validate(self, layered: LayeredConfig) -> ValidationResult:
        """
        Perform comprehensive validation.

        Args:
            layered: Layered configuration to validate

        Returns:
            ValidationResult with any issues found
        """
        self.issues = []

        self._validate_unique_layers(layered)
        self._validate_resolution(layered)
        self._validate_value_kinds(layered)
        self._validate_empty_layers(layered)
        self._validate_pairings(layered)

        has_errors = any(issue.level == "error" for issue in self.issues)

        return ValidationResult(valid=not has_errors, issues=self.issues)

    def _validate_unique_layers(self, layered: LayeredConfig):
        """Report each scope defined more than once."""
        for name in layered.duplicate_scope_names():
            self._add_error(
                name,
                f"Layer '{name}' is defined more than once",
                f"Merge the '{name}' sections into one",
            )

    def _validate_resolution(self, layered: LayeredConfig):
        """Try to resolve every combination and report failures."""
        # Duplicate layers make every combination fail; already reported
        if layered.duplicate_scope_names():
            return

        for target in SupportedTarget.all_variants():
            for platform in SupportedPlatform.all_variants():
                for profile in BuildProfile.all_variants():
                    try:
                        resolve(layered, target, platform, profile)
                    except ConfigResolutionError as e:
                        self._add_error(
                            f"resolution.{target}/{platform}/{profile}",
                            str(e),
                            _resolution_suggestion(e),
                        )

    def _validate_value_kinds(self, layered: LayeredConfig):
        """Warn when layers give one property values of different kinds."""
        kinds: Dict[str, Dict[FlatValueKind, str]] = {}

        for layer in layered:
            for prop in layer.properties:
                kinds.setdefault(prop.name, {}).setdefault(prop.value.kind, layer.name)

        for name, by_kind in kinds.items():
            if len(by_kind) > 1:
                described = ", ".join(
                    f"{kind.value} in '{layer}'" for kind, layer in by_kind.items()
                )
                self._add_warning(
                    name,
                    f"Property '{name}' has values of different kinds: {described}",
                    "Use the same value type in every layer",
                )

    def _validate_empty_layers(self, layered: LayeredConfig):
        """Note layers that contribute nothing."""
        for layer in layered:
            if layer.is_empty:
                self._add_info(
                    layer.name,
                    f"Layer '{layer.name}' is empty",
                    "Remove the section or add settings to it",
                )

    def _validate_pairings(self, layered: LayeredConfig):
        """Note target/platform combinations outside the usual board map."""
        targets = [layer.key for layer in layered if isinstance(layer.key, SupportedTarget)]
        platforms = [
            layer.key for layer in layered if isinstance(layer.key, SupportedPlatform)
        ]

        for target in targets:
            for platform in platforms:
                expected: Optional[SupportedPlatform] = DEFAULT_PLATFORMS.get(target)
                if expected is not None and platform is not expected:
                    self._add_info(
                        f"{target}/{platform}",
                        f"{target} is usually built for {expected}, not {platform}",
                        "Resolution allows this pairing; check it is intended",
                    )

    def _add_error(self, field: str, message: str, suggestion: str):
        """Add error issue."""
        self.issues.append(
            ValidationIssue(
                level="error", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_warning(self, field: str, message: str, suggestion: str):
        """Add warning issue."""
        self.issues.append(
            ValidationIssue(
                level="warning", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_info(self, field: str, message: str, suggestion: str):
        """Add info issue."""
        self.issues.append(
            ValidationIssue(
                level="info", field=field, message=message, suggestion=suggestion
            )
        )


def _resolution_suggestion(error: ConfigResolutionError) -> str:
    """Pick a fix hint matching the kind of resolution failure."""
    if isinstance(error, MissingRequiredPathError):
        return f"Define '{error.path_name}' in the global layer"
    if isinstance(error, ShapeError):
        return "Use flat string, integer, float, boolean or datetime values"
    if isinstance(error, MergeError):
        return "Remove the conflicting definition so each name appears once"
    return "Check the layer contents"


def format_validation_results(result: ValidationResult) -> str:
    """
    Format validation results for display.

    Args:
        result: Validation result to format

    Returns:
        Formatted string for display
    """
    if result.valid and not result.issues:
        return "✓ Configuration is valid"

    lines = []

    errors = [i for i in result.issues if i.level == "error"]
    warnings = [i for i in result.issues if i.level == "warning"]
    infos = [i for i in result.issues if i.level == "info"]

    for title, group in (
        ("❌ Errors:", errors),
        ("⚠️  Warnings:", warnings),
        ("ℹ️  Info:", infos),
    ):
        if not group:
            continue
        lines.append(title)
        for issue in group:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    → {issue.suggestion}")
        lines.append("")

    return "\n".join(lines).rstrip()
