"""
Tests for config.layers module.

Tests cover:
- Scope name parsing
- ConfigLayer construction from raw sections
- Duplicate property and duplicate layer detection
- LayeredConfig queries
"""

import pytest

from fel4kit.config.layers import (
    ConfigLayer,
    LayeredConfig,
    LayerScope,
    all_scope_names,
    parse_scope,
)
from fel4kit.config.values import FlatTomlProperty, FlatTomlValue
from fel4kit.core.exceptions import (
    DuplicateLayerDefinitionError,
    DuplicatePropertyNameError,
    InvalidPathValueError,
    InvalidPropertyNameError,
    InvalidSectionError,
    UnknownIdentifierError,
    UnsupportedNestedValueError,
)
from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget


class TestParseScope:
    """Test mapping section names onto scopes."""

    def test_global(self):
        assert parse_scope("global") == (LayerScope.GLOBAL, None)

    def test_target(self):
        assert parse_scope("aarch64-sel4-fel4") == (
            LayerScope.TARGET,
            SupportedTarget.AARCH64_SEL4_FEL4,
        )

    def test_platform(self):
        assert parse_scope("sabre") == (LayerScope.PLATFORM, SupportedPlatform.SABRE)

    def test_profile(self):
        assert parse_scope("release") == (LayerScope.PROFILE, BuildProfile.RELEASE)

    def test_unknown_scope(self):
        """Test unknown section names list every valid scope."""
        with pytest.raises(UnknownIdentifierError) as exc_info:
            parse_scope("Global")

        assert exc_info.value.kind == "scope"
        assert exc_info.value.valid_names == all_scope_names()

    def test_all_scope_names(self):
        names = all_scope_names()

        assert names[0] == "global"
        assert len(names) == 9
        assert "tx1" in names


class TestConfigLayer:
    """Test ConfigLayer."""

    def test_from_section(self):
        """Test building a layer from a mapping."""
        layer = ConfigLayer.from_section(
            "global",
            {
                "artifact-path": "artifacts",
                "target-specs-path": "target_specs",
                "KernelPrinting": False,
                "KernelMaxNumNodes": 1,
            },
        )

        assert layer.scope is LayerScope.GLOBAL
        assert layer.key is None
        assert layer.name == "global"
        assert layer.artifact_path == "artifacts"
        assert layer.target_specs_path == "target_specs"
        assert [p.name for p in layer.properties] == [
            "KernelPrinting",
            "KernelMaxNumNodes",
        ]
        assert layer.property_map()["KernelMaxNumNodes"] == FlatTomlValue.integer(1)

    def test_paths_are_optional(self):
        """Test a layer may omit both paths."""
        layer = ConfigLayer.from_section("pc99", {"KernelX86MicroArch": "nehalem"})

        assert layer.artifact_path is None
        assert layer.target_specs_path is None
        assert layer.key is SupportedPlatform.PC99

    def test_underscore_path_spelling(self):
        """Test path keys may use underscores."""
        layer = ConfigLayer.from_section("debug", {"artifact_path": "out"})

        assert layer.artifact_path == "out"
        assert layer.properties == ()

    def test_path_must_be_string(self):
        """Test non-string paths are rejected."""
        with pytest.raises(InvalidPathValueError) as exc_info:
            ConfigLayer.from_section("global", {"artifact-path": 3})

        assert exc_info.value.layer == "global"
        assert exc_info.value.key == "artifact-path"

    def test_path_spelled_twice(self):
        """Test both spellings of one path key in a layer are a duplicate."""
        with pytest.raises(DuplicatePropertyNameError):
            ConfigLayer.from_section(
                "global", [("artifact-path", "a"), ("artifact_path", "b")]
            )

    def test_duplicate_property_in_pairs(self):
        """Test a repeated key in one section is an error, not last-wins."""
        with pytest.raises(DuplicatePropertyNameError) as exc_info:
            ConfigLayer.from_section(
                "x86_64-sel4-fel4", [("KernelArch", "x86"), ("KernelArch", "arm")]
            )

        assert exc_info.value.layer == "x86_64-sel4-fel4"
        assert exc_info.value.name == "KernelArch"

    def test_duplicate_property_direct(self):
        """Test constructing a layer with repeated property names fails."""
        prop = FlatTomlProperty("a", FlatTomlValue.integer(1))

        with pytest.raises(DuplicatePropertyNameError):
            ConfigLayer(LayerScope.GLOBAL, properties=(prop, prop))

    def test_nested_value_names_property(self):
        """Test nested values are rejected with the layer-qualified path."""
        with pytest.raises(UnsupportedNestedValueError) as exc_info:
            ConfigLayer.from_section("tx1", {"KernelFlags": ["-O2", "-g"]})

        assert exc_info.value.path == "tx1.KernelFlags"

    def test_empty_key_rejected(self):
        with pytest.raises(InvalidPropertyNameError):
            ConfigLayer.from_section("global", {"": 1})

    def test_non_table_section(self):
        """Test a scalar section body is rejected."""
        with pytest.raises(InvalidSectionError):
            ConfigLayer.from_section("global", 5)

    def test_none_section_is_empty(self):
        """Test an empty YAML section loads as an empty layer."""
        layer = ConfigLayer.from_section("release", None)

        assert layer.is_empty

    def test_key_must_match_scope(self):
        """Test a target key cannot be used for a platform layer."""
        with pytest.raises(ValueError):
            ConfigLayer(LayerScope.PLATFORM, key=SupportedTarget.ARMV7_SEL4_FEL4)

        with pytest.raises(ValueError):
            ConfigLayer(LayerScope.GLOBAL, key=BuildProfile.DEBUG)

    def test_layer_is_immutable(self):
        layer = ConfigLayer.from_section("global", {"a": 1})

        with pytest.raises(AttributeError):
            layer.artifact_path = "elsewhere"


class TestLayeredConfig:
    """Test LayeredConfig."""

    def test_from_mapping(self, precedence_sections):
        layered = LayeredConfig.from_mapping(precedence_sections)

        assert len(layered) == 4
        assert layered.scope_names() == ["global", "x86_64-sel4-fel4", "pc99", "debug"]

    def test_layers_for(self, precedence_sections):
        layered = LayeredConfig.from_mapping(precedence_sections)

        targets = layered.layers_for(LayerScope.TARGET, SupportedTarget.X86_64_SEL4_FEL4)
        assert len(targets) == 1
        assert targets[0].property_map()["b"] == FlatTomlValue.integer(3)

        assert layered.layers_for(LayerScope.PLATFORM, SupportedPlatform.TX1) == []
        assert len(layered.global_layers()) == 1

    def test_duplicate_layers_preserved_then_reported(self):
        """Test duplicate scopes are kept and reported, never merged."""
        layered = LayeredConfig.from_sections(
            [
                ("global", {"a": 1}),
                ("armv7-sel4-fel4", {"a": 2}),
                ("armv7-sel4-fel4", {"a": 3}),
            ]
        )

        assert len(layered) == 3
        assert layered.duplicate_scope_names() == ["armv7-sel4-fel4"]

        with pytest.raises(DuplicateLayerDefinitionError) as exc_info:
            layered.check_unique_layers()
        assert exc_info.value.layer == "armv7-sel4-fel4"

    def test_duplicate_global(self):
        layered = LayeredConfig.from_sections([("global", {}), ("global", {})])

        with pytest.raises(DuplicateLayerDefinitionError):
            layered.check_unique_layers()

    def test_unique_layers_pass(self, precedence_sections):
        LayeredConfig.from_mapping(precedence_sections).check_unique_layers()

    def test_unknown_section(self):
        with pytest.raises(UnknownIdentifierError):
            LayeredConfig.from_mapping({"x86_64": {}})

    def test_equality(self, precedence_sections):
        assert LayeredConfig.from_mapping(
            precedence_sections
        ) == LayeredConfig.from_mapping(precedence_sections)
