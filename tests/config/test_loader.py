"""Unit tests for manifest loading."""

import datetime
import logging

import pytest

from fel4kit.config.loader import Fel4Manifest, load_manifest, parse_manifest
from fel4kit.config.layers import LayeredConfig
from fel4kit.core.exceptions import (
    DuplicateLayerDefinitionError,
    DuplicatePropertyNameError,
    ManifestError,
    UnknownIdentifierError,
    UnsupportedNestedValueError,
)
from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget


@pytest.mark.unit
class TestLoadToml:
    """Test loading fel4.toml manifests."""

    def test_load_sample(self, sample_manifest_toml):
        """Test parsing a complete manifest."""
        manifest = load_manifest(sample_manifest_toml)

        assert manifest.path == sample_manifest_toml
        assert manifest.default_target is SupportedTarget.ARMV7_SEL4_FEL4
        assert manifest.default_platform is SupportedPlatform.SABRE
        assert manifest.default_profile is None
        assert manifest.layers.scope_names() == [
            "global",
            "x86_64-sel4-fel4",
            "armv7-sel4-fel4",
            "aarch64-sel4-fel4",
            "pc99",
            "sabre",
            "tx1",
            "debug",
            "release",
        ]

    def test_resolve_with_defaults(self, sample_manifest_toml):
        """Test unset selections fall back to manifest defaults."""
        config = load_manifest(sample_manifest_toml).resolve()

        assert config.target is SupportedTarget.ARMV7_SEL4_FEL4
        assert config.platform is SupportedPlatform.SABRE
        assert config.build_profile is BuildProfile.DEBUG
        assert config.property("KernelArch") == "arm"
        assert config.property("KernelARMPlatform") == "sabre"
        assert config.property("KernelPrinting") is True

    def test_resolve_explicit_selection(self, sample_manifest_toml):
        """Test explicit selections override manifest defaults."""
        config = load_manifest(sample_manifest_toml).resolve(
            target="aarch64-sel4-fel4", platform="tx1", profile="release"
        )

        assert config.property("KernelArmSel4Arch") == "aarch64"
        assert config.property("KernelMaxNumNodes") == 4
        assert config.property("KernelPrinting") is False
        assert config.property("KernelOptimisation") == "-O2"
        assert config.artifact_path == "artifacts"

    def test_resolve_without_any_defaults(self, tmp_path):
        """Test the first variant of each set is used when nothing is selected."""
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text(
            '[global]\nartifact-path = "a"\ntarget-specs-path = "t"\n'
        )

        config = load_manifest(manifest_file).resolve()

        assert config.triple == (
            SupportedTarget.X86_64_SEL4_FEL4,
            SupportedPlatform.PC99,
            BuildProfile.DEBUG,
        )

    def test_toml_datetime(self, tmp_path):
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text(
            "[global]\n"
            'artifact-path = "a"\n'
            'target-specs-path = "t"\n'
            "released = 2018-05-01\n"
        )

        config = load_manifest(manifest_file).resolve()

        assert config.property("released") == datetime.date(2018, 5, 1)

    def test_toml_nested_table_rejected(self, tmp_path):
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text("[pc99]\nKernelX86MicroArch = { name = 'nehalem' }\n")

        with pytest.raises(UnsupportedNestedValueError) as exc_info:
            load_manifest(manifest_file)

        assert exc_info.value.path == "pc99.KernelX86MicroArch"

    def test_toml_subtable_rejected(self, tmp_path):
        """Test a [target.platform] sub-table is a nested value."""
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text("[x86_64-sel4-fel4.pc99]\nKernelArch = 'x86'\n")

        with pytest.raises(UnsupportedNestedValueError) as exc_info:
            load_manifest(manifest_file)

        assert exc_info.value.path == "x86_64-sel4-fel4.pc99"

    def test_invalid_toml(self, tmp_path):
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text("this is not valid TOML [[")

        with pytest.raises(ManifestError, match="invalid TOML"):
            load_manifest(manifest_file)

    def test_toml_duplicate_table(self, tmp_path):
        """Test TOML's own duplicate-table rule surfaces as a manifest error."""
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text("[debug]\na = 1\n[debug]\nb = 2\n")

        with pytest.raises(ManifestError):
            load_manifest(manifest_file)

    def test_unknown_section(self, tmp_path):
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text("[riscv]\na = 1\n")

        with pytest.raises(UnknownIdentifierError) as exc_info:
            load_manifest(manifest_file)

        assert exc_info.value.kind == "scope"


@pytest.mark.unit
class TestLoadYaml:
    """Test loading YAML manifests."""

    def test_load_sample(self, sample_manifest_yaml):
        manifest = load_manifest(sample_manifest_yaml)

        assert manifest.default_profile is BuildProfile.RELEASE

        config = manifest.resolve()
        assert config.triple == (
            SupportedTarget.X86_64_SEL4_FEL4,
            SupportedPlatform.PC99,
            BuildProfile.RELEASE,
        )
        assert config.to_dict()["properties"] == {
            "KernelArch": "x86",
            "KernelOptimisation": "-O2",
            "KernelPrinting": False,
            "KernelX86MicroArch": "nehalem",
        }

    def test_duplicate_section_detected(self, tmp_path):
        """Test repeated YAML sections reach the resolver instead of collapsing."""
        manifest_file = tmp_path / "fel4.yml"
        manifest_file.write_text(
            "global:\n"
            "  artifact-path: a\n"
            "  target-specs-path: t\n"
            "debug:\n"
            "  x: 1\n"
            "debug:\n"
            "  x: 2\n"
        )

        manifest = load_manifest(manifest_file)

        with pytest.raises(DuplicateLayerDefinitionError):
            manifest.resolve()

    def test_duplicate_property_detected(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("sabre:\n  x: 1\n  x: 2\n")

        with pytest.raises(DuplicatePropertyNameError) as exc_info:
            load_manifest(manifest_file)

        assert exc_info.value.layer == "sabre"

    def test_nested_mapping_rejected(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("tx1:\n  KernelFlags:\n    opt: 2\n")

        with pytest.raises(UnsupportedNestedValueError) as exc_info:
            load_manifest(manifest_file)

        assert exc_info.value.path == "tx1.KernelFlags"

    def test_empty_section(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("release:\n")

        manifest = load_manifest(manifest_file)

        assert manifest.layers.layers[0].is_empty

    def test_empty_file(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("")

        assert len(load_manifest(manifest_file).layers) == 0

    def test_invalid_yaml(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("global: [unclosed\n")

        with pytest.raises(ManifestError, match="invalid YAML"):
            load_manifest(manifest_file)

    def test_top_level_must_be_table(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("- global\n- debug\n")

        with pytest.raises(ManifestError, match="top level"):
            load_manifest(manifest_file)


@pytest.mark.unit
class TestManifestErrors:
    """Test manifest-level errors."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="file not found"):
            load_manifest(tmp_path / "fel4.toml")

    def test_unsupported_suffix(self, tmp_path):
        manifest_file = tmp_path / "fel4.json"
        manifest_file.write_text("{}")

        with pytest.raises(ManifestError, match="unsupported file type"):
            load_manifest(manifest_file)

    def test_accepts_string_path(self, sample_manifest_toml):
        manifest = load_manifest(str(sample_manifest_toml))

        assert isinstance(manifest, Fel4Manifest)

    def test_unknown_default_target(self):
        with pytest.raises(UnknownIdentifierError) as exc_info:
            parse_manifest({"fel4": {"default-target": "x86_64"}})

        assert exc_info.value.kind == "target"

    def test_unknown_selection_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            manifest = parse_manifest({"fel4": {"default-board": "pc99"}})

        assert "default-board" in caplog.text
        assert manifest.default_platform is None

    def test_repeated_selection_key(self):
        with pytest.raises(ManifestError):
            parse_manifest([("fel4", [("default-target", "x86_64-sel4-fel4")] * 2)])

    def test_parse_manifest_in_memory(self, precedence_sections):
        manifest = parse_manifest(precedence_sections)

        assert manifest.path is None
        assert manifest.layers == LayeredConfig.from_mapping(precedence_sections)


@pytest.mark.unit
class TestMalformedInput:
    """Test malformed manifests surface as manifest errors."""

    @pytest.mark.parametrize("name", ["fel4.toml", "fel4.yaml"])
    def test_invalid_utf8(self, tmp_path, name):
        # Arrange
        manifest_file = tmp_path / name
        manifest_file.write_bytes(b"[global]\nartifact-path = '\xff'\n")

        # Act / Assert
        with pytest.raises(ManifestError):
            load_manifest(manifest_file)

    def test_invalid_utf8_toml_reason(self, tmp_path):
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_bytes(b"\xff")

        with pytest.raises(ManifestError, match="not valid UTF-8"):
            load_manifest(manifest_file)

    def test_selection_array_rejected(self, tmp_path):
        """Test an array in place of the [fel4] table is rejected."""
        manifest_file = tmp_path / "fel4.toml"
        manifest_file.write_text("fel4 = [1, 2]\n")

        with pytest.raises(ManifestError, match=r"\[fel4\] must be a table"):
            load_manifest(manifest_file)

    def test_selection_string_list_rejected(self):
        """Test two-character strings are not read as key/value pairs."""
        with pytest.raises(ManifestError, match=r"\[fel4\] must be a table"):
            parse_manifest([("fel4", ["ab"])])

    def test_empty_yaml_selection(self, tmp_path):
        manifest_file = tmp_path / "fel4.yaml"
        manifest_file.write_text("fel4:\n")

        manifest = load_manifest(manifest_file)

        assert manifest.default_target is None


@pytest.mark.unit
class TestExplicitSelection:
    """Test explicit selections are never replaced by defaults."""

    @pytest.mark.parametrize(
        "selection, kind",
        [
            ({"target": ""}, "target"),
            ({"platform": ""}, "platform"),
            ({"profile": ""}, "build profile"),
        ],
    )
    def test_empty_string_rejected(self, sample_manifest_toml, selection, kind):
        # Arrange
        manifest = load_manifest(sample_manifest_toml)

        # Act
        with pytest.raises(UnknownIdentifierError) as exc_info:
            manifest.resolve(**selection)

        # Assert
        assert exc_info.value.kind == kind
        assert exc_info.value.value == ""

    def test_none_uses_default(self, sample_manifest_toml):
        manifest = load_manifest(sample_manifest_toml)

        assert manifest.select(target=None)[0] is SupportedTarget.ARMV7_SEL4_FEL4
