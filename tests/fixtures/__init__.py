"""Test fixtures for fel4kit tests.

- manifests: Layered section data and fel4 manifest files (TOML and YAML)

Import fixtures in your tests using:
    from tests.fixtures.manifests import sample_manifest_toml
"""

__all__ = [
    "manifests",
]
