"""
Pytest configuration and shared fixtures for fel4kit tests.
"""

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.manifests import (
    precedence_sections,
    sample_manifest_toml,
    sample_manifest_yaml,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as fast unit tests")
