"""Tests for package discovery from pyproject.toml."""

import tomllib
from pathlib import Path

from setuptools import find_namespace_packages

ROOT = Path(__file__).resolve().parents[2]


class TestPackageDiscovery:
    """Directories without __init__.py still ship in the wheel."""

    def test_namespace_discovery_enabled(self) -> None:
        config = tomllib.loads((ROOT / "pyproject.toml").read_text())
        find = config["tool"]["setuptools"]["packages"]["find"]

        assert find["namespaces"] is True
        assert find["include"] == ["gitops_providers*"]

    def test_every_source_directory_is_found(self) -> None:
        """Each directory holding modules maps to a discovered package."""
        found = set(find_namespace_packages(where=str(ROOT), include=["gitops_providers*"]))
        source_dirs = {
            ".".join(path.parent.relative_to(ROOT).parts)
            for path in (ROOT / "gitops_providers").rglob("*.py")
            if "__pycache__" not in path.parts
        }

        assert {"gitops_providers", "gitops_providers.utils"} <= source_dirs
        assert source_dirs <= found
