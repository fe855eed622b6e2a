"""Packaging correctness verification for flatpath.

Tests validate that:
- The installed package imports and works with only its base dependencies
- py.typed marker is present in the wheel
- Pytest plugin entry point is registered
- Package metadata is correct

These tests inspect the built wheel and current installation rather than
creating temporary virtualenvs (faster, more reliable in CI).
"""

from __future__ import annotations

import subprocess
import sys
import zipfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestBaseInstall:
    """Verify the base install exposes a working codec."""

    def test_import_flatpath(self):  # type: ignore[no-untyped-def]
        """Top-level import succeeds."""
        import flatpath

        assert hasattr(flatpath, "flatten")
        assert hasattr(flatpath, "unflatten")
        assert hasattr(flatpath, "dumps")
        assert hasattr(flatpath, "loads")

    def test_dumps_loads_basic(self):  # type: ignore[no-untyped-def]
        """dumps()/loads() work with the default config."""
        from flatpath import Node, dumps, loads

        root = Node("Root", {"id": "9"}, children=(Node("Leaf", text="x"),))
        assert loads(dumps(root)) == root

    def test_xml_adapter_import(self):  # type: ignore[no-untyped-def]
        """The XML adapter needs nothing beyond the standard library."""
        from flatpath.tree import parse_xml

        assert parse_xml("<R><A>1</A></R>").children[0].text == "1"


class TestWheelContents:
    """Verify the built wheel contains required files."""

    @pytest.fixture(scope="class")
    def wheel_path(self) -> Path:
        """Build a fresh wheel and return its path."""
        dist_dir = PROJECT_ROOT / "dist"
        # Use poetry build since that's the project's build system
        try:
            result = subprocess.run(
                ["poetry", "build", "-f", "wheel"],
                cwd=str(PROJECT_ROOT),
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            pytest.skip("poetry is not installed")
        if result.returncode != 0:
            pytest.skip(f"poetry build failed: {result.stderr}")

        wheels = sorted(dist_dir.glob("flatpath-*.whl"), key=lambda p: p.stat().st_mtime)
        if not wheels:
            pytest.skip("No wheel found in dist/")
        return wheels[-1]

    def test_py_typed_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """py.typed marker must be included in the wheel."""
        with zipfile.ZipFile(wheel_path) as zf:
            names = zf.namelist()
            assert "flatpath/py.typed" in names, f"py.typed not found in wheel. Contents: {names}"

    def test_no_pycache_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """__pycache__ directories must not be in the wheel."""
        with zipfile.ZipFile(wheel_path) as zf:
            pycache_files = [n for n in zf.namelist() if "__pycache__" in n]
            assert not pycache_files, f"__pycache__ found in wheel: {pycache_files}"

    def test_all_source_modules_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """All source modules must be present in the wheel."""
        expected_modules = [
            "flatpath/__init__.py",
            "flatpath/api.py",
            "flatpath/cache.py",
            "flatpath/errors.py",
            "flatpath/result.py",
            "flatpath/codec/__init__.py",
            "flatpath/codec/builder.py",
            "flatpath/codec/config.py",
            "flatpath/codec/encoder.py",
            "flatpath/codec/entries.py",
            "flatpath/codec/paths.py",
            "flatpath/tree/__init__.py",
            "flatpath/tree/nodes.py",
            "flatpath/tree/xml.py",
            "flatpath/integrations/__init__.py",
            "flatpath/integrations/_pytest_plugin.py",
        ]
        with zipfile.ZipFile(wheel_path) as zf:
            names = zf.namelist()
            for module in expected_modules:
                assert module in names, f"Module {module} not found in wheel"

    def test_metadata_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """Wheel metadata must include correct package info."""
        with zipfile.ZipFile(wheel_path) as zf:
            metadata_files = [n for n in zf.namelist() if n.endswith("METADATA")]
            assert metadata_files, "No METADATA found in wheel"
            metadata = zf.read(metadata_files[0]).decode()
            assert "Name: flatpath" in metadata
            assert "0.1.0" in metadata
            assert "cachetools" in metadata


class TestPytestPluginDiscovery:
    """Verify the pytest plugin is discoverable."""

    def test_entry_point_registered(self):  # type: ignore[no-untyped-def]
        """pytest11 entry point must be registered for flatpath."""
        from importlib.metadata import entry_points

        pytest11_eps = entry_points(group="pytest11")

        fp_eps = [ep for ep in pytest11_eps if ep.value.startswith("flatpath.")]
        assert fp_eps, (
            f"No pytest11 entry point found for flatpath. "
            f"Available: {[ep.name for ep in pytest11_eps]}"
        )

    def test_fixture_available(self):  # type: ignore[no-untyped-def]
        """assert_flat_roundtrip fixture must be importable from plugin."""
        import importlib

        mod = importlib.import_module("flatpath.integrations._pytest_plugin")
        assert hasattr(mod, "assert_flat_roundtrip")
        assert callable(mod.assert_flat_roundtrip)

    def test_plugin_discovery_via_pytest(self):  # type: ignore[no-untyped-def]
        """pytest --fixtures should list assert_flat_roundtrip."""
        result = subprocess.run(
            [sys.executable, "-m", "pytest", "--fixtures", "-q"],
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
        )
        assert "assert_flat_roundtrip" in result.stdout, (
            f"Fixture not found in pytest fixtures list. stdout: {result.stdout[:500]}"
        )


class TestPackageMetadata:
    """Verify package metadata completeness."""

    def test_version(self):  # type: ignore[no-untyped-def]
        """Package version must be 0.1.0."""
        import flatpath

        assert flatpath.__version__ == "0.1.0"

    def test_all_exports(self):  # type: ignore[no-untyped-def]
        """__all__ must include the documented public API."""
        import flatpath

        expected = {
            "CodecConfig",
            "ConflictError",
            "DepthLimitError",
            "EmptyInputError",
            "ErrorMode",
            "FlatEntry",
            "FlatPathError",
            "FormatError",
            "Node",
            "PathEncoder",
            "ReconstructionError",
            "StructureError",
            "TreeBuilder",
            "ValidationReport",
            "dumps",
            "flatten",
            "loads",
            "roundtrip",
            "structurally_equal",
            "unflatten",
            "validate",
        }
        actual = set(flatpath.__all__)
        assert expected == actual, f"Missing: {expected - actual}, Extra: {actual - expected}"
