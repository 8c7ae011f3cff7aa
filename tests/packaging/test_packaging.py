"""Packaging correctness verification for shape-examples.

Tests validate that:
- Base install has no ImportError from the optional hypothesis extra
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


class TestBaseInstallNoImportError:
    """Verify base install does not raise ImportError from optional samplers."""

    def test_import_shape_examples(self):  # type: ignore[no-untyped-def]
        """Top-level import succeeds."""
        import shape_examples

        assert hasattr(shape_examples, "build_shape")
        assert hasattr(shape_examples, "generate_examples")
        assert hasattr(shape_examples, "ExampleEngine")

    def test_generate_basic(self):  # type: ignore[no-untyped-def]
        """generate_examples() works with default StaticSampler."""
        from shape_examples import generate_examples

        examples = generate_examples({"type": "integer"})
        assert examples is not None
        assert examples["default"].value == 0

    def test_samplers_import(self):  # type: ignore[no-untyped-def]
        """samplers package imports without hypothesis installed."""
        from shape_examples.samplers import HypothesisSampler, StaticSampler

        assert StaticSampler() is not None
        assert HypothesisSampler.__name__ == "HypothesisSampler"


class TestWheelContents:
    """Verify the built wheel contains required files."""

    @pytest.fixture(scope="class")
    def wheel_path(self) -> Path:
        """Build a fresh wheel and return its path."""
        dist_dir = PROJECT_ROOT / "dist"
        # Use poetry build since that's the project's build system
        result = subprocess.run(
            ["poetry", "build", "-f", "wheel"],
            cwd=str(PROJECT_ROOT),
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            pytest.skip(f"poetry build failed: {result.stderr}")

        wheels = sorted(dist_dir.glob("*.whl"), key=lambda p: p.stat().st_mtime)
        if not wheels:
            pytest.skip("No wheel found in dist/")
        return wheels[-1]

    def test_py_typed_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """py.typed marker must be included in the wheel."""
        with zipfile.ZipFile(wheel_path) as zf:
            names = zf.namelist()
            py_typed_files = [n for n in names if n.endswith("py.typed")]
            assert py_typed_files, f"py.typed not found in wheel. Contents: {names}"

    def test_no_pycache_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """__pycache__ directories must not be in the wheel."""
        with zipfile.ZipFile(wheel_path) as zf:
            pycache_files = [n for n in zf.namelist() if "__pycache__" in n]
            assert not pycache_files, f"__pycache__ found in wheel: {pycache_files}"

    def test_all_source_modules_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """All source modules must be present in the wheel."""
        expected_modules = [
            "shape_examples/__init__.py",
            "shape_examples/api.py",
            "shape_examples/config.py",
            "shape_examples/engine.py",
            "shape_examples/errors.py",
            "shape_examples/example.py",
            "shape_examples/protocols.py",
            "shape_examples/reactive.py",
            "shape_examples/shape/__init__.py",
            "shape_examples/shape/builder.py",
            "shape_examples/shape/nodes.py",
            "shape_examples/synthesis/__init__.py",
            "shape_examples/synthesis/collector.py",
            "shape_examples/synthesis/options.py",
            "shape_examples/synthesis/patcher.py",
            "shape_examples/synthesis/resolver.py",
            "shape_examples/samplers/__init__.py",
            "shape_examples/samplers/static.py",
            "shape_examples/samplers/hypothesis.py",
            "shape_examples/integrations/__init__.py",
            "shape_examples/integrations/_pytest_plugin.py",
        ]
        with zipfile.ZipFile(wheel_path) as zf:
            names = zf.namelist()
            for module in expected_modules:
                assert any(module in n for n in names), (
                    f"Module {module} not found in wheel"
                )

    def test_metadata_in_wheel(self, wheel_path: Path):  # type: ignore[no-untyped-def]
        """Wheel metadata must include correct package info."""
        with zipfile.ZipFile(wheel_path) as zf:
            metadata_files = [n for n in zf.namelist() if "METADATA" in n]
            assert metadata_files, "No METADATA found in wheel"
            metadata = zf.read(metadata_files[0]).decode()
            assert (
                "shape-examples" in metadata.lower()
                or "shape_examples" in metadata.lower()
            )
            assert "0.1.0" in metadata


class TestPytestPluginDiscovery:
    """Verify the pytest plugin is discoverable."""

    def test_entry_point_registered(self):  # type: ignore[no-untyped-def]
        """pytest11 entry point must be registered for shape-examples."""
        from importlib.metadata import entry_points

        pytest11_eps = entry_points(group="pytest11")

        se_eps = [ep for ep in pytest11_eps if "shape_examples" in str(ep.value)]
        assert se_eps, (
            f"No pytest11 entry point found for shape-examples. "
            f"Available: {[ep.name for ep in pytest11_eps]}"
        )

    def test_fixture_available(self):  # type: ignore[no-untyped-def]
        """assert_discriminators_consistent fixture must be importable from plugin."""
        import importlib

        mod = importlib.import_module("shape_examples.integrations._pytest_plugin")
        assert hasattr(mod, "assert_discriminators_consistent")
        assert callable(mod.assert_discriminators_consistent)

    def test_plugin_discovery_via_pytest(self):  # type: ignore[no-untyped-def]
        """pytest --fixtures should list assert_discriminators_consistent."""
        result = subprocess.run(
            [sys.executable, "-m", "pytest", "--fixtures", "-q"],
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
        )
        assert "assert_discriminators_consistent" in result.stdout, (
            f"Fixture not found in pytest fixtures list. stdout: {result.stdout[:500]}"
        )


class TestPackageMetadata:
    """Verify package version and exports."""

    def test_version(self):  # type: ignore[no-untyped-def]
        """Package version must be 0.1.0."""
        import shape_examples

        assert shape_examples.__version__ == "0.1.0"

    def test_all_exports(self):  # type: ignore[no-untyped-def]
        """__all__ must include the documented public API."""
        import shape_examples

        expected = {
            "EngineOptions",
            "EngineState",
            "ExampleArtifact",
            "ExampleEngine",
            "GenerationError",
            "GenerationOptions",
            "ShapeBuildError",
            "ShapeBuilder",
            "ShapeGraph",
            "ShapeKind",
            "ShapeNode",
            "Variant",
            "build_shape",
            "generate_examples",
        }
        actual = set(shape_examples.__all__)
        assert expected == actual, (
            f"Missing: {expected - actual}, Extra: {actual - expected}"
        )
