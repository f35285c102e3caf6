"""Packaging regression tests.

Tests that verify the source layout and the installed package structure.
"""

from pathlib import Path

import pytest


def test_source_layout():
    """Package lives under src/ with the kernel as a subpackage."""
    here = Path(__file__).resolve().parent
    repo_root = here.parent
    src_pkg = repo_root / "src" / "entigraph"

    assert src_pkg.exists(), "entigraph package should exist in src/"
    assert (src_pkg / "kernel" / "__init__.py").exists()
    assert (src_pkg / "config" / "__init__.py").exists()
    assert (repo_root / "pyproject.toml").exists()


def test_import_boundary():
    """Installed package imports its kernel and config subpackages."""
    import entigraph
    import entigraph.kernel  # noqa: F401
    import entigraph.config  # noqa: F401

    assert entigraph.__version__ in ("0.1.0", "dev")


def test_kernel_does_not_import_config():
    """The kernel stays settings-free; configuration is applied in entigraph.api."""
    kernel_dir = Path(__file__).resolve().parents[1] / "src" / "entigraph" / "kernel"
    for path in kernel_dir.glob("*.py"):
        contents = path.read_text(encoding="utf-8")
        if "entigraph.config" in contents or "..config" in contents:
            pytest.fail(f"{path.name} imports configuration")
