#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for package layering and version management contracts.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from pathlib import Path

import pytest

from actionforge import __version__ as public_version
from actionforge._version import __version__ as internal_version


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PYPROJECT_PATH = PROJECT_ROOT / "pyproject.toml"


def _load_pyproject() -> dict:
    try:
        import tomllib  # Python 3.11+
    except ModuleNotFoundError:  # pragma: no cover
        tomllib = pytest.importorskip("tomli")

    return tomllib.loads(PYPROJECT_PATH.read_text(encoding="utf-8"))


def test_version_is_single_sourced_via_version_module():
    pyproject = _load_pyproject()
    project = pyproject["project"]

    assert project.get("dynamic") == ["version"]
    assert (
        pyproject["tool"]["setuptools"]["dynamic"]["version"]["attr"]
        == "actionforge._version.__version__"
    )
    assert public_version == internal_version


def test_runtime_dependencies_exclude_test_tooling():
    deps = "\n".join(_load_pyproject()["project"]["dependencies"]).lower()

    assert "rich" in deps
    assert "pytest" not in deps


def test_uv_default_groups_cover_dev_and_test():
    pyproject = _load_pyproject()
    groups = pyproject["dependency-groups"]
    default_groups = pyproject["tool"]["uv"]["default-groups"]

    assert "dev" in groups
    assert "test" in groups
    assert "dev" in default_groups
    assert "test" in default_groups


def test_lazy_public_exports_resolve():
    import actionforge

    for name in actionforge.__all__:
        assert getattr(actionforge, name) is not None

    with pytest.raises(AttributeError):
        getattr(actionforge, "not_exported")
