"""Tests for the project metadata."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


class TestProjectMetadata:
    def test_design_notes_not_published_as_readme(self):
        project = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]
        assert project.get("readme") != "DESIGN.md"

    def test_runtime_minifiers_declared(self):
        project = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]
        names = {dep.split(">")[0].split("=")[0].strip() for dep in project["dependencies"]}
        assert {"rjsmin", "rcssmin"} <= names
