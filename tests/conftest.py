"""Test setup for bookprep."""

import os
import sys

import pytest

SCRIPTS = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts")
if SCRIPTS not in sys.path:
    sys.path.insert(0, SCRIPTS)


@pytest.fixture
def lesson_dir(tmp_path):
    """Two lesson files, the second linking back to the first."""
    directory = tmp_path / "epub"
    directory.mkdir()
    (directory / "section-1-lesson-01-intro.md").write_text(
        "# Lesson 1: Intro\n\nWelcome.\n", encoding="utf-8"
    )
    (directory / "section-1-lesson-02-next.md").write_text(
        "# Lesson 2: Next\n\nSee [x](/section-1/lesson-1-intro#anchor).\n"
        "![fig](/section-1/lesson-1-intro/figures/cat.png)\n",
        encoding="utf-8",
    )
    return directory


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test from an empty directory so no stray bookprep.yaml is picked up."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir
