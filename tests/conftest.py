"""Shared fixtures for storyprep tests."""
from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from storyprep.engine.args import DeprecationNotices
from storyprep.engine.preparer import prepare_story
from storyprep.engine.story_loader import load_csf_file, load_preview

if TYPE_CHECKING:
    from storyprep.types import CSFFile, GlobalAnnotations, PreparedStory

FIXTURES_DIR = Path(__file__).parent
PREVIEW_DIR = FIXTURES_DIR / ".storyprep"
STORIES_DIR = FIXTURES_DIR / "stories"


class StoryHarness:
    """Test harness for loading and preparing story files.

    Provides a clean temp project per test (a .storyprep/ preview directory
    plus story files), with convenience methods that delegate to the public
    loader and preparer API.
    """

    def __init__(self, *, with_preview: bool = True):
        self.tmp = Path(tempfile.mkdtemp())
        self.preview_dir = self.tmp / ".storyprep"
        if with_preview:
            shutil.copytree(PREVIEW_DIR, self.preview_dir)
        else:
            self.preview_dir.mkdir()
        self.notices = DeprecationNotices()

    def copy_stories(self, filename: str) -> Path:
        """Copy a fixture story file from tests/stories/ into the project."""
        dst = self.tmp / filename
        shutil.copy2(STORIES_DIR / filename, dst)
        return dst

    def install_stories(self, filename: str, code: str) -> Path:
        """Write a story file into the project."""
        dst = self.tmp / filename
        dst.write_text(code, encoding="utf-8")
        return dst

    def install_preview(self, filename: str, content: str) -> None:
        (self.preview_dir / filename).write_text(content, encoding="utf-8")

    @property
    def global_annotations(self) -> GlobalAnnotations:
        return load_preview(self.preview_dir)

    def load(self, filename: str) -> CSFFile:
        return load_csf_file(self.tmp / filename)

    def prepare(self, filename: str, key: str) -> PreparedStory:
        csf = self.load(filename)
        return prepare_story(csf.stories[key], csf.meta, self.global_annotations, self.notices)

    def close(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


@pytest.fixture
def harness_factory():
    """Factory fixture that creates StoryHarness instances and cleans up after test."""
    created: list[StoryHarness] = []

    def _make(**kwargs) -> StoryHarness:
        h = StoryHarness(**kwargs)
        created.append(h)
        return h

    yield _make

    for h in created:
        h.close()


@pytest.fixture
def notices() -> DeprecationNotices:
    """Fresh once-only flags, so deprecation tests do not depend on test order."""
    return DeprecationNotices()

