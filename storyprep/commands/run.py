"""storyprep run <file> <story> — prepare one story and drive it like a test runner."""
from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Any

from storyprep.engine import load_csf_file, load_preview, prepare_story
from storyprep.errors import StoryPrepError

if TYPE_CHECKING:
    from storyprep.types import CSFFile, GlobalAnnotations, PreparedStory


def _find_story(csf: CSFFile, name: str):
    if name in csf.stories:
        return csf.stories[name]
    for story in csf.stories.values():
        if name in (story.id, story.name):
            return story
    return None


async def run_story(prepared: PreparedStory, global_annotations: GlobalAnnotations) -> tuple[Any, Any]:
    """Loaders, then render, then play; returns (rendered, play outcome)."""
    context = prepared.build_context(globals=global_annotations.globals)
    context = await prepared.apply_loaders(context)
    rendered = prepared.unbound_story_fn(context)
    outcome = await prepared.run_play_function(context)
    return rendered, outcome


def cmd_run(file_path: str, story_name: str, preview_dir: str):
    try:
        global_annotations = load_preview(preview_dir)
        csf = load_csf_file(file_path)
        story = _find_story(csf, story_name)
        if story is None:
            available = ", ".join(csf.stories)
            print(f'Story "{story_name}" not found. Available: {available}', file=sys.stderr)
            sys.exit(1)
        prepared = prepare_story(story, csf.meta, global_annotations)
    except (StoryPrepError, ValueError) as e:
        print(f"✗ Prepare error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        rendered, outcome = asyncio.run(run_story(prepared, global_annotations))
    except Exception as e:
        print(f'✗ Story "{prepared.id}" failed: {e}', file=sys.stderr)
        sys.exit(1)

    print(f"✓ {prepared.id}")
    print(f"  rendered: {rendered!r}")
    if prepared.play is not None:
        print(f"  play: {outcome!r}")
