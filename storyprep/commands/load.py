"""storyprep load <file> — load a story file, validate it, list its stories."""
from __future__ import annotations

import sys

from storyprep.compiler import format_errors, validate_csf_file
from storyprep.engine import load_csf_file, load_preview
from storyprep.errors import StoryPrepError


def cmd_load(file_path: str, preview_dir: str):
    try:
        global_annotations = load_preview(preview_dir)
        csf = load_csf_file(file_path)
    except (StoryPrepError, ValueError) as e:
        print(f"✗ Load error: {e}", file=sys.stderr)
        sys.exit(1)

    # Static analysis
    errors = validate_csf_file(csf, global_annotations)
    has_errors = any(e.level == "error" for e in errors)

    if has_errors:
        print(f'✗ "{csf.meta.title}" failed validation:')
        print(format_errors(errors))
        sys.exit(1)

    print(f'✓ "{csf.meta.title}" loaded ({len(csf.stories)} stories)')
    if errors:
        print(format_errors(errors))
    print()

    for key, story in csf.stories.items():
        print(f"  {story.id}  {story.name}  ({key})")
