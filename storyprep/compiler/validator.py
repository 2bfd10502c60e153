"""Static analysis for CSF files — catch issues before any render attempt."""
from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING

from storyprep.engine.parameters import combine_parameters

if TYPE_CHECKING:
    from storyprep.types import CSFFile, GlobalAnnotations, StoryAnnotations


class ValidationError:
    def __init__(self, level: str, message: str, story: str | None = None):
        self.level = level  # "error" | "warning"
        self.message = message
        self.story = story

    def __str__(self):
        prefix = f"[{self.story}] " if self.story else ""
        return f"{self.level.upper()}: {prefix}{self.message}"


def validate_csf_file(
    csf: CSFFile,
    global_annotations: GlobalAnnotations | None = None,
) -> list[ValidationError]:
    """Run all static checks on a loaded CSF file."""
    errors: list[ValidationError] = []

    if not csf.stories:
        errors.append(ValidationError("error", f'Component "{csf.meta.title}" exports no stories'))
        return errors

    errors.extend(_check_id_collisions(csf))
    if global_annotations is not None:
        errors.extend(_check_render(csf, global_annotations))
    for key, story in csf.stories.items():
        errors.extend(_check_arg_types(csf, key, story, global_annotations))

    return errors


def format_errors(errors: list[ValidationError]) -> str:
    if not errors:
        return ""
    lines = []
    errs = [e for e in errors if e.level == "error"]
    warns = [e for e in errors if e.level == "warning"]
    if errs:
        lines.append(f"  {len(errs)} error(s):")
        for e in errs:
            lines.append(f"    ✗ {e}")
    if warns:
        lines.append(f"  {len(warns)} warning(s):")
        for e in warns:
            lines.append(f"    ⚠ {e}")
    return "\n".join(lines)


# ─── Checks ───

def _check_id_collisions(csf: CSFFile) -> list[ValidationError]:
    """Distinct export keys must not sanitize to the same story id."""
    errors: list[ValidationError] = []
    seen: dict[str, str] = {}
    for key, story in csf.stories.items():
        if story.id in seen:
            errors.append(ValidationError(
                "error", f'Story id "{story.id}" collides with export "{seen[story.id]}"', key
            ))
        else:
            seen[story.id] = key
    return errors


def _check_render(csf: CSFFile, global_annotations: GlobalAnnotations) -> list[ValidationError]:
    errors: list[ValidationError] = []
    if csf.meta.render or global_annotations.render:
        return errors
    for key, story in csf.stories.items():
        if not story.render:
            errors.append(ValidationError("error", "No render function in any scope", key))
    return errors


def _check_arg_types(
    csf: CSFFile,
    key: str,
    story: StoryAnnotations,
    global_annotations: GlobalAnnotations | None,
) -> list[ValidationError]:
    """Deprecated default values, and arg values a mapping cannot translate."""
    errors: list[ValidationError] = []
    global_arg_types = global_annotations.arg_types if global_annotations else None
    global_args = global_annotations.args if global_annotations else None
    arg_types = combine_parameters(global_arg_types, csf.meta.arg_types, story.arg_types)
    args = combine_parameters(global_args, csf.meta.args, story.args)

    for name, desc in arg_types.items():
        if not isinstance(desc, dict):
            continue
        if desc.get("default_value") is not None:
            errors.append(ValidationError(
                "warning", f'arg type "{name}" uses deprecated default_value; set it in args', key
            ))
        mapping = desc.get("mapping")
        if mapping and name in args:
            value = args[name]
            if not isinstance(value, Hashable) or value not in mapping:
                errors.append(ValidationError(
                    "warning", f'arg "{name}" value {value!r} is not a key of its mapping', key
                ))
    return errors
