"""Canonicalize raw story exports and component meta into annotation records."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from storyprep.compiler.config import normalize_keys
from storyprep.compiler.naming import sanitize_safe, story_name_from_export, to_id
from storyprep.errors import DeprecatedAnnotationError, MissingTitleError
from storyprep.types import ANNOTATION_FIELDS, ComponentAnnotations, StoryAnnotations

_COMPONENT_FIELDS = frozenset({
    "component", "subcomponents", "include_stories", "exclude_stories", *ANNOTATION_FIELDS,
})


def _as_record(story_export: Any) -> dict[str, Any]:
    """Resolve the callable-or-mapping export into one mapping shape."""
    if isinstance(story_export, Mapping):
        return normalize_keys(dict(story_export))
    if callable(story_export):
        # Annotations set as attributes on the function (Primary.args = {...})
        attrs = {
            k: v for k, v in getattr(story_export, "__dict__", {}).items()
            if not k.startswith("_")
        }
        record = normalize_keys(attrs)
        record["render"] = story_export
        return record
    raise TypeError(
        f"Story export must be a render function or a mapping, got {type(story_export).__name__}"
    )


def normalize_story(
    key: str,
    story_export: Any,
    meta: ComponentAnnotations,
) -> StoryAnnotations:
    story_object = _as_record(story_export)

    if story_object.get("story"):
        raise DeprecatedAnnotationError(key)

    export_name = story_name_from_export(key)
    story_id = to_id(meta.id or meta.title, export_name)

    present = {k: story_object[k] for k in ANNOTATION_FIELDS if story_object.get(k) is not None}
    return StoryAnnotations(
        id=story_id,
        name=story_object.get("name") or story_object.get("story_name") or export_name,
        **present,
    )


def normalize_component_annotations(
    meta: Mapping[str, Any] | ComponentAnnotations,
    default_title: str | None = None,
) -> ComponentAnnotations:
    if isinstance(meta, ComponentAnnotations):
        return meta

    record = normalize_keys(dict(meta))
    title = record.get("title") or default_title
    if not title:
        raise MissingTitleError("Component meta has no title and none could be derived")

    component_id = sanitize_safe(record.get("id") or title, "component id")
    fields = {k: v for k, v in record.items() if k in _COMPONENT_FIELDS and v is not None}
    return ComponentAnnotations(title=title, id=component_id, **fields)
