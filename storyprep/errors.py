"""Errors raised while normalizing and preparing stories."""
from __future__ import annotations

DEPRECATED_STORY_ANNOTATION = """\
CSF .story annotations are deprecated; annotate story functions directly:
- StoryFn.story.name => StoryFn.story_name
- StoryFn.story.(parameters|decorators) => StoryFn.(parameters|decorators)
Move every field of the nested "story" record onto the export itself.\
"""

ARG_TYPE_DEFAULT_VALUE_DEPRECATION = """\
`arg_type.default_value` is deprecated and will be removed in a future release.
Set the value through `args` on the story, component or global scope instead.\
"""


class StoryPrepError(ValueError):
    """Base class for configuration errors caught at preparation time."""


class DeprecatedAnnotationError(StoryPrepError):
    def __init__(self, key: str):
        super().__init__(f'Story "{key}": {DEPRECATED_STORY_ANNOTATION}')
        self.key = key


class MissingRenderFunctionError(StoryPrepError):
    def __init__(self, story_id: str):
        super().__init__(
            f'No render function available for story "{story_id}". '
            "Set `render` on the story, its component meta, or the global preview."
        )
        self.story_id = story_id


class MissingTitleError(StoryPrepError):
    pass


class InvalidIdentifierError(StoryPrepError):
    pass


class CSFLoadError(StoryPrepError):
    pass


class ArgTypeDefaultValueDeprecation(DeprecationWarning):
    """Emitted once per process when an arg type declares ``default_value``."""
