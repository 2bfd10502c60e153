"""storyprep — prepare UI component stories for rendering and testing.

Merges global, component and story annotations into render-ready
PreparedStory records: parameters, args and arg types resolved, decorators
composed, loaders and play functions wrapped behind async contracts.
"""
from storyprep.compiler import normalize_component_annotations, normalize_story
from storyprep.engine import (
    DeprecationNotices,
    combine_parameters,
    default_decorate_story,
    load_csf_file,
    load_preview,
    prepare_csf_file,
    prepare_story,
    story,
)
from storyprep.errors import (
    ArgTypeDefaultValueDeprecation,
    CSFLoadError,
    DeprecatedAnnotationError,
    InvalidIdentifierError,
    MissingRenderFunctionError,
    MissingTitleError,
    StoryPrepError,
)
from storyprep.types import (
    ComponentAnnotations,
    CSFFile,
    GlobalAnnotations,
    PreparedStory,
    StoryAnnotations,
)

__version__ = "0.1.0"

__all__ = [
    "ArgTypeDefaultValueDeprecation",
    "CSFFile",
    "CSFLoadError",
    "ComponentAnnotations",
    "DeprecatedAnnotationError",
    "DeprecationNotices",
    "GlobalAnnotations",
    "InvalidIdentifierError",
    "MissingRenderFunctionError",
    "MissingTitleError",
    "PreparedStory",
    "StoryAnnotations",
    "StoryPrepError",
    "combine_parameters",
    "default_decorate_story",
    "load_csf_file",
    "load_preview",
    "normalize_component_annotations",
    "normalize_story",
    "prepare_csf_file",
    "prepare_story",
    "story",
]
