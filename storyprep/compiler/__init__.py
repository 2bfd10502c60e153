from storyprep.compiler.config import parse_preview_yaml
from storyprep.compiler.naming import is_export_story, sanitize, story_name_from_export, to_id
from storyprep.compiler.normalizer import normalize_component_annotations, normalize_story
from storyprep.compiler.validator import format_errors, validate_csf_file

__all__ = [
    "format_errors",
    "is_export_story",
    "normalize_component_annotations",
    "normalize_story",
    "parse_preview_yaml",
    "sanitize",
    "story_name_from_export",
    "to_id",
    "validate_csf_file",
]
