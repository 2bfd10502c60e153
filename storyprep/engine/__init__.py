from storyprep.engine.args import PROCESS_NOTICES, DeprecationNotices
from storyprep.engine.decorators import default_decorate_story
from storyprep.engine.parameters import combine_parameters
from storyprep.engine.preparer import prepare_csf_file, prepare_story
from storyprep.engine.story_loader import load_csf_file, load_preview, story

__all__ = [
    "PROCESS_NOTICES",
    "DeprecationNotices",
    "combine_parameters",
    "default_decorate_story",
    "load_csf_file",
    "load_preview",
    "prepare_csf_file",
    "prepare_story",
    "story",
]
