"""Load CSF story modules and the global preview from disk."""
from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from storyprep.compiler.config import normalize_keys, parse_preview_yaml
from storyprep.compiler.naming import is_export_story, story_name_from_export
from storyprep.compiler.normalizer import normalize_component_annotations, normalize_story
from storyprep.engine.parameters import combine_parameters
from storyprep.errors import CSFLoadError
from storyprep.types import ANNOTATION_FIELDS, CSFFile, GlobalAnnotations

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import ModuleType

logger = logging.getLogger(__name__)

_STORY_KEYWORDS = frozenset(ANNOTATION_FIELDS) - {"render"}
_GLOBAL_FIELDS = frozenset(f.name for f in fields(GlobalAnnotations))
_PREVIEW_DATA_FIELDS = ("parameters", "args", "arg_types", "globals")
_STORY_SUFFIXES = ("_stories", ".stories")


def story(name: str | None = None, **annotations: Any):
    """Factory for annotating story render functions.

    Usage in button_stories.py::

        from storyprep import story

        meta = {"title": "Atoms/Button", "component": Button}

        @story(args={"label": "Save"}, parameters={"layout": "centered"})
        def Primary(args):
            return Button(**args)
    """
    normalized = normalize_keys(annotations)
    unknown = sorted(set(normalized) - _STORY_KEYWORDS)
    if unknown:
        raise TypeError(f"Unknown story annotation(s): {', '.join(unknown)}")

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        for key, value in normalized.items():
            setattr(fn, key, value)
        if name:
            fn.story_name = name
        return fn
    return decorator


def _load_module(path: Path) -> ModuleType:
    module_name = f"storyprep_csf_{path.stem.replace('.', '_')}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if not spec or not spec.loader:
        raise CSFLoadError(f"Cannot import {path}")
    mod = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = mod
    try:
        spec.loader.exec_module(mod)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise CSFLoadError(f"Failed to import {path}: {e}") from e
    return mod


def default_title(path: str | Path) -> str:
    """``button_stories.py`` -> ``Button``."""
    stem = Path(path).name.removesuffix(".py")
    for suffix in _STORY_SUFFIXES:
        stem = stem.removesuffix(suffix)
    return story_name_from_export(stem)


def _export_keys(mod: ModuleType) -> list[str]:
    declared = getattr(mod, "__all__", None)
    if declared is not None:
        return [k for k in declared if k != "meta"]

    keys: list[str] = []
    for attr_name, obj in vars(mod).items():
        if attr_name.startswith("_") or attr_name == "meta":
            continue
        if inspect.isfunction(obj) and obj.__module__ == mod.__name__:
            keys.append(attr_name)
        elif isinstance(obj, dict):
            keys.append(attr_name)
    return keys


def load_csf_file(path: str | Path) -> CSFFile:
    csf_path = Path(path)
    if not csf_path.is_file():
        raise CSFLoadError(f"Story file not found: {csf_path}")

    mod = _load_module(csf_path)
    raw_meta = getattr(mod, "meta", None)
    if raw_meta is None:
        raise CSFLoadError(f'{csf_path} has no module-level "meta"')

    meta = normalize_component_annotations(raw_meta, default_title=default_title(csf_path))
    stories = {
        key: normalize_story(key, getattr(mod, key), meta)
        for key in _export_keys(mod)
        if is_export_story(key, meta.include_stories, meta.exclude_stories)
    }
    logger.debug("Loaded %d story export(s) from %s", len(stories), csf_path)
    return CSFFile(meta=meta, stories=stories, path=str(csf_path))


def load_preview(preview_dir: str | Path) -> GlobalAnnotations:
    """Build global annotations from preview.yaml (data) and preview.py (callables)."""
    preview_path = Path(preview_dir)
    if not preview_path.is_dir():
        return GlobalAnnotations()

    yaml_data: dict[str, Any] = {}
    yaml_file = preview_path / "preview.yaml"
    if yaml_file.exists():
        yaml_data = parse_preview_yaml(yaml_file.read_text(encoding="utf-8"))

    module_data: dict[str, Any] = {}
    py_file = preview_path / "preview.py"
    if py_file.exists():
        mod = _load_module(py_file)
        public = {k: v for k, v in vars(mod).items() if not k.startswith("_")}
        module_data = {k: v for k, v in normalize_keys(public).items() if k in _GLOBAL_FIELDS}

    merged = dict(module_data)
    for key in _PREVIEW_DATA_FIELDS:
        if key in yaml_data or key in module_data:
            merged[key] = combine_parameters(yaml_data.get(key), module_data.get(key))
    for key in ("decorators", "loaders", "args_enhancers", "arg_types_enhancers"):
        if key in merged:
            merged[key] = list(merged[key])

    logger.debug("Loaded preview from %s: %s", preview_path, sorted(merged))
    return GlobalAnnotations(**merged)
