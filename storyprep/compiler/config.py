"""Parse preview.yaml global configuration and canonicalize annotation keys."""
from __future__ import annotations

from typing import Any

import yaml

# camelCase keyword -> internal key mapping
KEYWORD_MAP = {
    "argTypes": "arg_types",
    "storyName": "story_name",
    "defaultValue": "default_value",
    "passArgsFirst": "pass_args_first",
    "argsEnhancers": "args_enhancers",
    "argTypesEnhancers": "arg_types_enhancers",
    "applyDecorators": "apply_decorators",
    "includeStories": "include_stories",
    "excludeStories": "exclude_stories",
    "initialArgs": "initial_args",
    "componentId": "component_id",
}

# Top-level keys preview.yaml may carry (data only, callables live in preview.py)
PREVIEW_DATA_KEYS = frozenset({"parameters", "args", "arg_types", "globals"})


def _normalize_key(key: str) -> str:
    return KEYWORD_MAP.get(key, key)


def normalize_keys(record: dict[str, Any]) -> dict[str, Any]:
    """Canonicalize annotation keys, including those of nested arg types and parameters."""
    normalized = {_normalize_key(k): v for k, v in record.items()}
    if isinstance(normalized.get("arg_types"), dict):
        normalized["arg_types"] = normalize_arg_types(normalized["arg_types"])
    if isinstance(normalized.get("parameters"), dict):
        normalized["parameters"] = normalize_parameters(normalized["parameters"])
    return normalized


def normalize_arg_types(arg_types: dict[str, Any]) -> dict[str, Any]:
    return {
        name: {_normalize_key(k): v for k, v in desc.items()} if isinstance(desc, dict) else desc
        for name, desc in arg_types.items()
    }


def normalize_parameters(parameters: dict[str, Any]) -> dict[str, Any]:
    # Only engine-recognized keys are renamed; the rest is consumer data.
    if "passArgsFirst" not in parameters:
        return parameters
    renamed = {k: v for k, v in parameters.items() if k != "passArgsFirst"}
    renamed["pass_args_first"] = parameters["passArgsFirst"]
    return renamed


def parse_preview_yaml(content: str) -> dict[str, Any]:
    raw = yaml.safe_load(content)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("Invalid preview YAML: expected a mapping")

    normalized = normalize_keys(raw)

    unknown = sorted(map(str, set(normalized) - PREVIEW_DATA_KEYS))
    if unknown:
        raise ValueError(
            f"Invalid preview YAML: unsupported keys {', '.join(unknown)} "
            f"(allowed: {', '.join(sorted(PREVIEW_DATA_KEYS))})"
        )

    for key, value in normalized.items():
        if value is not None and not isinstance(value, dict):
            raise ValueError(f'Invalid preview YAML: "{key}" must be a mapping')

    return {k: v for k, v in normalized.items() if v is not None}
