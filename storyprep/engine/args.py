"""Resolve initial args and arg types across scopes, then run the enhancer pipelines."""
from __future__ import annotations

import inspect
import logging
import warnings
from collections.abc import Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from storyprep.engine.parameters import combine_parameters
from storyprep.errors import ARG_TYPE_DEFAULT_VALUE_DEPRECATION, ArgTypeDefaultValueDeprecation

if TYPE_CHECKING:
    from collections.abc import Callable

    from storyprep.types import (
        Args,
        ArgTypes,
        ComponentAnnotations,
        GlobalAnnotations,
        Parameters,
        StoryAnnotations,
        StoryContext,
    )

logger = logging.getLogger(__name__)

# ─── Deprecation notices ───

@dataclass
class DeprecationNotices:
    """Which once-only deprecation signals have fired.

    Flags are set once and never cleared; ``PROCESS_NOTICES`` is created at
    import and shared by every preparation that does not pass its own.
    """

    arg_type_default_value: bool = False

    def warn_arg_type_default_value(self) -> None:
        if self.arg_type_default_value:
            return
        self.arg_type_default_value = True
        warnings.warn(ARG_TYPE_DEFAULT_VALUE_DEPRECATION, ArgTypeDefaultValueDeprecation, stacklevel=4)


PROCESS_NOTICES = DeprecationNotices()

# ─── Resolution ───

@dataclass(frozen=True)
class ResolvedArgs:
    initial_args: Args
    arg_types: ArgTypes
    # enhancer context after both pipelines ran
    context: StoryContext


def default_args(arg_types: ArgTypes) -> Args:
    return {
        name: desc["default_value"]
        for name, desc in arg_types.items()
        if isinstance(desc, dict) and desc.get("default_value") is not None
    }


def resolve_args(
    story: StoryAnnotations,
    component: ComponentAnnotations,
    global_: GlobalAnnotations,
    parameters: Parameters,
    notices: DeprecationNotices | None = None,
) -> ResolvedArgs:
    notices = notices or PROCESS_NOTICES

    passed_arg_types = combine_parameters(global_.arg_types, component.arg_types, story.arg_types)
    passed_args = combine_parameters(global_.args, component.args, story.args)

    defaults = default_args(passed_arg_types)
    if defaults:
        notices.warn_arg_type_default_value()

    initial_args_before_enhancers = {**defaults, **passed_args}
    context: StoryContext = {
        "component_id": component.id,
        "title": component.title,
        "id": story.id,
        "name": story.name,
        "component": component.component,
        "subcomponents": component.subcomponents,
        "parameters": parameters,
        "initial_args": initial_args_before_enhancers,
        "arg_types": passed_arg_types,
    }

    context["initial_args"] = _fold(global_.args_enhancers, context, "initial_args")
    context["arg_types"] = _fold(global_.arg_types_enhancers, context, "arg_types")
    logger.debug(
        "Resolved %d arg(s) and %d arg type(s) for %s",
        len(context["initial_args"]), len(context["arg_types"]), story.id,
    )
    return ResolvedArgs(
        initial_args=context["initial_args"],
        arg_types=context["arg_types"],
        context=context,
    )


def _fold(
    enhancers: list[Callable[[StoryContext], dict[str, Any] | None]],
    context: StoryContext,
    key: str,
) -> dict[str, Any]:
    """Run enhancers in order; each sees the accumulator under ``key`` and its
    output is merged on top. Keys can be added or overridden, never removed."""
    accumulated = context[key]
    for enhancer in enhancers:
        accumulated = {**accumulated, **(enhancer({**context, key: accumulated}) or {})}
    return accumulated


# ─── Calling convention ───

def _signature(fn: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(fn)
    except (TypeError, ValueError):
        return None


def declares_positional_parameters(fn: Callable[..., Any]) -> bool:
    sig = _signature(fn)
    if sig is None:
        return False
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        for p in sig.parameters.values()
    )


def positional_capacity(fn: Callable[..., Any]) -> int | None:
    """How many positional arguments ``fn`` accepts; None = unbounded."""
    sig = _signature(fn)
    if sig is None:
        return None
    count = 0
    for p in sig.parameters.values():
        if p.kind == p.VAR_POSITIONAL:
            return None
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def is_args_story(parameters: Parameters, render: Callable[..., Any]) -> bool:
    return bool(parameters.get("pass_args_first", True)) and declares_positional_parameters(render)


# ─── Render-time mapping ───

def map_args(args: Args, arg_types: ArgTypes) -> Args:
    """Substitute each arg through its arg type ``mapping``; computed per call."""
    mapped: Args = {}
    for key, value in args.items():
        mapping = (arg_types.get(key) or {}).get("mapping")
        if mapping and isinstance(value, Hashable) and value in mapping:
            mapped[key] = mapping[value]
        else:
            mapped[key] = value
    return mapped
