"""Compose story decorators into one render wrapper.

A decorator is called as ``decorator(story_fn, context)``. Inside, it renders
the wrapped story with ``story_fn()`` or ``story_fn(update)``; ``update`` is a
partial context merged into the context the inner layers see.

    def with_theme(story_fn, context):
        return f"<Theme>{story_fn({'globals': {**context['globals'], 'theme': 'dark'}})}</Theme>"
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from storyprep.types import StoryContext

    StoryFn = Callable[[StoryContext], Any]
    Decorator = Callable[..., Any]

# Fixed per story; decorators may not override them through a context update.
_IDENTITY_KEYS = frozenset({
    "component_id", "title", "id", "name", "parameters", "initial_args", "arg_types",
})


def sanitize_story_context_update(update: dict[str, Any] | None) -> dict[str, Any]:
    if not update:
        return {}
    return {k: v for k, v in update.items() if k not in _IDENTITY_KEYS}


def decorate_story(story_fn: StoryFn, decorator: Decorator) -> StoryFn:
    """Turn one decorator into a render -> render transform around ``story_fn``."""

    def decorated(context: StoryContext) -> Any:
        def bound(update: dict[str, Any] | None = None) -> Any:
            return story_fn({**context, **sanitize_story_context_update(update)})
        return decorator(bound, context)

    return decorated


def default_decorate_story(story_fn: StoryFn, decorators: Sequence[Decorator]) -> StoryFn:
    """Fold ``decorators`` around ``story_fn``; the first decorator is innermost."""
    composed = story_fn
    for decorator in decorators:
        composed = decorate_story(composed, decorator)
    return composed
