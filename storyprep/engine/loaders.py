"""Concurrent execution of story loaders."""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from storyprep.types import ComponentAnnotations, GlobalAnnotations, StoryAnnotations, StoryContext

    Loader = Callable[[StoryContext], Any]

logger = logging.getLogger(__name__)


def collect_loaders(
    story: StoryAnnotations,
    component: ComponentAnnotations,
    global_: GlobalAnnotations,
) -> tuple[Loader, ...]:
    """Global loaders first, then component, then story."""
    return (*(global_.loaders or ()), *(component.loaders or ()), *(story.loaders or ()))


async def _settle(loader: Loader, context: StoryContext) -> Any:
    value = loader(context)
    if inspect.isawaitable(value):
        return await value
    return value


async def run_loaders(loaders: Sequence[Loader], context: StoryContext) -> StoryContext:
    """Start every loader at once and merge their results into ``loaded``.

    Each loader gets its own shallow copy of ``context`` and never sees another
    loader's output. Results merge in loader order, later keys winning. The
    first loader exception propagates; nothing is merged in that case.
    """
    results = await asyncio.gather(*(_settle(loader, dict(context)) for loader in loaders))
    loaded: dict[str, Any] = {}
    for result in results:
        loaded.update(result or {})
    logger.debug("Loaded %s from %d loader(s) for %s", sorted(loaded), len(loaders), context.get("id"))
    return {**context, "loaded": loaded}


def make_apply_loaders(loaders: Sequence[Loader]) -> Callable[[StoryContext], Awaitable[StoryContext]]:
    loaders = tuple(loaders)

    async def apply_loaders(context: StoryContext) -> StoryContext:
        return await run_loaders(loaders, context)

    return apply_loaders
