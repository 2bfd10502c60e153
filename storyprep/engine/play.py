"""Uniform async contract around an optional play function."""
from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from storyprep.types import StoryContext


def make_run_play_function(
    play: Callable[..., Any] | None,
) -> Callable[..., Awaitable[Any]]:
    async def run_play_function(context: StoryContext | None = None) -> Any:
        if play is None:
            return None
        outcome = play() if context is None else play(context)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome

    return run_play_function
