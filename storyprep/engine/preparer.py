"""Story preparer — merge global, component and story scopes into a PreparedStory.

Everything is resolved once, up front; the returned story functions are
stateless and read args, arg types and parameters only from the context they
are invoked with.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from storyprep.engine.args import is_args_story, map_args, positional_capacity, resolve_args
from storyprep.engine.decorators import default_decorate_story
from storyprep.engine.loaders import collect_loaders, make_apply_loaders
from storyprep.engine.parameters import combine_parameters
from storyprep.engine.play import make_run_play_function
from storyprep.errors import MissingRenderFunctionError
from storyprep.types import PreparedStory

if TYPE_CHECKING:
    from collections.abc import Callable

    from storyprep.engine.args import DeprecationNotices
    from storyprep.types import (
        ComponentAnnotations,
        CSFFile,
        GlobalAnnotations,
        StoryAnnotations,
        StoryContext,
    )

logger = logging.getLogger(__name__)


def prepare_story(
    story: StoryAnnotations,
    component: ComponentAnnotations,
    global_: GlobalAnnotations,
    notices: DeprecationNotices | None = None,
) -> PreparedStory:
    render = story.render or component.render or global_.render
    if render is None:
        raise MissingRenderFunctionError(story.id)

    parameters = combine_parameters(global_.parameters, component.parameters, story.parameters)

    # story decorators innermost, global outermost
    decorators = [
        *(story.decorators or ()),
        *(component.decorators or ()),
        *(global_.decorators or ()),
    ]
    apply_decorators = global_.apply_decorators or default_decorate_story

    parameters["__is_args_story"] = is_args_story(parameters, render)
    resolved = resolve_args(story, component, global_, parameters, notices)

    loaders = collect_loaders(story, component, global_)
    play = story.play or component.play

    undecorated_story_fn = _bind_render(render)
    unbound_story_fn = apply_decorators(undecorated_story_fn, decorators)

    logger.debug(
        "Prepared %s: %d decorator(s), %d loader(s), args story=%s",
        story.id, len(decorators), len(loaders), parameters["__is_args_story"],
    )
    return PreparedStory(
        id=story.id,
        name=story.name,
        title=component.title,
        component_id=component.id,
        component=component.component,
        subcomponents=component.subcomponents,
        parameters=parameters,
        initial_args=resolved.initial_args,
        arg_types=resolved.arg_types,
        original_story_fn=render,
        undecorated_story_fn=undecorated_story_fn,
        unbound_story_fn=unbound_story_fn,
        apply_loaders=make_apply_loaders(loaders),
        run_play_function=make_run_play_function(play),
        loaders=loaders,
        play=play,
    )


def prepare_csf_file(
    csf: CSFFile,
    global_: GlobalAnnotations,
    notices: DeprecationNotices | None = None,
) -> list[PreparedStory]:
    return [prepare_story(s, csf.meta, global_, notices) for s in csf.stories.values()]


def _bind_render(render: Callable[..., Any]) -> Callable[[StoryContext], Any]:
    """Wrap ``render`` so it receives mapped args, recomputed on every call."""
    capacity = positional_capacity(render)

    def undecorated_story_fn(context: StoryContext) -> Any:
        mapped_args = map_args(context.get("args") or {}, context.get("arg_types") or {})
        mapped_context = {**context, "args": mapped_args}
        if (context.get("parameters") or {}).get("pass_args_first", True):
            call_args: tuple[Any, ...] = (mapped_args, mapped_context)
        else:
            call_args = (mapped_context,)
        if capacity is not None:
            call_args = call_args[:capacity]
        return render(*call_args)

    return undecorated_story_fn
