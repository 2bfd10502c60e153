"""Tests for story preparation end to end.

Covers:
- render precedence and missing render
- parameter / args / arg type precedence across scopes
- decorator order (story innermost, global outermost)
- pass_args_first calling convention and __is_args_story
- render-time arg mapping, recomputed per call
- loaders and play wired from all scopes
- immutability of the prepared story
"""
from __future__ import annotations

import asyncio
import dataclasses

import pytest

from storyprep.engine.preparer import prepare_story
from storyprep.errors import MissingRenderFunctionError
from storyprep.types import ComponentAnnotations, GlobalAnnotations, StoryAnnotations

COMPONENT = ComponentAnnotations(title="Atoms/Button", id="atoms-button", component="Button")


def _story(**fields):
    return StoryAnnotations(id="atoms-button--primary", name="Primary", **fields)


def render_args(args):
    return args


# ─── Render selection ───

def test_missing_render_everywhere_fails(notices):
    with pytest.raises(MissingRenderFunctionError, match="atoms-button--primary"):
        prepare_story(_story(), COMPONENT, GlobalAnnotations(), notices)


def test_render_precedence(notices):
    def g(args):
        return "global"

    def c(args):
        return "component"

    def s(args):
        return "story"

    component = dataclasses.replace(COMPONENT, render=c)
    assert prepare_story(_story(render=s), component, GlobalAnnotations(render=g), notices).original_story_fn is s
    assert prepare_story(_story(), component, GlobalAnnotations(render=g), notices).original_story_fn is c
    assert prepare_story(_story(), COMPONENT, GlobalAnnotations(render=g), notices).original_story_fn is g


# ─── Merging ───

def test_scope_precedence(notices):
    global_ = GlobalAnnotations(
        parameters={"layout": "padded", "docs": {"source": "g", "page": "g"}},
        args={"label": "g", "size": "g"},
        arg_types={"label": {"control": "text", "description": "g"}},
    )
    component = dataclasses.replace(
        COMPONENT,
        parameters={"layout": "centered", "docs": {"page": "c"}},
        args={"label": "c"},
    )
    story = _story(
        render=render_args,
        parameters={"docs": {"source": "s"}},
        arg_types={"label": {"description": "s"}},
    )
    prepared = prepare_story(story, component, global_, notices)

    assert prepared.parameters["layout"] == "centered"
    assert prepared.parameters["docs"] == {"source": "s", "page": "c"}
    assert prepared.initial_args == {"label": "c", "size": "g"}
    assert prepared.arg_types == {"label": {"control": "text", "description": "s"}}


def test_identity_fields(notices):
    prepared = prepare_story(_story(render=render_args), COMPONENT, GlobalAnnotations(), notices)
    assert prepared.id == "atoms-button--primary"
    assert prepared.name == "Primary"
    assert prepared.title == "Atoms/Button"
    assert prepared.component_id == "atoms-button"
    assert prepared.component == "Button"


def test_enhancers_and_defaults(notices):
    global_ = GlobalAnnotations(
        args_enhancers=[lambda context: {"a": 1}, lambda context: {"a": context["initial_args"]["a"] + 1}],
    )
    story = _story(render=render_args, arg_types={"x": {"default_value": 1}})
    with pytest.warns(DeprecationWarning):
        prepared = prepare_story(story, COMPONENT, global_, notices)
    assert prepared.initial_args == {"x": 1, "a": 2}


def test_enhancers_see_args_story_flag(notices):
    seen = []

    def enhancer(context):
        seen.append(context["parameters"]["__is_args_story"])
        return {}

    prepare_story(_story(render=render_args), COMPONENT, GlobalAnnotations(args_enhancers=[enhancer]), notices)
    assert seen == [True]


# ─── Decorators ───

def test_decorator_order_story_innermost_global_outermost(notices):
    calls: list[str] = []

    def probe(label):
        def decorator(story_fn, context):
            calls.append(label)
            return f"{label}[{story_fn()}]"
        return decorator

    prepared = prepare_story(
        _story(render=lambda args: "render", decorators=[probe("s")]),
        dataclasses.replace(COMPONENT, decorators=[probe("c")]),
        GlobalAnnotations(decorators=[probe("g")]),
        notices,
    )
    assert prepared.unbound_story_fn(prepared.build_context()) == "g[c[s[render]]]"
    assert calls == ["g", "c", "s"]


def test_custom_apply_decorators_receives_full_list(notices):
    received = {}

    def apply_decorators(story_fn, decorators):
        received["decorators"] = list(decorators)
        return story_fn

    def s(story_fn, context):
        return story_fn()

    def g(story_fn, context):
        return story_fn()

    prepared = prepare_story(
        _story(render=render_args, decorators=[s]),
        COMPONENT,
        GlobalAnnotations(decorators=[g], apply_decorators=apply_decorators),
        notices,
    )
    assert received["decorators"] == [s, g]
    assert prepared.unbound_story_fn is prepared.undecorated_story_fn


# ─── Calling convention ───

def test_args_story_receives_mapped_args_and_context(notices):
    received = {}

    def render(args, context):
        received["args"] = args
        received["context_args"] = context["args"]
        return "ok"

    prepared = prepare_story(
        _story(render=render, args={"color": "red", "label": "Save"}),
        dataclasses.replace(COMPONENT, arg_types={"color": {"mapping": {"red": "#f00"}}}),
        GlobalAnnotations(),
        notices,
    )
    assert prepared.parameters["__is_args_story"] is True
    assert prepared.unbound_story_fn(prepared.build_context()) == "ok"
    assert received["args"] == {"color": "#f00", "label": "Save"}
    assert received["context_args"] == received["args"]


def test_legacy_story_receives_context(notices):
    def render(context):
        return context["args"]["color"]

    prepared = prepare_story(
        _story(render=render, args={"color": "red"}, parameters={"pass_args_first": False}),
        dataclasses.replace(COMPONENT, arg_types={"color": {"mapping": {"red": "#f00"}}}),
        GlobalAnnotations(),
        notices,
    )
    assert prepared.parameters["__is_args_story"] is False
    assert prepared.unbound_story_fn(prepared.build_context()) == "#f00"


def test_zero_parameter_render(notices):
    prepared = prepare_story(_story(render=lambda: "static"), COMPONENT, GlobalAnnotations(), notices)
    assert prepared.parameters["__is_args_story"] is False
    assert prepared.unbound_story_fn(prepared.build_context()) == "static"


def test_mapping_recomputed_on_every_call(notices):
    prepared = prepare_story(
        _story(render=render_args, args={"color": "red"}),
        dataclasses.replace(COMPONENT, arg_types={"color": {"mapping": {"red": "#f00", "blue": "#00f"}}}),
        GlobalAnnotations(),
        notices,
    )
    assert prepared.unbound_story_fn(prepared.build_context()) == {"color": "#f00"}
    assert prepared.unbound_story_fn(prepared.build_context(args={"color": "blue"})) == {"color": "#00f"}
    assert prepared.unbound_story_fn(prepared.build_context(args={"color": "plum"})) == {"color": "plum"}
    assert prepared.initial_args == {"color": "red"}


# ─── Loaders and play ───

def test_loaders_and_play(notices):
    def loader(label, value):
        async def load(context):
            return {"x": value, label: True}
        return load

    async def play(context):
        return f"played {context['loaded']['x']}"

    prepared = prepare_story(
        _story(render=render_args, loaders=[loader("s", 3)], play=play),
        dataclasses.replace(COMPONENT, loaders=[loader("c", 2)]),
        GlobalAnnotations(loaders=[loader("g", 1)]),
        notices,
    )

    async def scenario():
        context = await prepared.apply_loaders(prepared.build_context())
        return context, await prepared.run_play_function(context)

    context, outcome = asyncio.run(scenario())
    assert context["loaded"] == {"x": 3, "g": True, "c": True, "s": True}
    assert outcome == "played 3"
    assert prepared.play is play


def test_component_play_is_fallback(notices):
    async def component_play():
        return "component"

    prepared = prepare_story(
        _story(render=render_args), dataclasses.replace(COMPONENT, play=component_play), GlobalAnnotations(), notices,
    )
    assert asyncio.run(prepared.run_play_function()) == "component"


# ─── Immutability ───

def test_prepared_story_is_frozen(notices):
    prepared = prepare_story(_story(render=render_args), COMPONENT, GlobalAnnotations(), notices)
    with pytest.raises(dataclasses.FrozenInstanceError):
        prepared.name = "other"


def test_scope_parameters_are_not_mutated(notices):
    global_parameters = {"layout": "padded"}
    prepare_story(_story(render=render_args), COMPONENT, GlobalAnnotations(parameters=global_parameters), notices)
    assert global_parameters == {"layout": "padded"}


def test_build_context_copies_args(notices):
    prepared = prepare_story(_story(render=render_args, args={"a": 1}), COMPONENT, GlobalAnnotations(), notices)
    context = prepared.build_context(globals={"theme": "dark"})
    context["args"]["a"] = 2
    assert prepared.initial_args == {"a": 1}
    assert context["globals"] == {"theme": "dark"}


def test_decorator_writes_do_not_leak_into_later_renders(notices):
    def widen(story_fn, context):
        context["parameters"]["layout"] = "fullscreen"
        context["initial_args"]["a"] = 2
        return story_fn()

    prepared = prepare_story(
        _story(render=lambda context: context["parameters"]["layout"], decorators=[widen],
               parameters={"layout": "centered", "pass_args_first": False}, args={"a": 1}),
        COMPONENT, GlobalAnnotations(), notices,
    )
    assert prepared.unbound_story_fn(prepared.build_context()) == "fullscreen"
    assert prepared.parameters["layout"] == "centered"
    assert prepared.initial_args == {"a": 1}
    assert prepared.build_context()["parameters"]["layout"] == "centered"
