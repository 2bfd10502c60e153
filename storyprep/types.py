from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

Parameters = dict[str, Any]
Args = dict[str, Any]
ArgTypes = dict[str, dict[str, Any]]
StoryContext = dict[str, Any]

# ─── Annotation records (normalized from author input) ───

# Optional fields shared by every scope, in the order they are reported.
ANNOTATION_FIELDS = (
    "render",
    "play",
    "args",
    "arg_types",
    "parameters",
    "decorators",
    "loaders",
)


@dataclass(frozen=True)
class StoryAnnotations:
    id: str
    name: str
    # None = not present in the export
    render: Callable[..., Any] | None = None
    play: Callable[..., Any] | None = None
    args: Args | None = None
    arg_types: ArgTypes | None = None
    parameters: Parameters | None = None
    decorators: list[Callable[..., Any]] | None = None
    loaders: list[Callable[..., Any]] | None = None

    def present_fields(self) -> dict[str, Any]:
        """Annotation fields that were actually supplied."""
        return {k: getattr(self, k) for k in ANNOTATION_FIELDS if getattr(self, k) is not None}


@dataclass(frozen=True)
class ComponentAnnotations:
    title: str
    id: str
    component: Any = None
    subcomponents: dict[str, Any] | None = None
    render: Callable[..., Any] | None = None
    play: Callable[..., Any] | None = None
    args: Args | None = None
    arg_types: ArgTypes | None = None
    parameters: Parameters | None = None
    decorators: list[Callable[..., Any]] | None = None
    loaders: list[Callable[..., Any]] | None = None
    # export filters: sequence of names or a regex
    include_stories: Sequence[str] | str | None = None
    exclude_stories: Sequence[str] | str | None = None


@dataclass(frozen=True)
class GlobalAnnotations:
    render: Callable[..., Any] | None = None
    args: Args | None = None
    arg_types: ArgTypes | None = None
    parameters: Parameters | None = None
    decorators: list[Callable[..., Any]] | None = None
    loaders: list[Callable[..., Any]] | None = None
    args_enhancers: list[Callable[[StoryContext], Args | None]] = field(default_factory=list)
    arg_types_enhancers: list[Callable[[StoryContext], ArgTypes | None]] = field(default_factory=list)
    # None = engine.decorators.default_decorate_story
    apply_decorators: Callable[..., Callable[[StoryContext], Any]] | None = None
    globals: dict[str, Any] = field(default_factory=dict)


# ─── Prepared story (render-ready) ───

@dataclass(frozen=True)
class PreparedStory:
    id: str
    name: str
    title: str
    component_id: str
    component: Any
    subcomponents: dict[str, Any] | None
    parameters: Parameters
    initial_args: Args
    arg_types: ArgTypes
    original_story_fn: Callable[..., Any]
    undecorated_story_fn: Callable[[StoryContext], Any]
    unbound_story_fn: Callable[[StoryContext], Any]
    apply_loaders: Callable[[StoryContext], Awaitable[StoryContext]]
    run_play_function: Callable[..., Awaitable[Any]]
    loaders: tuple[Callable[..., Any], ...] = ()
    play: Callable[..., Any] | None = None

    def build_context(
        self,
        args: Args | None = None,
        globals: dict[str, Any] | None = None,
    ) -> StoryContext:
        """Fresh render context; ``args`` default to a copy of ``initial_args``.

        Top-level maps are copied so a decorator writing into the context
        cannot change the story for later renders.
        """
        return {
            "component_id": self.component_id,
            "title": self.title,
            "id": self.id,
            "name": self.name,
            "component": self.component,
            "subcomponents": self.subcomponents,
            "parameters": dict(self.parameters),
            "initial_args": dict(self.initial_args),
            "arg_types": dict(self.arg_types),
            "args": dict(self.initial_args if args is None else args),
            "globals": dict(globals or {}),
        }


# ─── CSF file (one component module) ───

@dataclass
class CSFFile:
    meta: ComponentAnnotations
    # export key -> normalized story, in definition order
    stories: dict[str, StoryAnnotations] = field(default_factory=dict)
    path: str = ""
