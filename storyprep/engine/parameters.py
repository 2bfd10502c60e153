"""Deep, right-biased merge of parameter maps across scopes."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def combine_parameters(*parameter_sets: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge parameter sets, least specific first (global, component, story).

    Precedence law: for every key, the value from the last set that defines it
    wins, except that mappings are combined recursively under the same law.
    A non-mapping value resets the key, so only the mappings defined after the
    last non-mapping value are combined. Lists and all other values are
    replaced wholesale. The result equals folding the sets left to right,
    so ``combine_parameters(g, c, s)`` == ``combine_parameters(combine_parameters(g, c), s)``.

    Inputs are never mutated.
    """
    sets = [p for p in parameter_sets if p is not None]
    combined: dict[str, Any] = {}
    merge_keys: list[str] = []

    for parameters in sets:
        for key, value in parameters.items():
            existing = combined.get(key)
            if isinstance(value, Mapping) and isinstance(existing, Mapping):
                if key not in merge_keys:
                    merge_keys.append(key)
            else:
                combined[key] = value

    for key in merge_keys:
        values = [p[key] for p in sets if key in p]
        # Start from the last non-mapping value; only mappings after it are merged.
        start = 0
        for idx, value in enumerate(values):
            if not isinstance(value, Mapping):
                start = idx + 1
        tail = values[start:]
        combined[key] = combine_parameters(*tail) if tail else values[-1]

    return combined
