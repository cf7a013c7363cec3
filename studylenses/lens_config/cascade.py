"""Deep-merge and ancestor-chain helpers for cascading lens configuration."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping

from ..file_tree_model.lookup import path_segments


def ancestor_chain(file_path: str) -> list[str]:
    """Return the directories containing ``file_path``, root first.

    ``/a/b/c.js`` yields ``["/", "/a", "/a/b"]``.
    """
    segments = path_segments(file_path)[:-1]
    chain = ["/"]
    for index in range(len(segments)):
        chain.append("/" + "/".join(segments[: index + 1]))
    return chain


def deep_merge(base: Mapping[str, object], override: Mapping[str, object]) -> dict[str, object]:
    """Return ``base`` overlaid with ``override`` without mutating either.

    Nested mappings merge key by key. Lists, scalars and ``None`` in
    ``override`` replace whatever ``base`` holds at that key.
    """
    merged: dict[str, object] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_layers(layers: Iterable[Mapping[str, object]]) -> dict[str, object]:
    """Fold ``layers`` root-to-leaf into one effective configuration."""
    effective: dict[str, object] = {}
    for layer in layers:
        effective = deep_merge(effective, layer)
    return effective


__all__ = ["ancestor_chain", "deep_merge", "merge_layers"]
