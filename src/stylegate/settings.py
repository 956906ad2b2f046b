"""Layered merging of compiler settings."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

NESTED = "nested"
COMPRESSED = "compressed"


def merge_settings(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Deep-merge *layers* left to right; later layers win key by key.

    Nested mappings merge recursively. Lists and scalars are replaced
    wholesale. Inputs are not modified.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        _merge_into(merged, layer)
    return merged


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            _merge_into(current, value)
        elif isinstance(value, Mapping):
            target[key] = merge_settings(value)
        else:
            target[key] = copy.deepcopy(value)


def output_style(minified: bool) -> str:
    return COMPRESSED if minified else NESTED


def effective_settings(
    base: Mapping[str, Any] | None,
    task: Mapping[str, Any] | None,
    minified: bool,
) -> dict[str, Any]:
    """Settings for one compile run; the build mode always decides ``sass.outputStyle``."""
    forced = {"sass": {"outputStyle": output_style(minified)}}
    return merge_settings(base, task, forced)
