"""Cascading per-directory ``lenses.json`` configuration.

Layers are merged root to leaf, so deeper directories override their
ancestors key by key.
"""

from __future__ import annotations

from .cascade import ancestor_chain, deep_merge, merge_layers
from .resolver import (
    CONFIG_FILENAME,
    LAYER_INVALID,
    LAYER_MISSING,
    LAYER_OK,
    ConfigLayer,
    config_file_in,
    load_layer,
    parse_layer,
    resolve_config,
    resolve_config_layers,
)

__all__ = [
    "ancestor_chain",
    "deep_merge",
    "merge_layers",
    "CONFIG_FILENAME",
    "LAYER_OK",
    "LAYER_MISSING",
    "LAYER_INVALID",
    "ConfigLayer",
    "config_file_in",
    "parse_layer",
    "load_layer",
    "resolve_config_layers",
    "resolve_config",
]
