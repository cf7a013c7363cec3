"""Effective lens configuration for a file from ancestor ``lenses.json`` files.

A malformed ``lenses.json`` only drops its own layer; every other directory
keeps contributing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from ..file_tree_model.lookup import find_directory, normalize_path
from ..file_tree_model.types import DirectoryNode, FileNode
from .cascade import ancestor_chain, merge_layers

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lenses.json"

LAYER_OK = "ok"
LAYER_MISSING = "missing"
LAYER_INVALID = "invalid"


@dataclass(frozen=True)
class ConfigLayer:
    """One directory's contribution to the cascade."""

    path: str
    status: str
    data: dict[str, object] = field(default_factory=dict)
    error: str | None = None


def config_file_in(directory: DirectoryNode | None) -> FileNode | None:
    """Return the ``lenses.json`` file directly inside ``directory``."""
    if directory is None:
        return None
    node = directory.child(CONFIG_FILENAME)
    return node if isinstance(node, FileNode) else None


def parse_layer(path: str, config_file: FileNode | None) -> ConfigLayer:
    """Parse a directory's config file into a ``ConfigLayer``."""
    if config_file is None or not config_file.content.strip():
        return ConfigLayer(path, LAYER_MISSING)
    try:
        data = json.loads(config_file.content)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring invalid %s: %s", config_file.path, exc)
        return ConfigLayer(path, LAYER_INVALID, error=str(exc))
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top-level value is not an object", config_file.path)
        return ConfigLayer(path, LAYER_INVALID, error="top-level value is not an object")
    return ConfigLayer(path, LAYER_OK, data)


def load_layer(tree: DirectoryNode | None, directory_path: str) -> ConfigLayer:
    """Load the cascade layer for the directory at ``directory_path``."""
    path = "/" + normalize_path(directory_path)
    return parse_layer(path, config_file_in(find_directory(tree, directory_path)))


def resolve_config_layers(file_path: str, tree: DirectoryNode | None) -> list[ConfigLayer]:
    """Return one ``ConfigLayer`` per ancestor of ``file_path``, root first."""
    return [load_layer(tree, directory_path) for directory_path in ancestor_chain(file_path)]


def resolve_config(file_path: str, tree: DirectoryNode | None) -> dict[str, object]:
    """Return the effective configuration for ``file_path`` (never ``None``)."""
    layers = resolve_config_layers(file_path, tree)
    return merge_layers(layer.data for layer in layers if layer.status == LAYER_OK)


__all__ = [
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
