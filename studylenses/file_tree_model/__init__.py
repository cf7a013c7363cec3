"""Domain model for virtual file/directory trees.

This package contains non-UI tree primitives:
- file/directory node datatypes with nested children
- builders from flat repository listings, uploads, and gists
- static JSON snapshot load/dump
- path lookup plus fallback file selection
"""

from __future__ import annotations

from .types import DirectoryNode, FileNode, FileSystemNode, GitHubRepoRef, file_base_name, file_extension
from .build import (
    BINARY_EXTENSIONS,
    TREE_SIZE_CEILING_BYTES,
    FlatEntry,
    annotate_tree,
    build_from_flat_list,
    build_from_gist,
    build_from_uploads,
    is_text_entry,
    sort_children,
)
from .snapshot import dump_snapshot, load_snapshot, node_from_dict, node_to_dict, parse_snapshot
from .lookup import (
    FileResolution,
    count_files,
    find_directory,
    find_node,
    find_readme,
    find_similar_file,
    iter_files,
    normalize_path,
    random_file,
    resolve_requested_file,
)

__all__ = [
    "DirectoryNode",
    "FileNode",
    "FileSystemNode",
    "GitHubRepoRef",
    "file_extension",
    "file_base_name",
    "BINARY_EXTENSIONS",
    "TREE_SIZE_CEILING_BYTES",
    "FlatEntry",
    "is_text_entry",
    "sort_children",
    "annotate_tree",
    "build_from_flat_list",
    "build_from_uploads",
    "build_from_gist",
    "node_from_dict",
    "node_to_dict",
    "parse_snapshot",
    "load_snapshot",
    "dump_snapshot",
    "normalize_path",
    "find_node",
    "find_directory",
    "iter_files",
    "count_files",
    "random_file",
    "find_similar_file",
    "find_readme",
    "FileResolution",
    "resolve_requested_file",
]
