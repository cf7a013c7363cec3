"""Path resolution and fallback file selection over virtual trees.

Lookups never raise for missing paths: they return ``None`` and leave the
fallback policy to the caller (or to ``resolve_requested_file``).
"""

from __future__ import annotations

import random
from collections.abc import Iterator
from dataclasses import dataclass

from .types import DirectoryNode, FileNode, FileSystemNode

ENTRY_FILE_PATHS = (
    "/README.md",
    "/readme.md",
    "/index.js",
    "/index.html",
    "/index.md",
    "/main.js",
    "/app.js",
)


def path_segments(path: str) -> list[str]:
    """Split a slash path into its non-empty segments."""
    return [part for part in path.split("/") if part]


def normalize_path(path: str) -> str:
    """Return ``path`` without leading/trailing slashes or empty segments."""
    return "/".join(path_segments(path))


def _walk(root: DirectoryNode, segments: list[str]) -> FileSystemNode | None:
    current: FileSystemNode = root
    for segment in segments:
        if not isinstance(current, DirectoryNode):
            return None
        child = current.child(segment)
        if child is None:
            return None
        current = child
    return current


def find_node(root: DirectoryNode | None, path: str) -> FileNode | None:
    """Return the file at ``path`` or ``None``; directories are never returned."""
    if root is None:
        return None
    node = _walk(root, path_segments(path))
    return node if isinstance(node, FileNode) else None


def find_directory(root: DirectoryNode | None, path: str) -> DirectoryNode | None:
    """Return the directory at ``path`` (the root for ``""``/``"/"``) or ``None``."""
    if root is None:
        return None
    node = _walk(root, path_segments(path))
    return node if isinstance(node, DirectoryNode) else None


def iter_files(node: FileSystemNode | None) -> Iterator[FileNode]:
    """Yield every file below ``node`` in depth-first child order."""
    if node is None:
        return
    if isinstance(node, FileNode):
        yield node
        return
    for child in node.children:
        yield from iter_files(child)


def count_files(node: FileSystemNode | None) -> int:
    return sum(1 for _ in iter_files(node))


def random_file(root: FileSystemNode | None, rng: random.Random | None = None) -> FileNode | None:
    """Return a uniformly random file from the tree, or ``None`` when it has none."""
    files = list(iter_files(root))
    if not files:
        return None
    chooser = rng if rng is not None else random
    return chooser.choice(files)


def find_similar_file(root: DirectoryNode | None, requested_path: str) -> FileNode | None:
    """Best-effort stand-in for a missing ``requested_path``.

    Prefers the first file whose directory is a prefix or suffix of the
    requested directory, then the first file whose path contains one of the
    requested segments.
    """
    files = list(iter_files(root))
    segments = path_segments(requested_path)
    if not files or not segments:
        return None

    requested_dir = segments[:-1]
    if requested_dir:
        for file in files:
            file_dir = path_segments(file.dir)
            if not file_dir:
                continue
            width = len(file_dir)
            if requested_dir[:width] == file_dir or requested_dir[-width:] == file_dir:
                return file

    for file in files:
        if any(segment in file.path for segment in segments):
            return file
    return None


def find_readme(node: FileSystemNode | None) -> FileNode | None:
    """Return the first README-like or index file in depth-first order."""
    for file in iter_files(node):
        lower_name = file.name.lower()
        if lower_name.startswith("readme") or lower_name in {"index.md", "index.html"}:
            return file
    return None


@dataclass(frozen=True)
class FileResolution:
    """Outcome of resolving a requested path with fallbacks.

    ``strategy`` is one of ``exact``, ``similar``, ``entry``, ``random`` or
    ``none`` (in which case ``file`` is ``None``).
    """

    file: FileNode | None
    strategy: str

    @property
    def exact(self) -> bool:
        return self.strategy == "exact"


def resolve_requested_file(
    root: DirectoryNode | None,
    requested_path: str | None,
    rng: random.Random | None = None,
) -> FileResolution:
    """Resolve ``requested_path``, falling back to similar, entry, then random files."""
    if requested_path:
        exact = find_node(root, requested_path)
        if exact is not None:
            return FileResolution(exact, "exact")
        similar = find_similar_file(root, requested_path)
        if similar is not None:
            return FileResolution(similar, "similar")

    for entry_path in ENTRY_FILE_PATHS:
        entry = find_node(root, entry_path)
        if entry is not None:
            return FileResolution(entry, "entry")

    any_file = random_file(root, rng)
    if any_file is not None:
        return FileResolution(any_file, "random")
    return FileResolution(None, "none")


__all__ = [
    "ENTRY_FILE_PATHS",
    "path_segments",
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
