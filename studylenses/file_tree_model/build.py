"""Virtual-tree construction from flat listings, uploads, and gists."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from .types import DirectoryNode, FileNode, FileSystemNode, GitHubRepoRef, file_base_name, file_extension

logger = logging.getLogger(__name__)

TREE_SIZE_CEILING_BYTES = 100 * 1024
BINARY_EXTENSIONS = frozenset(
    {
        ".jpg", ".jpeg", ".png", ".gif", ".svg", ".ico", ".webp",
        ".pdf", ".zip", ".tar", ".gz", ".exe", ".dll", ".so",
        ".mp4", ".mp3", ".avi", ".mov", ".wav",
        ".ttf", ".woff", ".woff2", ".eot",
    }
)


@dataclass(frozen=True)
class FlatEntry:
    """One blob descriptor from a flat repository listing."""

    path: str
    size: int = 0
    is_binary: bool = False
    type: str = "blob"


def is_binary_path(path: str) -> bool:
    """Return whether ``path`` ends in a known binary extension."""
    lowered = path.lower()
    return any(lowered.endswith(ext) for ext in BINARY_EXTENSIONS)


def is_text_entry(entry: FlatEntry) -> bool:
    """Return whether ``entry`` is a blob small and textual enough to list."""
    if entry.type != "blob" or entry.is_binary:
        return False
    if is_binary_path(entry.path):
        return False
    return entry.size <= TREE_SIZE_CEILING_BYTES


def _sort_key(node: FileSystemNode) -> tuple[bool, str, str]:
    return (isinstance(node, FileNode), node.name.lower(), node.name)


def sort_children(directory: DirectoryNode) -> None:
    """Recursively order children: directories first, then case-insensitive name."""
    directory.children.sort(key=_sort_key)
    for child in directory.children:
        if isinstance(child, DirectoryNode):
            sort_children(child)


def annotate_tree(node: FileSystemNode, root: str = "/") -> FileSystemNode:
    """Set ``root``/``to_cwd`` on every node and default file ``lang`` to ``ext``.

    Safe to run repeatedly on the same tree; an explicit ``lang`` is kept.
    """
    node.root = root
    depth = len([part for part in node.dir.split("/") if part])
    node.to_cwd = "." if depth == 0 else "/".join([".."] * depth)

    if isinstance(node, FileNode):
        if node.lang is None:
            node.lang = node.ext
        return node

    for child in node.children:
        annotate_tree(child, root)
    return node


def _strip_prefix(path: str, prefix: str) -> str | None:
    """Return ``path`` relative to ``prefix`` or ``None`` when outside it."""
    path = path.strip("/")
    if not prefix:
        return path
    if path == prefix:
        return ""
    if not path.startswith(prefix + "/"):
        return None
    return path[len(prefix) + 1:]


def _ensure_directory(
    tree: DirectoryNode,
    directories: dict[str, DirectoryNode],
    parts: list[str],
) -> DirectoryNode | None:
    """Return the directory for ``parts``, creating missing ancestors.

    Returns ``None`` when a file already sits where a directory is needed.
    """
    current_path = ""
    current_dir = tree
    for part in parts:
        parent_path = current_path
        current_path = f"{current_path}/{part}" if current_path else part
        existing = directories.get(current_path)
        if existing is None:
            if current_dir.child(part) is not None:
                return None
            existing = DirectoryNode(name=part, path=f"/{current_path}", dir=parent_path)
            current_dir.children.append(existing)
            directories[current_path] = existing
        current_dir = existing
    return current_dir


def build_from_flat_list(
    entries: Iterable[FlatEntry],
    filter_prefix: str = "",
    *,
    root_name: str | None = None,
    repo: GitHubRepoRef | None = None,
    root: str = "/",
) -> DirectoryNode:
    """Build a sorted tree from flat blob descriptors in any order.

    Only entries under ``filter_prefix`` are kept and the prefix is stripped
    from node paths. Binary and oversized entries are excluded. When ``repo``
    is given every file records where to lazily fetch its content from.
    """
    prefix = filter_prefix.strip("/")
    if root_name is None:
        root_name = prefix or (f"{repo.owner}/{repo.repo}" if repo is not None else "root")
    tree = DirectoryNode(name=root_name, path="/", dir="")
    directories: dict[str, DirectoryNode] = {"": tree}

    for entry in entries:
        if not is_text_entry(entry):
            continue
        relative = _strip_prefix(entry.path, prefix)
        if not relative:
            continue
        parts = [part for part in relative.split("/") if part]
        file_name = parts.pop()
        dir_path = "/".join(parts)

        parent = _ensure_directory(tree, directories, parts)
        if parent is None:
            logger.debug("Skipping %s: a file already occupies one of its directories", entry.path)
            continue
        if parent.child(file_name) is not None:
            logger.debug("Skipping duplicate entry %s", entry.path)
            continue
        ext = file_extension(file_name)
        parent.children.append(
            FileNode(
                name=file_name,
                path=f"/{dir_path}/{file_name}" if dir_path else f"/{file_name}",
                dir=dir_path,
                ext=ext,
                base=file_base_name(file_name),
                github_repo=repo,
                github_path=entry.path if repo is not None else None,
                github_size=entry.size if repo is not None else None,
                size=entry.size,
            )
        )

    sort_children(tree)
    annotate_tree(tree, root)
    return tree


def read_text(path: Path) -> str:
    """Decode an uploaded file as UTF-8 (a leading BOM is dropped), else latin-1."""
    raw = path.read_bytes()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        # every byte is valid latin-1
        return raw.decode("latin-1")


def _flat_file(name: str, content: str, size: int | None, last_modified: int | None) -> FileNode:
    ext = file_extension(name)
    return FileNode(
        name=name,
        path=f"/{name}",
        dir="",
        ext=ext,
        base=file_base_name(name),
        lang=ext,
        content=content,
        size=size,
        last_modified=last_modified,
    )


def _flat_directory(name: str, files: Iterable[FileNode], root: str) -> DirectoryNode:
    tree = DirectoryNode(name=name, path="/", dir="")
    for node in files:
        if tree.child(node.name) is not None:
            logger.debug("Skipping duplicate file name %s", node.name)
            continue
        tree.children.append(node)
    sort_children(tree)
    annotate_tree(tree, root)
    return tree


def build_from_uploads(paths: Iterable[Path], *, root_name: str = "uploaded-files", root: str = "/") -> DirectoryNode:
    """Build a flat tree from local files, reading their content eagerly."""
    files: list[FileNode] = []
    for path in paths:
        stat = path.stat()
        files.append(
            _flat_file(
                path.name,
                read_text(path),
                size=int(stat.st_size),
                last_modified=int(stat.st_mtime_ns // 1_000_000),
            )
        )
    return _flat_directory(root_name, files, root)


def build_from_gist(gist_id: str, files: Mapping[str, Mapping[str, object]], *, root: str = "/") -> DirectoryNode:
    """Build a flat tree from a gist's ``files`` mapping."""
    nodes: list[FileNode] = []
    for filename, data in files.items():
        content = data.get("content")
        size = data.get("size")
        nodes.append(
            _flat_file(
                filename,
                content if isinstance(content, str) else "",
                size=size if isinstance(size, int) else None,
                last_modified=None,
            )
        )
    return _flat_directory(f"gist-{gist_id}", nodes, root)


__all__ = [
    "TREE_SIZE_CEILING_BYTES",
    "BINARY_EXTENSIONS",
    "FlatEntry",
    "is_binary_path",
    "is_text_entry",
    "sort_children",
    "annotate_tree",
    "build_from_flat_list",
    "read_text",
    "build_from_uploads",
    "build_from_gist",
]
