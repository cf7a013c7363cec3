"""Learner-facing tree listing.

``lenses.json`` files and dot-files are configuration, not study material, so
they never show up in the browser view.
"""

from __future__ import annotations

from .file_tree_model.types import DirectoryNode, FileNode, FileSystemNode
from .lens_config.resolver import CONFIG_FILENAME

TREE_SIZE_LABEL_MIN_BYTES = 10 * 1024


def is_hidden_name(name: str) -> bool:
    return name == CONFIG_FILENAME or name.startswith(".")


def visible_children(directory: DirectoryNode) -> list[FileSystemNode]:
    """Children of ``directory`` that the browser shows, in tree order."""
    return [child for child in directory.children if not is_hidden_name(child.name)]


def format_node(node: FileSystemNode, depth: int, expanded: bool = True, show_size_labels: bool = True) -> str:
    """Render one browser row."""
    if isinstance(node, DirectoryNode):
        indent = "  " * depth
        marker = "▾ " if expanded else "▸ "
        return f"{indent}{marker}{node.name}/"

    # Align file names under the parent directory arrow column.
    indent = "  " * max(0, depth - 1)
    size_label = ""
    size = node.size if node.size is not None else node.github_size
    if show_size_labels and size is not None and size >= TREE_SIZE_LABEL_MIN_BYTES:
        size_label = f" [{size // 1024} KB]"
    return f"{indent}  {node.name}{size_label}"


def render_tree(
    tree: DirectoryNode,
    expanded: set[str] | None = None,
    show_size_labels: bool = True,
) -> list[str]:
    """Return browser rows for ``tree``.

    ``expanded`` holds directory paths whose children are listed; ``None``
    expands everything. The root row is always expanded.
    """
    rows = [format_node(tree, 0)]

    def walk(directory: DirectoryNode, depth: int) -> None:
        for child in visible_children(directory):
            is_open = isinstance(child, DirectoryNode) and (expanded is None or child.path in expanded)
            rows.append(format_node(child, depth, expanded=is_open, show_size_labels=show_size_labels))
            if is_open:
                assert isinstance(child, DirectoryNode)
                walk(child, depth + 1)

    walk(tree, 1)
    return rows


def visible_file_paths(tree: DirectoryNode) -> list[str]:
    """Paths of every file reachable through visible directories."""
    paths: list[str] = []

    def walk(directory: DirectoryNode) -> None:
        for child in visible_children(directory):
            if isinstance(child, FileNode):
                paths.append(child.path)
            else:
                walk(child)

    walk(tree)
    return paths


__all__ = [
    "TREE_SIZE_LABEL_MIN_BYTES",
    "is_hidden_name",
    "visible_children",
    "format_node",
    "render_tree",
    "visible_file_paths",
]
