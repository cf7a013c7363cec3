"""Static JSON snapshot loading and serialization for virtual trees."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from ..errors import SnapshotError
from .build import annotate_tree
from .types import DirectoryNode, FileNode, FileSystemNode, GitHubRepoRef, file_base_name, file_extension


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _repo_from_dict(value: object) -> GitHubRepoRef | None:
    if not isinstance(value, Mapping):
        return None
    owner = value.get("owner")
    repo = value.get("repo")
    branch = value.get("branch", "main")
    if not isinstance(owner, str) or not isinstance(repo, str) or not isinstance(branch, str):
        return None
    return GitHubRepoRef(owner=owner, repo=repo, branch=branch)


def node_from_dict(data: Mapping[str, object], parent_path: str | None = None) -> FileSystemNode:
    """Convert one snapshot object (and its descendants) into nodes.

    Missing ``path``/``dir`` values are derived from the parent; the top-level
    object defaults to ``/``. Raises ``SnapshotError`` on schema violations.
    """
    if not isinstance(data, Mapping):
        raise SnapshotError(f"expected an object, got {type(data).__name__}")
    kind = data.get("type")
    name = data.get("name")
    if not isinstance(name, str):
        if parent_path is not None:
            raise SnapshotError("node is missing a string 'name'")
        name = ""

    if parent_path is None:
        default_path = "/"
        default_dir = ""
    else:
        default_path = f"{parent_path.rstrip('/')}/{name}"
        default_dir = parent_path.strip("/")
    path = data.get("path")
    path = path if isinstance(path, str) and path else default_path
    dir_value = data.get("dir")
    dir_value = dir_value if isinstance(dir_value, str) else default_dir

    if kind == "file":
        if "children" in data:
            raise SnapshotError(f"file node {path!r} must not have children")
        ext = data.get("ext")
        ext = ext if isinstance(ext, str) else file_extension(name)
        base = data.get("base")
        lang = data.get("lang")
        content = data.get("content")
        github_path = data.get("githubPath")
        return FileNode(
            name=name,
            path=path,
            dir=dir_value,
            ext=ext,
            base=base if isinstance(base, str) else file_base_name(name),
            lang=lang if isinstance(lang, str) and lang else None,
            content=content if isinstance(content, str) else "",
            size=_optional_int(data.get("size")),
            last_modified=_optional_int(data.get("lastModified")),
            github_repo=_repo_from_dict(data.get("githubRepo")),
            github_path=github_path if isinstance(github_path, str) else None,
            github_size=_optional_int(data.get("githubSize")),
        )

    if kind != "directory":
        raise SnapshotError(f"node {path!r} has unknown type {kind!r}")

    raw_children = data.get("children", [])
    if not isinstance(raw_children, list):
        raise SnapshotError(f"directory {path!r} children must be a list")
    directory = DirectoryNode(name=name, path=path, dir=dir_value)
    seen: set[str] = set()
    for raw_child in raw_children:
        child = node_from_dict(raw_child, parent_path=path)
        if child.name in seen:
            raise SnapshotError(f"directory {path!r} has duplicate child {child.name!r}")
        seen.add(child.name)
        directory.children.append(child)
    return directory


def node_to_dict(node: FileSystemNode) -> dict[str, object]:
    """Serialize a node tree to the snapshot schema (``study_cache`` omitted)."""
    if isinstance(node, DirectoryNode):
        return {
            "type": "directory",
            "name": node.name,
            "path": node.path,
            "dir": node.dir,
            "children": [node_to_dict(child) for child in node.children],
        }

    data: dict[str, object] = {
        "type": "file",
        "name": node.name,
        "path": node.path,
        "dir": node.dir,
        "ext": node.ext,
        "base": node.base,
        "lang": node.lang if node.lang is not None else node.ext,
        "content": node.content,
    }
    if node.size is not None:
        data["size"] = node.size
    if node.last_modified is not None:
        data["lastModified"] = node.last_modified
    if node.github_repo is not None:
        data["githubRepo"] = {
            "owner": node.github_repo.owner,
            "repo": node.github_repo.repo,
            "branch": node.github_repo.branch,
        }
    if node.github_path is not None:
        data["githubPath"] = node.github_path
    if node.github_size is not None:
        data["githubSize"] = node.github_size
    return data


def parse_snapshot(text: str, root: str = "/") -> DirectoryNode:
    """Parse snapshot JSON text into an annotated directory tree."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
    tree = node_from_dict(data)
    if not isinstance(tree, DirectoryNode):
        raise SnapshotError("snapshot root must be a directory")
    annotate_tree(tree, root)
    return tree


def load_snapshot(path: Path, root: str = "/") -> DirectoryNode:
    """Read and parse a snapshot file from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"cannot read snapshot {path}: {exc}") from exc
    return parse_snapshot(text, root)


def dump_snapshot(tree: DirectoryNode, indent: int | None = 2) -> str:
    """Serialize ``tree`` to snapshot JSON text."""
    return json.dumps(node_to_dict(tree), indent=indent) + "\n"


__all__ = [
    "node_from_dict",
    "node_to_dict",
    "parse_snapshot",
    "load_snapshot",
    "dump_snapshot",
]
