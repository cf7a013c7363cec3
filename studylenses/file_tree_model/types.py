"""Domain datatypes for virtual file tree nodes."""

from __future__ import annotations

from dataclasses import dataclass, field

_LOCATION_FIELDS = frozenset({"name", "path", "dir"})


class _LocatedNode:
    """Mixin that freezes ``name``/``path``/``dir`` once they are first assigned."""

    def __setattr__(self, key: str, value: object) -> None:
        if key in _LOCATION_FIELDS and key in self.__dict__:
            raise AttributeError(f"{type(self).__name__}.{key} is read-only after insertion")
        super().__setattr__(key, value)


@dataclass(frozen=True)
class GitHubRepoRef:
    """Repository coordinates a lazily loaded file belongs to."""

    owner: str
    repo: str
    branch: str = "main"


@dataclass
class FileNode(_LocatedNode):
    """Virtual file with mutable content and optional remote provenance."""

    name: str
    path: str
    dir: str = ""
    ext: str = ""
    base: str = ""
    lang: str | None = None
    content: str = ""
    root: str | None = None
    to_cwd: str | None = None
    size: int | None = None
    last_modified: int | None = None
    github_repo: GitHubRepoRef | None = None
    github_path: str | None = None
    github_size: int | None = None
    study_cache: dict[str, object] | None = field(default=None, compare=False, repr=False)

    @property
    def is_remote(self) -> bool:
        return self.github_repo is not None and self.github_path is not None


@dataclass
class DirectoryNode(_LocatedNode):
    """Virtual directory with ordered children (directories first, then files)."""

    name: str
    path: str
    dir: str = ""
    root: str | None = None
    to_cwd: str | None = None
    children: list["FileSystemNode"] = field(default_factory=list)

    def child(self, name: str) -> "FileSystemNode | None":
        """Return the direct child called ``name`` or ``None``."""
        for node in self.children:
            if node.name == name:
                return node
        return None


FileSystemNode = DirectoryNode | FileNode


def file_extension(filename: str) -> str:
    """Return ``.ext`` for the last dot-segment of ``filename`` or ``""``."""
    parts = filename.split(".")
    return f".{parts[-1]}" if len(parts) > 1 else ""


def file_base_name(filename: str) -> str:
    """Return ``filename`` without the extension reported by ``file_extension``."""
    parts = filename.split(".")
    return ".".join(parts[:-1]) if len(parts) > 1 else filename


__all__ = [
    "GitHubRepoRef",
    "FileNode",
    "DirectoryNode",
    "FileSystemNode",
    "file_extension",
    "file_base_name",
]
