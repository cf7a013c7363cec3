"""Explicit owner of the current virtual tree.

Every load builds a complete tree first and then swaps the reference, bumping
``generation``. Lazy content fetches remember the generation they started
under and are discarded if the tree was replaced meanwhile, so a detached
node from an old tree is never written into.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from .errors import RemoteFetchError, StaleTreeError
from .file_tree_model.build import build_from_uploads
from .file_tree_model.lookup import FileResolution, find_directory, find_node, resolve_requested_file
from .file_tree_model.snapshot import load_snapshot
from .file_tree_model.types import DirectoryNode, FileNode
from .github import GitHubClient, is_github_url, load_gist_tree, load_github_tree
from .lens_config.cascade import ancestor_chain
from .lens_config.resolver import (
    ConfigLayer,
    config_file_in,
    resolve_config,
    resolve_config_layers,
)

logger = logging.getLogger(__name__)


def is_gist_source(source: str) -> bool:
    return "gist.github.com" in source or source.startswith("gist:")


class StudySession:
    """Holds the single current tree plus per-session study state."""

    def __init__(self, client: GitHubClient | None = None, root: str = "/") -> None:
        self._client = client
        self.root = root
        self.tree: DirectoryNode | None = None
        self.generation = 0

    @property
    def client(self) -> GitHubClient:
        if self._client is None:
            self._client = GitHubClient()
        return self._client

    def replace_tree(self, tree: DirectoryNode) -> DirectoryNode:
        """Install ``tree`` as current, discarding the previous one wholesale."""
        self.tree = tree
        self.generation += 1
        return tree

    def load(self, source: str | Path) -> DirectoryNode:
        """Load a GitHub repository URL, a gist, or a snapshot file path."""
        text = str(source)
        if is_gist_source(text):
            return self.load_gist(text[len("gist:"):] if text.startswith("gist:") else text)
        if is_github_url(text):
            return self.replace_tree(load_github_tree(text, self.client, self.root))
        tree = load_snapshot(Path(text), self.root)
        logger.info("Loaded snapshot %s", text)
        return self.replace_tree(tree)

    def load_uploads(self, paths: Iterable[Path]) -> DirectoryNode:
        return self.replace_tree(build_from_uploads(paths, root=self.root))

    def load_gist(self, ref: str) -> DirectoryNode:
        return self.replace_tree(load_gist_tree(ref, self.client, self.root))

    def get_file(self, path: str) -> FileNode | None:
        return find_node(self.tree, path)

    def get_directory(self, path: str) -> DirectoryNode | None:
        return find_directory(self.tree, path)

    def open_file(self, path: str | None) -> FileResolution:
        """Resolve ``path`` against the current tree with fallbacks."""
        return resolve_requested_file(self.tree, path)

    def update_file(self, path: str, content: str) -> bool:
        """Replace a file's content in place; returns whether the file exists."""
        file = self.get_file(path)
        if file is None:
            return False
        file.content = content
        return True

    def owns(self, file: FileNode) -> bool:
        """Return whether ``file`` is the live node at its path in the current tree."""
        return find_node(self.tree, file.path) is file

    def load_file_content(self, file: FileNode) -> str:
        """Return ``file`` content, fetching it from GitHub on first access.

        Raises ``StaleTreeError`` when ``file`` does not belong to the current
        tree or the tree was replaced while the fetch was in flight. Fetch
        errors propagate and leave ``content`` empty.
        """
        if file.content or not file.is_remote:
            return file.content
        if not self.owns(file):
            raise StaleTreeError(f"{file.path} belongs to a tree that is no longer loaded")

        started_generation = self.generation
        assert file.github_repo is not None and file.github_path is not None
        repo = file.github_repo
        content = self.client.fetch_file_content(repo.owner, repo.repo, file.github_path, repo.branch)
        if self.generation != started_generation:
            logger.warning("Discarding content for %s: tree was replaced during fetch", file.path)
            raise StaleTreeError(f"tree was replaced while fetching {file.path}")

        file.content = content
        logger.info("Loaded %s: %d characters", file.path, len(content))
        return content

    def _ensure_config_layers_loaded(self, file_path: str) -> None:
        for directory_path in ancestor_chain(file_path):
            config_file = config_file_in(self.get_directory(directory_path))
            if config_file is None or config_file.content or not config_file.is_remote:
                continue
            try:
                self.load_file_content(config_file)
            except RemoteFetchError as exc:
                logger.warning("Skipping %s: %s", config_file.path, exc)

    def resolve_config(self, file_path: str) -> dict[str, object]:
        """Effective lens configuration for ``file_path`` in the current tree."""
        self._ensure_config_layers_loaded(file_path)
        return resolve_config(file_path, self.tree)

    def resolve_config_layers(self, file_path: str) -> list[ConfigLayer]:
        self._ensure_config_layers_loaded(file_path)
        return resolve_config_layers(file_path, self.tree)

    def cache_lens_preferences(self, path: str, lens_names: Iterable[str]) -> bool:
        """Remember which lenses were used for a file during this session."""
        file = self.get_file(path)
        if file is None:
            return False
        if file.study_cache is None:
            file.study_cache = {}
        file.study_cache["lenses"] = list(lens_names)
        file.study_cache["last_modified"] = datetime.now(timezone.utc).isoformat()
        return True

    def get_cached_lens_preferences(self, path: str) -> list[str] | None:
        file = self.get_file(path)
        if file is None or not file.study_cache:
            return None
        lenses = file.study_cache.get("lenses")
        return list(lenses) if isinstance(lenses, list) else None

    def has_cached_lenses(self, path: str) -> bool:
        return self.get_cached_lens_preferences(path) is not None

    def clear_cached_lenses(self, path: str) -> None:
        file = self.get_file(path)
        if file is None or file.study_cache is None:
            return
        file.study_cache.pop("lenses", None)
        file.study_cache.pop("last_modified", None)
        if not file.study_cache:
            file.study_cache = None


__all__ = ["StudySession", "is_gist_source"]
