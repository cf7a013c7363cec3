"""GitHub repository and gist loading over the REST API.

Repository trees are listed once; file content is fetched lazily, one file
at a time, when a view first needs it.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

import requests

from .errors import FileTooLargeError, InvalidSourceURL, RemoteFetchError
from .file_tree_model.build import FlatEntry, build_from_flat_list, build_from_gist
from .file_tree_model.types import DirectoryNode, GitHubRepoRef

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_BRANCH = "main"
DEFAULT_TIMEOUT_SECONDS = 15.0
FETCH_SIZE_CEILING_BYTES = 1024 * 1024

_GITHUB_URL_RE = re.compile(r"github\.com/([\w.-]+)/([\w.-]+)(?:/(?:tree|blob)/([\w.-]+)(?:/(.*))?)?")
_GIST_ID_RE = re.compile(r"^[\w-]+$")
_WHITESPACE_RE = re.compile(r"\s")


@dataclass(frozen=True)
class RepoInfo:
    """Repository coordinates parsed from a browser URL."""

    owner: str
    repo: str
    branch: str = DEFAULT_BRANCH
    path: str = ""

    @property
    def api_url(self) -> str:
        return f"{GITHUB_API_URL}/repos/{self.owner}/{self.repo}"

    def to_ref(self) -> GitHubRepoRef:
        return GitHubRepoRef(owner=self.owner, repo=self.repo, branch=self.branch)


@dataclass(frozen=True)
class RepoTree:
    """Flat blob listing plus the API's truncation flag."""

    entries: list[FlatEntry]
    truncated: bool = False


def _is_gist_url(url: str) -> bool:
    return "gist.github.com" in url


def is_github_url(url: str) -> bool:
    """Return whether ``url`` looks like a repository (not gist) URL."""
    return not _is_gist_url(url) and _GITHUB_URL_RE.search(url) is not None


def parse_github_url(url: str) -> RepoInfo:
    """Parse ``github.com/OWNER/REPO[/(tree|blob)/BRANCH[/PATH]]``.

    Raises ``InvalidSourceURL`` when ``url`` does not have that shape.
    """
    match = None if _is_gist_url(url) else _GITHUB_URL_RE.search(url)
    if match is None:
        raise InvalidSourceURL(f"Invalid GitHub URL format: {url!r}")
    owner, repo, branch, path = match.groups()
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidSourceURL(f"Invalid GitHub URL format: {url!r}")
    return RepoInfo(
        owner=owner,
        repo=repo,
        branch=branch or DEFAULT_BRANCH,
        path=(path or "").strip("/"),
    )


def parse_gist_ref(ref: str) -> str:
    """Return the gist id from a gist URL or a bare id."""
    stripped = ref.strip()
    if _is_gist_url(stripped):
        parts = [part for part in stripped.split("?")[0].split("#")[0].split("/") if part]
        stripped = parts[-1] if parts else ""
    if not stripped or _GIST_ID_RE.match(stripped) is None:
        raise InvalidSourceURL(f"Invalid gist reference: {ref!r}")
    return stripped


class GitHubClient:
    """Thin JSON client for the GitHub endpoints the loaders need."""

    def __init__(
        self,
        session: requests.Session | None = None,
        token: str | None = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _get_json(self, url: str, params: dict[str, str] | None = None, not_found: str | None = None) -> object:
        try:
            response = self.session.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteFetchError(f"GitHub request failed: {exc}") from exc

        if response.status_code == 404 and not_found is not None:
            raise RemoteFetchError(not_found, status_code=404)
        if not response.ok:
            raise RemoteFetchError(
                f"GitHub API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFetchError(f"GitHub API returned invalid JSON for {url}") from exc

    def fetch_repo_tree(self, owner: str, repo: str, branch: str = DEFAULT_BRANCH) -> RepoTree:
        """List every entry of ``branch`` recursively."""
        data = self._get_json(
            f"{self.api_url}/repos/{owner}/{repo}/git/trees/{quote(branch, safe='')}",
            params={"recursive": "1"},
        )
        if not isinstance(data, dict) or not isinstance(data.get("tree"), list):
            raise RemoteFetchError(f"Unexpected tree payload for {owner}/{repo}@{branch}")

        entries: list[FlatEntry] = []
        for item in data["tree"]:
            if not isinstance(item, dict) or not isinstance(item.get("path"), str):
                continue
            size = item.get("size")
            entries.append(
                FlatEntry(
                    path=item["path"],
                    size=size if isinstance(size, int) else 0,
                    type=str(item.get("type", "blob")),
                )
            )

        truncated = bool(data.get("truncated"))
        if truncated:
            logger.warning("Repository tree for %s/%s was truncated; some files may be missing", owner, repo)
        return RepoTree(entries=entries, truncated=truncated)

    def fetch_file_content(self, owner: str, repo: str, path: str, branch: str = DEFAULT_BRANCH) -> str:
        """Fetch and base64-decode one file, enforcing the per-file ceiling."""
        data = self._get_json(
            f"{self.api_url}/repos/{owner}/{repo}/contents/{quote(path)}",
            params={"ref": branch},
            not_found=f"File not found: {path}",
        )
        if not isinstance(data, dict) or data.get("type") != "file":
            raise RemoteFetchError(f"Path is not a file: {path}")

        size = data.get("size")
        if isinstance(size, int) and size > FETCH_SIZE_CEILING_BYTES:
            raise FileTooLargeError(path, size)

        encoded = data.get("content")
        if not isinstance(encoded, str):
            raise RemoteFetchError(f"No content returned for {path}")
        try:
            raw = base64.b64decode(_WHITESPACE_RE.sub("", encoded), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise RemoteFetchError(f"Cannot decode content of {path}: {exc}") from exc
        if len(raw) > FETCH_SIZE_CEILING_BYTES:
            raise FileTooLargeError(path, len(raw))
        return raw.decode("utf-8", errors="replace")

    def fetch_gist(self, gist_id: str) -> dict[str, dict[str, object]]:
        """Return the ``files`` mapping of a gist."""
        data = self._get_json(f"{self.api_url}/gists/{gist_id}", not_found=f"Gist not found: {gist_id}")
        files = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, dict):
            raise RemoteFetchError(f"Unexpected gist payload for {gist_id}")
        return {
            name: payload
            for name, payload in files.items()
            if isinstance(name, str) and isinstance(payload, dict)
        }


def load_github_tree(url: str, client: GitHubClient, root: str = "/") -> DirectoryNode:
    """Parse ``url``, list the repository, and build its virtual tree."""
    info = parse_github_url(url)
    repo_tree = client.fetch_repo_tree(info.owner, info.repo, info.branch)
    tree = build_from_flat_list(repo_tree.entries, info.path, repo=info.to_ref(), root=root)
    logger.info("Loaded %s/%s@%s (%d entries listed)", info.owner, info.repo, info.branch, len(repo_tree.entries))
    return tree


def load_gist_tree(ref: str, client: GitHubClient, root: str = "/") -> DirectoryNode:
    """Fetch a gist by URL or id and build its flat virtual tree."""
    gist_id = parse_gist_ref(ref)
    files = client.fetch_gist(gist_id)
    logger.info("Loaded gist %s (%d files)", gist_id, len(files))
    return build_from_gist(gist_id, files, root=root)


__all__ = [
    "GITHUB_API_URL",
    "DEFAULT_BRANCH",
    "FETCH_SIZE_CEILING_BYTES",
    "RepoInfo",
    "RepoTree",
    "is_github_url",
    "parse_github_url",
    "parse_gist_ref",
    "GitHubClient",
    "load_github_tree",
    "load_gist_tree",
]
