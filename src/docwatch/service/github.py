"""GitHub REST API access for commits, documentation content and pull requests."""

import base64
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import requests

from docwatch.constants import (
    DEFAULT_GITHUB_API_URL,
    GITHUB_REQUEST_TIMEOUT,
    PULL_REQUEST_TITLE_PREFIX,
)

logger = logging.getLogger(__name__)

DOC_EXTENSIONS = (".md", ".mdx")


@dataclass
class FileChange:
    """One file touched by a commit."""

    filename: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    patch: str | None = None


@dataclass
class Commit:
    """A commit with the files it changed."""

    sha: str
    message: str = ""
    url: str = ""
    files: list[FileChange] = field(default_factory=list)


@dataclass
class DocFile:
    """A documentation page fetched from the docs repository."""

    path: str
    name: str
    content: str
    sha: str


@dataclass
class FileUpdate:
    """New content for one documentation page."""

    path: str
    content: str
    message: str | None = None


def _parse_commit(data: dict[str, Any]) -> Commit:
    files = [
        FileChange(
            filename=item.get("filename", ""),
            status=item.get("status", "modified"),
            additions=item.get("additions", 0),
            deletions=item.get("deletions", 0),
            patch=item.get("patch"),
        )
        for item in data.get("files") or []
    ]
    return Commit(
        sha=data.get("sha", ""),
        message=(data.get("commit") or {}).get("message", ""),
        url=data.get("html_url", ""),
        files=files,
    )


class GitHubClient:
    """Thin wrapper over the GitHub REST endpoints the agent needs."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_GITHUB_API_URL,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", GITHUB_REQUEST_TIMEOUT)
        response = self.session.request(method, f"{self.api_url}{path}", **kwargs)
        response.raise_for_status()
        return response

    # ------------------------------------------------------------------
    # Source repository
    # ------------------------------------------------------------------

    def get_commit(self, owner: str, repo: str, ref: str) -> Commit:
        """Fetch one commit with its changed files and patches."""
        data = self._request("GET", f"/repos/{owner}/{repo}/commits/{ref}").json()
        return _parse_commit(data)

    def get_latest_commit_sha(self, owner: str, repo: str, branch: str | None = None) -> str | None:
        """SHA of the newest commit on ``branch`` (default branch if None)."""
        params: dict[str, Any] = {"per_page": 1}
        if branch:
            params["sha"] = branch
        commits = self._request("GET", f"/repos/{owner}/{repo}/commits", params=params).json()
        return commits[0]["sha"] if commits else None

    def list_pull_request_files(self, owner: str, repo: str, number: int) -> list[str]:
        """Paths of every file changed by a pull request."""
        paths: list[str] = []
        page = 1
        while True:
            batch = self._request(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{number}/files",
                params={"per_page": 100, "page": page},
            ).json()
            paths.extend(item["filename"] for item in batch)
            if len(batch) < 100:
                return paths
            page += 1

    # ------------------------------------------------------------------
    # Documentation repository
    # ------------------------------------------------------------------

    def get_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> tuple[str, str]:
        """Return (decoded text, blob sha) for one file."""
        params = {"ref": ref} if ref else None
        data = self._request("GET", f"/repos/{owner}/{repo}/contents/{path}", params=params).json()
        content = base64.b64decode(data.get("content", "")).decode("utf-8")
        return content, data["sha"]

    def get_docs_content(self, owner: str, repo: str, path: str = "") -> list[DocFile]:
        """Recursively fetch every Markdown/MDX page under ``path``.

        Errors are logged and yield an empty list so the agent can still run
        without documentation context.
        """
        try:
            listing = self._request("GET", f"/repos/{owner}/{repo}/contents/{path}").json()
        except requests.RequestException as e:
            logger.error(f"❌ Error fetching docs content at '{path}': {e}")
            return []

        if not isinstance(listing, list):
            return []

        docs: list[DocFile] = []
        for item in listing:
            if item.get("type") == "dir":
                docs.extend(self.get_docs_content(owner, repo, item["path"]))
            elif item.get("type") == "file" and item["name"].endswith(DOC_EXTENSIONS):
                try:
                    content, sha = self.get_file(owner, repo, item["path"])
                except requests.RequestException as e:
                    logger.warning(f"⚠️ Could not fetch {item['path']}: {e}")
                    continue
                docs.append(DocFile(path=item["path"], name=item["name"], content=content, sha=sha))
        return docs

    def get_default_branch(self, owner: str, repo: str) -> str:
        return self._request("GET", f"/repos/{owner}/{repo}").json()["default_branch"]

    def get_branch_sha(self, owner: str, repo: str, branch: str) -> str:
        data = self._request("GET", f"/repos/{owner}/{repo}/git/ref/heads/{branch}").json()
        return data["object"]["sha"]

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self._request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )

    def get_file_sha(self, owner: str, repo: str, path: str, ref: str) -> str | None:
        """Blob sha of ``path`` on ``ref``, or None if the file does not exist yet."""
        try:
            _, sha = self.get_file(owner, repo, path, ref=ref)
            return sha
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            raise

    def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        """Create or update a file on ``branch``."""
        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            payload["sha"] = sha
        self._request("PUT", f"/repos/{owner}/{repo}/contents/{path}", json=payload)

    def create_pull_request(
        self, owner: str, repo: str, title: str, body: str, head: str, base: str
    ) -> dict[str, Any]:
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "body": body, "head": head, "base": base},
        ).json()

    def open_pull_request(
        self, owner: str, repo: str, files: list[FileUpdate], title: str, body: str
    ) -> str:
        """Commit ``files`` to a fresh branch and open a pull request against the default branch.

        Returns:
            str: The pull request's HTML URL
        """
        base = self.get_default_branch(owner, repo)
        base_sha = self.get_branch_sha(owner, repo, base)
        branch = f"docs-update-{int(time.time() * 1000)}"
        self.create_branch(owner, repo, branch, base_sha)
        logger.info(f"🌿 Created branch {branch} from {base}")

        for update in files:
            existing_sha = self.get_file_sha(owner, repo, update.path, ref=branch)
            verb = "Update" if existing_sha else "Create"
            self.put_file(
                owner,
                repo,
                update.path,
                update.content,
                update.message or f"{verb} {update.path}",
                branch,
                sha=existing_sha,
            )

        pull = self.create_pull_request(
            owner, repo, f"{PULL_REQUEST_TITLE_PREFIX}{title}", body, head=branch, base=base
        )
        logger.info(f"✅ Pull request created: {pull.get('html_url')}")
        return pull.get("html_url", "")


class CommitSource:
    """Remembers the last processed commit so polling only reports new ones."""

    def __init__(self, client: GitHubClient, owner: str, repo: str, branch: str | None = None) -> None:
        self.client = client
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.last_checked_sha: str | None = None

    def poll(self) -> Commit | None:
        """Return the newest commit if it has not been seen before, else None."""
        sha = self.client.get_latest_commit_sha(self.owner, self.repo, self.branch)
        if sha is None or sha == self.last_checked_sha:
            return None
        self.last_checked_sha = sha
        return self.client.get_commit(self.owner, self.repo, sha)


def generate_directory_tree(items: list[DocFile], root: str = "") -> str:
    """Render documentation paths as an indented tree.

    Args:
        items: Documentation files (only their paths are used)
        root: Path prefix to strip before rendering

    Returns:
        str: Tree using "├── " / "└── " connectors, directories suffixed with "/"
    """
    tree: dict[str, Any] = {}
    prefix = f"{root.rstrip('/')}/" if root else ""

    for item in items:
        path = item.path[len(prefix):] if prefix and item.path.startswith(prefix) else item.path
        parts = [part for part in path.split("/") if part]
        if not parts:
            continue
        level = tree
        for part in parts[:-1]:
            level = level.setdefault(part, {})
        level.setdefault(parts[-1], None)

    return _render_tree(tree)


def _render_tree(tree: dict[str, Any], indent: str = "") -> str:
    lines = []
    entries = list(tree.items())
    for index, (name, children) in enumerate(entries):
        is_last = index == len(entries) - 1
        connector = "└── " if is_last else "├── "
        is_dir = children is not None
        lines.append(f"{indent}{connector}{name}{'/' if is_dir else ''}\n")
        if is_dir and children:
            lines.append(_render_tree(children, indent + ("    " if is_last else "│   ")))
    return "".join(lines)
