"""GitHub REST access for storing bookmarks in a private repository."""

from __future__ import annotations

import base64
import binascii
import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import requests

DEFAULT_API_URL = "https://api.github.com"
BOOKMARKS_FILE = "bookmarks.txt"
README_FILE = "readme.md"
README_TEXT = "# Your bookmarks \n\nCreated automatically by the bookmarks web app. "
COMMIT_AUTHOR = {"name": "Gitmarks", "email": "gitmarks@example.com"}


class GitHubError(Exception):
    """A failed GitHub API call; ``status_code`` is None for transport errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def get_bookmarks_repo_name(environ: Mapping[str, str] | None = None) -> str:
    """Return the bookmarks repository name, suffixed by GBM_NAMESPACE if set."""
    env = os.environ if environ is None else environ
    namespace = env.get("GBM_NAMESPACE", "")
    if namespace:
        return f"MyBookmarks-{namespace}"
    return "MyBookmarks"


REPO_NAME = get_bookmarks_repo_name()


def _encode(content: str | bytes) -> str:
    data = content.encode("utf-8") if isinstance(content, str) else content
    return base64.b64encode(data).decode("ascii")


class GitHubClient:
    """A small GitHub REST client authenticated with an OAuth access token."""

    def __init__(
        self,
        token: str | None,
        base_url: str = DEFAULT_API_URL,
        http: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http or requests.Session()
        self._headers = {"Accept": "application/vnd.github+json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        url = self.base_url + quote(path, safe="/")
        try:
            resp = self._http.request(
                method, url, params=params, json=body, headers=self._headers, timeout=30
            )
        except requests.RequestException as exc:
            raise GitHubError(f"{method} {path}: {exc}") from exc
        if not resp.ok:
            try:
                detail = resp.json().get("message", resp.text)
            except ValueError:
                detail = resp.text
            raise GitHubError(
                f"{method} {path}: {resp.status_code} {detail}", resp.status_code
            )
        if not resp.content:
            return None
        return resp.json()

    def get_user(self) -> dict:
        return self._request("GET", "/user")

    def get_repository(self, owner: str, repo: str) -> dict:
        return self._request("GET", f"/repos/{owner}/{repo}")

    def create_repository(self, name: str, description: str, private: bool) -> dict:
        return self._request(
            "POST",
            "/user/repos",
            body={"name": name, "description": description, "private": private},
        )

    def get_contents(self, owner: str, repo: str, path: str, ref: str = "") -> Any:
        params = {"ref": ref} if ref else None
        return self._request("GET", f"/repos/{owner}/{repo}/contents/{path}", params=params)

    def _put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content: str | bytes,
        branch: str | None,
        author: Mapping[str, str] | None,
        sha: str | None = None,
    ) -> dict:
        body: dict[str, Any] = {"message": message, "content": _encode(content)}
        if branch:
            body["branch"] = branch
        if sha:
            body["sha"] = sha
        if author:
            body["author"] = dict(author)
            body["committer"] = dict(author)
        return self._request("PUT", f"/repos/{owner}/{repo}/contents/{path}", body=body)

    def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content: str | bytes,
        branch: str | None = None,
        author: Mapping[str, str] | None = None,
    ) -> dict:
        return self._put_file(owner, repo, path, message, content, branch, author)

    def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content: str | bytes,
        branch: str | None,
        sha: str,
        author: Mapping[str, str] | None = None,
    ) -> dict:
        return self._put_file(owner, repo, path, message, content, branch, author, sha)

    def get_ref(self, owner: str, repo: str, ref: str) -> dict:
        ref = ref.removeprefix("refs/")
        return self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")

    def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> dict:
        if not ref.startswith("refs/"):
            ref = "refs/" + ref
        return self._request(
            "POST", f"/repos/{owner}/{repo}/git/refs", body={"ref": ref, "sha": sha}
        )

    def list_tags(self, owner: str, repo: str) -> list:
        return self._request("GET", f"/repos/{owner}/{repo}/tags") or []

    def list_branches(self, owner: str, repo: str) -> list:
        return self._request("GET", f"/repos/{owner}/{repo}/branches") or []

    def list_commits(self, owner: str, repo: str) -> list:
        return self._request("GET", f"/repos/{owner}/{repo}/commits") or []


def get_default_branch(client: GitHubClient, github_user: str) -> tuple[str, bool]:
    """Return the repository's default branch and whether the repository was just created."""
    created = False
    try:
        repo = client.get_repository(github_user, REPO_NAME)
    except GitHubError as exc:
        if not exc.not_found:
            raise
        repo = create_repo(client, github_user)
        created = True
    branch = (repo or {}).get("default_branch") or "main"
    return branch, created


def create_repo(client: GitHubClient, github_user: str) -> dict:
    """Create the private bookmarks repository with a readme."""
    repo = client.create_repository(REPO_NAME, "Personal bookmarks", True)
    client.create_file(
        github_user,
        REPO_NAME,
        README_FILE,
        "Auto create from web",
        README_TEXT,
        author=COMMIT_AUTHOR,
    )
    return repo


def create_ref(
    client: GitHubClient, github_user: str, source_ref: str, branch_ref: str
) -> None:
    """Create ``branch_ref`` pointing at the commit ``source_ref`` points at."""
    try:
        source = client.get_ref(github_user, REPO_NAME, source_ref)
    except GitHubError as exc:
        if exc.not_found:
            raise GitHubError(f"source ref {source_ref!r} not found", 404) from exc
        raise
    sha = (source or {}).get("object", {}).get("sha")
    if not sha:
        raise GitHubError(f"source ref {source_ref!r} has no object")
    client.create_ref(github_user, REPO_NAME, branch_ref, sha)


def create_bookmarks(client: GitHubClient, github_user: str, branch: str, text: str) -> None:
    """Create the bookmarks file on ``branch`` (the default branch when empty)."""
    if not branch:
        branch, _ = get_default_branch(client, github_user)
    client.create_file(
        github_user,
        REPO_NAME,
        BOOKMARKS_FILE,
        "Auto create from web",
        text,
        branch=branch,
        author=COMMIT_AUTHOR,
    )


def update_bookmarks(
    client: GitHubClient, github_user: str, source_ref: str, branch: str, text: str
) -> None:
    """Save ``text`` as the bookmarks file, creating repository, branch or file as needed."""
    default_branch, created = get_default_branch(client, github_user)
    if not branch:
        branch = default_branch
    branch_ref = "refs/heads/" + branch
    if not source_ref:
        source_ref = branch_ref
    if created:
        create_bookmarks(client, github_user, branch, text)
        return

    try:
        client.get_ref(github_user, REPO_NAME, branch_ref)
    except GitHubError as exc:
        if not exc.not_found:
            raise
        create_ref(client, github_user, source_ref, branch_ref)

    try:
        contents = client.get_contents(github_user, REPO_NAME, BOOKMARKS_FILE, branch_ref)
    except GitHubError as exc:
        if not exc.not_found:
            raise
        create_repo(client, github_user)
        create_bookmarks(client, github_user, branch, text)
        return

    if not isinstance(contents, dict) or contents.get("content") is None:
        return
    client.update_file(
        github_user,
        REPO_NAME,
        BOOKMARKS_FILE,
        "Auto change from web",
        text,
        branch,
        contents.get("sha"),
        author=COMMIT_AUTHOR,
    )


def get_bookmarks(client: GitHubClient, github_user: str, ref: str) -> str:
    """Return the bookmarks text at ``ref``, or '' when there is none."""
    try:
        contents = client.get_contents(github_user, REPO_NAME, BOOKMARKS_FILE, ref)
    except GitHubError as exc:
        if exc.not_found:
            return ""
        raise
    if not isinstance(contents, dict) or contents.get("content") is None:
        return ""
    try:
        data = base64.b64decode(contents["content"])
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"bookmarks content is not valid base64: {exc}") from exc
    return data.decode("utf-8", errors="replace")


def get_tags(client: GitHubClient, github_user: str) -> list:
    return client.list_tags(github_user, REPO_NAME)


def get_branches(client: GitHubClient, github_user: str) -> list:
    return client.list_branches(github_user, REPO_NAME)


def get_commits(client: GitHubClient, github_user: str) -> list:
    return client.list_commits(github_user, REPO_NAME)