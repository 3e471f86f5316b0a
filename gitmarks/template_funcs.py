"""Functions made available to the page templates."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from gitmarks.auth import OAuth2Config
from gitmarks.bookmarks import BookmarkColumn, preprocess_bookmarks
from gitmarks.core import SESSION_USER_KEY, login_from_session, token_from_session
from gitmarks.github_api import get_bookmarks, get_branches, get_commits, get_tags

_build = {"version": "dev", "commit": "none", "date": "unknown"}


def set_version(version: str, commit: str, date: str) -> None:
    """Record the build information shown on pages."""
    _build.update(version=version, commit=commit, date=date)


def version_string() -> str:
    return f"{_build['version']}, commit {_build['commit']}, built at {_build['date']}"


def firstline(s: str) -> str:
    return s.split("\n")[0]


def left(i: int, s: str) -> str:
    """Return at most the first ``i`` characters of ``s``."""
    if i < 0:
        raise ValueError(f"left: negative length {i}")
    return s[:i]


class TemplateFuncs:
    """Request-bound helpers used by the templates."""

    def __init__(
        self,
        session: Mapping,
        query: Mapping[str, str],
        form: Mapping[str, str],
        oauth2_config: OAuth2Config,
        client_factory: Callable[[str | None], Any],
    ) -> None:
        self.session = session
        self.query = query
        self.form = form
        self.oauth2_config = oauth2_config
        self.client_factory = client_factory

    def _client(self) -> Any:
        return self.client_factory(token_from_session(self.session))

    def _login(self) -> str:
        return login_from_session(self.session)

    def oauth2_url(self) -> str:
        return self.oauth2_config.auth_code_url("")

    def ref(self) -> str:
        return self.query.get("ref", "")

    def logged_in(self) -> bool:
        return isinstance(self.session.get(SESSION_USER_KEY), Mapping)

    def bookmarks(self) -> str:
        return get_bookmarks(self._client(), self._login(), self.ref())

    def bookmarks_or_edit_bookmarks(self) -> str:
        text = self.form.get("text", "")
        return text if text else self.bookmarks()

    def branch_or_edit_branch(self) -> str:
        """Pick the branch to edit: the posted one, else one derived from ``ref``."""
        branch = self.form.get("branch", "")
        if branch:
            return branch
        ref = self.ref()
        if ref.startswith("refs/heads/"):
            return ref.removeprefix("refs/heads/")
        if ref.startswith("refs/tags/"):
            return "New" + ref.removeprefix("refs/tags/")
        if ref:
            return "FromCommit" + ref
        return "main"

    def bookmark_columns(self) -> list[BookmarkColumn]:
        return preprocess_bookmarks(self.bookmarks())

    def tags(self) -> list:
        return get_tags(self._client(), self._login())

    def branches(self) -> list:
        return get_branches(self._client(), self._login())

    def commits(self) -> list:
        return get_commits(self._client(), self._login())

    def as_dict(self) -> dict[str, Callable[..., Any]]:
        """Return the helpers under the names the templates use."""
        return {
            "now": datetime.now,
            "version": version_string,
            "firstline": firstline,
            "left": left,
            "OAuth2URL": self.oauth2_url,
            "ref": self.ref,
            "loggedIn": self.logged_in,
            "bookmarks": self.bookmarks,
            "bookmarksOrEditBookmarks": self.bookmarks_or_edit_bookmarks,
            "branchOrEditBranch": self.branch_or_edit_branch,
            "bookmarkColumns": self.bookmark_columns,
            "tags": self.tags,
            "branches": self.branches,
            "commits": self.commits,
        }