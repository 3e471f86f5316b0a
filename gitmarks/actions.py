"""Form actions for saving bookmarks and the task-done auto-refresh page."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from gitmarks.core import CoreData, login_from_session, token_from_session
from gitmarks.github_api import GitHubError, create_bookmarks, update_bookmarks


class ActionError(Exception):
    """A form action failed."""


@dataclass
class AutoRefreshPage:
    """Data for the page shown once a task has finished."""

    core_data: CoreData
    error: str = ""


def bookmarks_edit_save_action(
    session: Mapping, form: Mapping[str, str], client_factory: Callable[[str | None], Any]
) -> None:
    """Save the submitted bookmarks text to the submitted branch."""
    client = client_factory(token_from_session(session))
    try:
        update_bookmarks(
            client,
            login_from_session(session),
            form.get("ref", ""),
            form.get("branch", ""),
            form.get("text", ""),
        )
    except GitHubError as exc:
        raise ActionError(f"updateBookmark error: {exc}") from exc


def bookmarks_edit_create_action(
    session: Mapping, form: Mapping[str, str], client_factory: Callable[[str | None], Any]
) -> None:
    """Create the bookmarks file from the submitted text."""
    client = client_factory(token_from_session(session))
    try:
        create_bookmarks(
            client,
            login_from_session(session),
            form.get("branch", ""),
            form.get("text", ""),
        )
    except GitHubError as exc:
        raise ActionError(f"createBookmark error: {exc}") from exc


def task_done_auto_refresh(core_data: CoreData, query: Mapping[str, str]) -> AutoRefreshPage:
    """Build the task-done page; it refreshes itself only when there was no error."""
    error = query.get("error", "")
    core_data.auto_refresh = error == ""
    return AutoRefreshPage(core_data=core_data, error=error)


def url_without_query(url: str) -> str:
    """Return ``url`` with its query string removed."""
    return urlsplit(url)._replace(query="").geturl()