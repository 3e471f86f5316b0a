"""Per-request core data, session helpers and a simple key=value configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

SESSION_USER_KEY = "GithubUser"
SESSION_TOKEN_KEY = "Token"
SITE_TITLE = "Arran4's Bookmarks Website"


@dataclass
class CoreData:
    """Values shared by every rendered page."""

    title: str = ""
    auto_refresh: bool = False
    user_ref: str = ""


class Configuration:
    """A flat string-to-string settings store read from ``key=value`` lines."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def get(self, key: str) -> str:
        """Return the value for ``key``, or an empty string when unset."""
        return self._data.get(key, "")

    def read(self, filename: str | Path) -> None:
        """Load settings from a file; a file that cannot be opened is ignored."""
        try:
            handle = open(filename, encoding="utf-8", newline="")
        except OSError:
            return
        with handle:
            for line in handle:
                line = line.rstrip("\n")
                if line.endswith("\r"):
                    line = line[:-1]
                key, sep, value = line.partition("=")
                if sep:
                    self.set(key, value)


def login_from_session(session: Mapping) -> str:
    """Return the logged-in GitHub login stored in the session, or ''."""
    user = session.get(SESSION_USER_KEY)
    if isinstance(user, Mapping):
        login = user.get("login")
        if isinstance(login, str):
            return login
    return ""


def token_from_session(session: Mapping) -> str | None:
    """Return the OAuth access token stored in the session, if any."""
    token = session.get(SESSION_TOKEN_KEY)
    return token if isinstance(token, str) else None


def core_data_for_session(session: Mapping) -> CoreData:
    """Build the page core data for the user in ``session``."""
    return CoreData(title=SITE_TITLE, user_ref=login_from_session(session))