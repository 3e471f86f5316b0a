"""OAuth2 login against GitHub and the session changes for login and logout."""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode

import requests

from gitmarks.core import SESSION_TOKEN_KEY, SESSION_USER_KEY, CoreData
from gitmarks.github_api import GitHubError

GITHUB_AUTH_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"


class AuthError(Exception):
    """Login could not be completed."""


@dataclass
class OAuth2Config:
    """Client settings for the OAuth2 authorization-code flow."""

    client_id: str
    client_secret: str
    redirect_url: str = ""
    scopes: tuple[str, ...] = ()
    auth_url: str = GITHUB_AUTH_URL
    token_url: str = GITHUB_TOKEN_URL
    timeout: float = field(default=30.0)

    def auth_code_url(self, state: str = "") -> str:
        """Return the URL that sends the user to the provider's consent page."""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "state": state,
        }
        if self.redirect_url:
            params["redirect_uri"] = self.redirect_url
        if self.scopes:
            params["scope"] = " ".join(self.scopes)
        query = urlencode(sorted(params.items()))
        separator = "&" if "?" in self.auth_url else "?"
        return f"{self.auth_url}{separator}{query}"

    def exchange(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        if self.redirect_url:
            data["redirect_uri"] = self.redirect_url
        try:
            resp = requests.post(
                self.token_url,
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthError(f"exchange error: {exc}") from exc
        if not resp.ok:
            raise AuthError(f"exchange error: {resp.status_code} {resp.text}")
        try:
            payload: dict[str, Any] = resp.json()
        except ValueError:
            payload = dict(parse_qsl(resp.text))
        access_token = payload.get("access_token")
        if not access_token:
            reason = (
                payload.get("error_description")
                or payload.get("error")
                or "server response missing access_token"
            )
            raise AuthError(f"exchange error: {reason}")
        return access_token


def user_logout_action(session: MutableMapping, core_data: CoreData) -> None:
    """Forget the logged-in user and token."""
    session.pop(SESSION_USER_KEY, None)
    session.pop(SESSION_TOKEN_KEY, None)
    core_data.user_ref = ""


def oauth2_callback(
    session: MutableMapping,
    code: str,
    config: OAuth2Config,
    client_factory: Callable[[str | None], Any],
) -> dict:
    """Finish the login: exchange ``code``, look up the user and store both in the session."""
    access_token = config.exchange(code)
    client = client_factory(access_token)
    try:
        user = client.get_user()
    except GitHubError as exc:
        raise AuthError(f"client.Users.Get error: {exc}") from exc
    session[SESSION_USER_KEY] = user
    session[SESSION_TOKEN_KEY] = access_token
    return user