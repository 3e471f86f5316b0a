import base64
import json

import pytest
import responses

from gitmarks.actions import (
    ActionError,
    AutoRefreshPage,
    bookmarks_edit_create_action,
    bookmarks_edit_save_action,
    task_done_auto_refresh,
    url_without_query,
)
from gitmarks.core import CoreData
from gitmarks.github_api import REPO_NAME, GitHubClient

API = "https://api.example.com"
OWNER = "someone"
REPO_URL = f"{API}/repos/{OWNER}/{REPO_NAME}"
SESSION = {"GithubUser": {"login": OWNER}, "Token": "token"}


@pytest.fixture
def api():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def factory(access_token):
    return GitHubClient(access_token, base_url=API)


def put_bodies(api):
    return [
        json.loads(call.request.body)
        for call in api.calls
        if call.request.method == "PUT"
    ]


def test_save_action_updates_file(api):
    api.add(responses.GET, REPO_URL, json={"default_branch": "main"})
    api.add(responses.GET, f"{REPO_URL}/git/ref/heads/dev", json={"object": {"sha": "s1"}})
    api.add(
        responses.GET,
        f"{REPO_URL}/contents/bookmarks.txt",
        json={"content": base64.b64encode(b"old").decode(), "sha": "filesha"},
    )
    api.add(responses.PUT, f"{REPO_URL}/contents/bookmarks.txt", json={})

    result = bookmarks_edit_save_action(SESSION, {"text": "new text", "branch": "dev"}, factory)
    assert result is None

    bodies = put_bodies(api)
    assert len(bodies) == 1
    assert base64.b64decode(bodies[0]["content"]) == b"new text"
    assert bodies[0]["branch"] == "dev"
    assert bodies[0]["sha"] == "filesha"
    assert api.calls[0].request.headers["Authorization"] == "Bearer token"


def test_save_action_error_is_wrapped(api):
    api.add(responses.GET, REPO_URL, status=500, json={"message": "boom"})
    with pytest.raises(ActionError, match="updateBookmark error"):
        bookmarks_edit_save_action(SESSION, {"text": "x"}, factory)


def test_create_action_uses_default_branch(api):
    api.add(responses.GET, REPO_URL, json={"default_branch": "trunk"})
    api.add(responses.PUT, f"{REPO_URL}/contents/bookmarks.txt", json={})

    result = bookmarks_edit_create_action(SESSION, {"text": "Category: A"}, factory)
    assert result is None

    bodies = put_bodies(api)
    assert len(bodies) == 1
    assert bodies[0]["branch"] == "trunk"
    assert base64.b64decode(bodies[0]["content"]) == b"Category: A"


def test_create_action_error_is_wrapped(api):
    api.add(responses.PUT, f"{REPO_URL}/contents/bookmarks.txt", status=422, json={})
    with pytest.raises(ActionError):
        bookmarks_edit_create_action(SESSION, {"text": "x", "branch": "main"}, factory)


def test_task_done_without_error_refreshes():
    core = CoreData()
    page = task_done_auto_refresh(core, {})
    assert page == AutoRefreshPage(core_data=core, error="")
    assert core.auto_refresh is True


def test_task_done_with_error_does_not_refresh():
    core = CoreData(auto_refresh=True)
    page = task_done_auto_refresh(core, {"error": "it broke"})
    assert page.error == "it broke"
    assert core.auto_refresh is False


def test_url_without_query():
    assert url_without_query("http://example.com/edit?ref=abc&x=1") == "http://example.com/edit"
    assert url_without_query("/path") == "/path"