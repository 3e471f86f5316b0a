from gitmarks.core import (
    Configuration,
    CoreData,
    core_data_for_session,
    login_from_session,
    token_from_session,
)


def test_configuration_set_get():
    config = Configuration()
    config.set("colour", "blue")
    assert config.get("colour") == "blue"


def test_configuration_missing_key_is_empty():
    assert Configuration().get("absent") == ""


def test_configuration_read(tmp_path):
    path = tmp_path / "settings.conf"
    path.write_text("a=b\nc=d=e\nnoeq\nk=v\r\n", encoding="utf-8")
    config = Configuration()
    config.read(path)
    assert config.get("a") == "b"
    assert config.get("c") == "d=e"
    assert config.get("noeq") == ""
    assert config.get("k") == "v"


def test_configuration_read_missing_file_keeps_data(tmp_path):
    config = Configuration()
    config.set("x", "y")
    config.read(tmp_path / "missing.conf")
    assert config.get("x") == "y"


def test_login_from_session():
    assert login_from_session({"GithubUser": {"login": "alice"}}) == "alice"
    assert login_from_session({}) == ""
    assert login_from_session({"GithubUser": {"login": None}}) == ""


def test_token_from_session():
    assert token_from_session({"Token": "token"}) == "token"
    assert token_from_session({}) is None


def test_core_data_for_session():
    data = core_data_for_session({"GithubUser": {"login": "alice"}})
    assert data == CoreData(
        title="Arran4's Bookmarks Website", auto_refresh=False, user_ref="alice"
    )


def test_core_data_for_anonymous_session():
    assert core_data_for_session({}).user_ref == ""