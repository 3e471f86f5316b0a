# gitmarks

gitmarks keeps your bookmarks as a plain text file, `bookmarks.txt`, in a
private GitHub repository of your own. It provides the pieces a web
application needs to show and edit them: parsing, GitHub storage, OAuth2
sign-in, form actions, a favicon proxy and helpers for page templates.

## The bookmarks format

```
Category: Search
http://www.google.com.au Google
Category: Wikies
http://en.wikipedia.org/wiki/Main_Page Wikipedia
Column
Category: Tools
http://mathworld.wolfram.com/ Math World
```

- `Category: <name>` starts a new category (the word `Category:` is matched
  without regard to case).
- Each other non-blank line inside a category is a URL and an optional display
  name. Without a name, the URL is used as the name. Lines before the first
  category are ignored.
- A line holding just `Column` (any case) starts a new column.

```python
from gitmarks.bookmarks import preprocess_bookmarks

columns = preprocess_bookmarks(text)
for column in columns:
    for category in column.categories:
        print(category.name, [(entry.url, entry.name) for entry in category.entries])
```

`preprocess_bookmarks` returns a list of `BookmarkColumn`, each holding
`BookmarkCategory` objects, each holding `BookmarkEntry` objects.

## Storing bookmarks on GitHub

`gitmarks.github_api` works with a repository named `MyBookmarks`. If the
`GBM_NAMESPACE` environment variable is set, the name becomes
`MyBookmarks-<namespace>` (see `get_bookmarks_repo_name`). The repository is
created private, with a readme, the first time it is needed.

```python
from gitmarks.github_api import GitHubClient, get_bookmarks, update_bookmarks

client = GitHubClient(token="token")
text = get_bookmarks(client, "octocat", "")
update_bookmarks(client, "octocat", "", "main", text + "\nhttp://example.com Example\n")
```

- `get_bookmarks(client, user, ref)` returns the file's text at `ref`, or an
  empty string when there is no such file.
- `update_bookmarks(client, user, source_ref, branch, text)` saves the text,
  creating the repository, the branch (from `source_ref`) or the file as needed.
  An empty branch means the repository's default branch.
- `create_bookmarks(client, user, branch, text)` creates the file.
- `get_tags`, `get_branches` and `get_commits` list the repository's history.

Failures from the GitHub API raise `GitHubError`, whose `status_code` holds the
HTTP status (or `None` for connection errors).

## Sessions

The helpers take the session as a plain mapping. A signed-in session holds the
GitHub user (a mapping with at least `login`) under `"GithubUser"` and the
access token string under `"Token"`. `gitmarks.core` has
`login_from_session`, `token_from_session` and `core_data_for_session`, which
builds the `CoreData` (title, auto-refresh flag, user) shared by every page.

`gitmarks.core.Configuration` is a small string store that `read()` fills from
a file of `key=value` lines; a file that cannot be opened is ignored.

## Signing in

`gitmarks.auth.OAuth2Config` builds the GitHub authorisation URL
(`auth_code_url`) and trades the returned code for an access token
(`exchange`). `oauth2_callback(session, code, config, client_factory)` does
both, looks up the user, and stores the user and token in the session.
`user_logout_action(session, core_data)` removes them. Failures raise
`AuthError`.

`client_factory` is any callable that takes a token and returns a client, such
as `GitHubClient`.

## Form actions

`gitmarks.actions` has `bookmarks_edit_save_action` and
`bookmarks_edit_create_action`, which take the session, the submitted form
(`text`, `branch`, and for saving `ref`) and a client factory, and raise
`ActionError` on failure. `task_done_auto_refresh(core_data, query)` builds an
`AutoRefreshPage` that refreshes itself only when the query has no `error`.
`url_without_query` strips a URL's query string.

## Favicons

`gitmarks.favicon.proxy_favicon(url, cache=None)` finds a site's icon from the
`<link>` tags on its front page, falling back to `/favicon.ico`, and returns a
`FavIcon` with the bytes and content type (`image/x-icon` when the page names
none). It refuses icons over 1 MiB. Results are kept in a `FaviconCache`,
which drops arbitrary entries once it holds more than its limit (1000 by
default). Failures raise `FaviconError`, whose `status_code` is 400 for a
missing URL and 500 otherwise.

## Page helpers

`gitmarks.template_funcs.TemplateFuncs` gives the values a page template needs:
the login URL, whether the user is signed in, the bookmark text and columns, the
branch being edited, and the tags, branches and commits. `as_dict()` returns
them as a mapping of names to callables, ready to hand to a template engine.
`set_version` records the build information that `version_string` reports.

## What this package does not do

gitmarks has no web server, routes, page templates or stylesheets, and no
command to run. It does not keep sessions itself: your application supplies a
session mapping, serves the HTTP requests and renders the pages using the
functions above.

## Running the tests

```
pip install -e ".[test]"
pytest
```