"""Bookmarks kept in a private GitHub repository, with OAuth2 sign-in, a favicon proxy and page helpers."""

__version__ = "0.1.0"