"""Parsing of the plain-text bookmarks format into columns and categories."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BookmarkEntry:
    """A single link with its display name."""

    url: str
    name: str


@dataclass
class BookmarkCategory:
    """A named group of bookmark entries."""

    name: str
    entries: list[BookmarkEntry] = field(default_factory=list)


@dataclass
class BookmarkColumn:
    """A column of categories on the bookmarks page."""

    categories: list[BookmarkCategory] = field(default_factory=list)


def preprocess_bookmarks(bookmarks: str) -> list[BookmarkColumn]:
    """Parse bookmarks text into a list of columns.

    Lines reading ``Column`` start a new column, lines starting with
    ``Category:`` start a new category, and any other non-blank line inside
    a category is a URL optionally followed by a display name.
    """
    columns = [BookmarkColumn()]
    current: BookmarkCategory | None = None

    for raw_line in bookmarks.split("\n"):
        line = raw_line.strip()
        if line.lower() == "column":
            if current is not None:
                columns[-1].categories.append(current)
                current = None
            columns.append(BookmarkColumn())
            continue

        parts = line.split()
        if not parts:
            continue

        if parts[0].lower() == "category:":
            name = " ".join(parts[1:])
            if current is None:
                current = BookmarkCategory(name)
            elif current.name:
                columns[-1].categories.append(current)
                current = BookmarkCategory(name)
            else:
                current.name = name
        elif current is not None:
            url = parts[0]
            name = " ".join(parts[1:]) if len(parts) > 1 else url
            current.entries.append(BookmarkEntry(url=url, name=name))

    if current is not None and current.name:
        columns[-1].categories.append(current)

    return columns