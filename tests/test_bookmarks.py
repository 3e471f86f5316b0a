from gitmarks.bookmarks import (
    BookmarkCategory,
    BookmarkColumn,
    BookmarkEntry,
    preprocess_bookmarks,
)


def test_single_column_two_categories():
    text = (
        "Category: Search\nhttp://www.google.com.au Google\nCategory: Wikies\n"
        "http://en.wikipedia.org/wiki/Main_Page Wikipedia\n"
        "http://mathworld.wolfram.com/ Math World\n"
        "http://gentoo-wiki.com/Main_Page Gentoo-wiki\n"
    )
    want = [
        BookmarkColumn(
            categories=[
                BookmarkCategory(
                    name="Search",
                    entries=[BookmarkEntry(url="http://www.google.com.au", name="Google")],
                ),
                BookmarkCategory(
                    name="Wikies",
                    entries=[
                        BookmarkEntry(
                            url="http://en.wikipedia.org/wiki/Main_Page", name="Wikipedia"
                        ),
                        BookmarkEntry(url="http://mathworld.wolfram.com/", name="Math World"),
                        BookmarkEntry(
                            url="http://gentoo-wiki.com/Main_Page", name="Gentoo-wiki"
                        ),
                    ],
                ),
            ]
        )
    ]
    assert preprocess_bookmarks(text) == want


def test_two_columns():
    text = (
        "Category: Search\nhttp://www.google.com.au Google\nColumn\nCategory: Wikies\n"
        "http://en.wikipedia.org/wiki/Main_Page Wikipedia\n"
    )
    want = [
        BookmarkColumn(
            categories=[
                BookmarkCategory(
                    name="Search",
                    entries=[BookmarkEntry(url="http://www.google.com.au", name="Google")],
                )
            ]
        ),
        BookmarkColumn(
            categories=[
                BookmarkCategory(
                    name="Wikies",
                    entries=[
                        BookmarkEntry(
                            url="http://en.wikipedia.org/wiki/Main_Page", name="Wikipedia"
                        )
                    ],
                )
            ]
        ),
    ]
    assert preprocess_bookmarks(text) == want


def test_empty_input_gives_one_empty_column():
    assert preprocess_bookmarks("") == [BookmarkColumn()]


def test_entry_without_name_uses_url():
    result = preprocess_bookmarks("Category: A\nhttp://a.example.com\n")
    assert result[0].categories[0].entries == [
        BookmarkEntry(url="http://a.example.com", name="http://a.example.com")
    ]


def test_entries_before_category_are_ignored():
    result = preprocess_bookmarks("http://a.example.com A\nCategory: B\nhttp://b.example.com B\n")
    assert len(result) == 1
    assert [c.name for c in result[0].categories] == ["B"]
    assert [e.url for e in result[0].categories[0].entries] == ["http://b.example.com"]


def test_keywords_are_case_insensitive_and_trimmed():
    result = preprocess_bookmarks("  CATEGORY:  X  \nhttp://x.example.com  Ex  Site \n  cOlUmN  \n")
    assert len(result) == 2
    assert result[0].categories == [
        BookmarkCategory(
            name="X", entries=[BookmarkEntry(url="http://x.example.com", name="Ex Site")]
        )
    ]
    assert result[1].categories == []


def test_unnamed_category_takes_next_name():
    result = preprocess_bookmarks("Category:\nhttp://a.example.com A\nCategory: Named\n")
    assert result == [
        BookmarkColumn(
            categories=[
                BookmarkCategory(
                    name="Named", entries=[BookmarkEntry(url="http://a.example.com", name="A")]
                )
            ]
        )
    ]


def test_trailing_unnamed_category_is_dropped():
    result = preprocess_bookmarks("Category:\nhttp://a.example.com A\n")
    assert result == [BookmarkColumn()]