import json
import sqlite3
from pathlib import Path

import pytest


FIREFOX_PROFILES = Path("Library/Application Support/Firefox/Profiles")
CHROME_DEFAULT = Path("Library/Application Support/Google/Chrome/Default")


def create_places_db(path, bookmarks):
    """
    Create a minimal places.sqlite.

    Args:
        path: Database file to create
        bookmarks: (title, url) pairs; a url of None makes a folder row
    """
    conn = sqlite3.connect(path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE moz_places (
            id INTEGER PRIMARY KEY,
            url TEXT,
            title TEXT
        )
    """)
    cursor.execute("""
        CREATE TABLE moz_bookmarks (
            id INTEGER PRIMARY KEY,
            type INTEGER,
            fk INTEGER,
            parent INTEGER,
            title TEXT
        )
    """)

    for title, url in bookmarks:
        if url is None:
            cursor.execute(
                "INSERT INTO moz_bookmarks (type, fk, parent, title) VALUES (2, NULL, 1, ?)",
                (title,)
            )
            continue
        cursor.execute("INSERT INTO moz_places (url, title) VALUES (?, ?)", (url, title))
        cursor.execute(
            "INSERT INTO moz_bookmarks (type, fk, parent, title) VALUES (1, ?, 1, ?)",
            (cursor.lastrowid, title)
        )

    conn.commit()
    conn.close()
    return Path(path)


def url_node(name, url):
    return {"type": "url", "name": name, "url": url}


def folder_node(name, children):
    return {"type": "folder", "name": name, "children": children}


@pytest.fixture
def make_places_db():
    """Factory for places.sqlite files."""
    return create_places_db


@pytest.fixture
def home_dir(tmp_path):
    """An empty home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def places_db(tmp_path):
    """A places.sqlite with one valid bookmark, two untitled ones and a folder."""
    return create_places_db(tmp_path / "places.sqlite", [
        ("Example", "https://example.com"),
        ("", "https://skip.example"),
        (None, "https://untitled.example"),
        ("Toolbar", None),
    ])


@pytest.fixture
def chrome_document():
    """A Chrome bookmarks document with nested folders in two roots."""
    return {
        "checksum": "0",
        "roots": {
            "bookmark_bar": {
                "type": "folder",
                "name": "Bookmarks bar",
                "children": [
                    folder_node("Work", [
                        url_node("GitHub", "https://github.com"),
                        folder_node("Docs", [url_node("Python", "https://docs.python.org")]),
                    ]),
                    url_node("Example", "https://example.com"),
                ],
            },
            "other": {
                "type": "folder",
                "name": "Other bookmarks",
                "children": [url_node("Mozilla", "https://mozilla.org")],
            },
        },
        "version": 1,
    }


@pytest.fixture
def firefox_home(home_dir):
    """Home directory with a Firefox default-release profile."""
    profile = home_dir / FIREFOX_PROFILES / "abcd1234.default-release"
    profile.mkdir(parents=True)
    create_places_db(profile / "places.sqlite", [("Example", "https://example.com")])
    return home_dir


@pytest.fixture
def chrome_home(home_dir, chrome_document):
    """Home directory with a Chrome Default profile."""
    profile = home_dir / CHROME_DEFAULT
    profile.mkdir(parents=True)
    (profile / "Bookmarks").write_text(json.dumps(chrome_document), encoding="utf-8")
    return home_dir
