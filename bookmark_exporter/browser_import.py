"""
Browser bookmark extraction for the bookmark exporter.

This module reads bookmarks from Firefox (places.sqlite) and Google Chrome
(the Bookmarks JSON file) and flattens both into ordered BookmarkRecord lists.
BrowserExportManager runs the requested browsers in a fixed order and joins
their rendered output.
"""

import json
import sqlite3
import logging
import shutil
import tempfile
from contextlib import closing
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union

from bookmark_exporter.config import ExporterConfig
from bookmark_exporter.errors import (
    ExporterError, ParseError, QueryError, StoreOpenError,
)
from bookmark_exporter.exporters import format_bookmarks
from bookmark_exporter.models import (
    BookmarkRecord, FolderNode, LeafNode, TreeNode, parse_children,
)
from bookmark_exporter.profiles import ProfileLocator

logger = logging.getLogger(__name__)

FIREFOX = "firefox"
CHROME = "chrome"

# Relational output always precedes tree output
TARGETS = (FIREFOX, CHROME)

# Chrome root folders, in emission order
CHROME_ROOTS = ("bookmark_bar", "other", "synced")

FIREFOX_BOOKMARKS_QUERY = """
    SELECT
        b.title,
        p.url
    FROM moz_bookmarks b
    JOIN moz_places p ON b.fk = p.id
    WHERE p.url IS NOT NULL AND p.url <> ''
        AND b.title IS NOT NULL AND b.title <> ''
"""

SQLITE_PROBE = "SELECT count(*) FROM sqlite_master"


class BrowserImporter:
    """Base class for browser bookmark readers."""

    browser = ""

    def locate(self, locator: ProfileLocator) -> Path:
        """Find the bookmark store for this browser."""
        raise NotImplementedError

    def iter_bookmarks(self, path: Union[str, Path]) -> Iterator[BookmarkRecord]:
        """Yield bookmarks from the store at path."""
        raise NotImplementedError

    def read_bookmarks(self, path: Union[str, Path]) -> List[BookmarkRecord]:
        """Read all bookmarks from the store at path."""
        records = list(self.iter_bookmarks(path))
        logger.debug(f"Read {len(records)} {self.browser} bookmarks from {path}")
        return records

    def _copy_database(self, db_path: Path) -> Path:
        """
        Create a temporary copy of a database file.
        A running browser may hold a lock on its database.
        """
        temp_dir = Path(tempfile.mkdtemp(prefix="bookmark-exporter-"))
        temp_path = temp_dir / db_path.name
        try:
            shutil.copy2(db_path, temp_path)
            # Pending writes live in the write-ahead log
            for suffix in ("-wal", "-shm"):
                sidecar = db_path.with_name(db_path.name + suffix)
                if sidecar.exists():
                    shutil.copy2(sidecar, temp_dir / sidecar.name)
        except OSError as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise StoreOpenError(db_path, f"cannot copy database: {e}") from e
        logger.debug(f"Copied {db_path} to {temp_path}")
        return temp_path


class FirefoxImporter(BrowserImporter):
    """Read bookmarks from a Firefox places.sqlite database."""

    browser = FIREFOX

    def __init__(self, snapshot: bool = False):
        self.snapshot = snapshot

    def locate(self, locator: ProfileLocator) -> Path:
        return locator.firefox_places()

    def _connect(self, db_path: Path, store_path: Path) -> sqlite3.Connection:
        """Open db_path read-only and check that it is a SQLite database."""
        uri = f"{db_path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise StoreOpenError(store_path, str(e)) from e

        try:
            conn.execute(SQLITE_PROBE).fetchone()
        except sqlite3.DatabaseError as e:
            conn.close()
            raise StoreOpenError(store_path, str(e)) from e
        return conn

    def iter_bookmarks(self, path: Union[str, Path]) -> Iterator[BookmarkRecord]:
        """
        Yield one record per bookmark row with a non-empty title and URL.

        Rows come back in the database's natural order. Each call runs the
        query again on a fresh connection, which is closed when the iterator
        is exhausted, closed, or fails.

        Raises:
            StoreOpenError: If the file is missing or not a SQLite database
            QueryError: If the bookmark tables or columns are missing
        """
        places_db = Path(path)
        if not places_db.is_file():
            raise StoreOpenError(places_db, "file not found")

        temp_db = None
        try:
            db_path = places_db
            if self.snapshot:
                temp_db = self._copy_database(places_db)
                db_path = temp_db

            with closing(self._connect(db_path, places_db)) as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(FIREFOX_BOOKMARKS_QUERY)
                    for title, url in cursor:
                        yield BookmarkRecord(title=title, url=url)
                except sqlite3.DatabaseError as e:
                    raise QueryError(places_db, FIREFOX_BOOKMARKS_QUERY, str(e)) from e
        finally:
            if temp_db is not None:
                shutil.rmtree(temp_db.parent, ignore_errors=True)


class ChromeImporter(BrowserImporter):
    """Read bookmarks from a Chrome Bookmarks JSON file."""

    browser = CHROME

    def locate(self, locator: ProfileLocator) -> Path:
        return locator.chrome_bookmarks()

    def read_document(self, path: Union[str, Path]) -> str:
        """Return the text of the Bookmarks file."""
        bookmarks_file = Path(path)
        try:
            with open(bookmarks_file, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError as e:
            raise StoreOpenError(bookmarks_file, "file not found") from e
        except UnicodeDecodeError as e:
            raise ParseError(f"not valid UTF-8: {e}", bookmarks_file) from e
        except OSError as e:
            raise StoreOpenError(bookmarks_file, e.strerror or str(e)) from e

    def iter_bookmarks(self, path: Union[str, Path]) -> Iterator[BookmarkRecord]:
        """
        Yield bookmarks in tree order.

        Raises:
            StoreOpenError: If the file cannot be read
            ParseError: If the document or one of its entries is malformed
        """
        text = self.read_document(path)
        try:
            records = flatten_bookmarks(text)
        except ParseError as e:
            raise ParseError(e.message, path) from e
        yield from records


def load_roots(text: str) -> List[Tuple[str, List[TreeNode]]]:
    """
    Parse a Chrome bookmarks document into its root folders.

    Returns:
        (root name, children) pairs in CHROME_ROOTS order; roots that are
        absent or not objects are skipped
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"malformed JSON: {e}") from e
    except RecursionError as e:
        raise ParseError("bookmark tree nested too deeply") from e

    if not isinstance(data, dict):
        raise ParseError("bookmarks document must be a JSON object")
    roots = data.get('roots')
    if not isinstance(roots, dict):
        raise ParseError("bookmarks document has no 'roots' object")

    folders = []
    for root_name in CHROME_ROOTS:
        root_data = roots.get(root_name)
        if not isinstance(root_data, dict):
            logger.debug(f"Chrome root '{root_name}' is absent, treating it as empty")
            continue
        children = root_data.get('children')
        folders.append((root_name, parse_children(children) if children is not None else []))
    return folders


def flatten_tree(nodes: Iterable[TreeNode],
                 entries: Optional[List[LeafNode]] = None) -> List[LeafNode]:
    """
    Flatten nodes into their leaves, depth first.

    A folder's descendants are emitted in document order before the folder's
    next sibling. Leaves of every type are kept.
    """
    if entries is None:
        entries = []
    stack = [iter(nodes)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
        elif isinstance(node, FolderNode):
            stack.append(iter(node.children))
        else:
            entries.append(node)
    return entries


def flatten_bookmarks(text: str) -> List[BookmarkRecord]:
    """
    Flatten a Chrome bookmarks document into records.

    Roots are visited bookmarks bar first, then other bookmarks, then synced
    bookmarks. Only leaves of type "url" produce a record.

    Raises:
        ParseError: On malformed JSON or a "url" entry without a name or URL
    """
    entries: List[LeafNode] = []
    for root_name, children in load_roots(text):
        flatten_tree(children, entries)
    records = [leaf.to_record() for leaf in entries if leaf.is_url]
    logger.debug(f"Flattened {len(entries)} entries into {len(records)} bookmarks")
    return records


def resolve_targets(targets: Iterable[str]) -> List[str]:
    """Validate target names and return them in export order without duplicates."""
    requested = set()
    for target in targets:
        name = target.strip().lower()
        if name not in TARGETS:
            raise ValueError(
                f"Unknown browser: {target} (expected one of {', '.join(TARGETS)})"
            )
        requested.add(name)
    return [t for t in TARGETS if t in requested]


class BrowserExportManager:
    """Run bookmark extraction for the requested browsers and join the output."""

    def __init__(self, config: Optional[ExporterConfig] = None,
                 locator: Optional[ProfileLocator] = None):
        self.config = config or ExporterConfig()
        self._locator = locator
        self.importers = {
            FIREFOX: FirefoxImporter(snapshot=self.config.snapshot_database),
            CHROME: ChromeImporter(),
        }
        self.failures: List[Tuple[str, ExporterError]] = []

    @property
    def locator(self) -> ProfileLocator:
        # HOME is only needed when a store has to be located
        if self._locator is None:
            self._locator = ProfileLocator.from_environ()
        return self._locator

    def store_path(self, target: str) -> Path:
        """Configured path for target, or the located default."""
        override = {
            FIREFOX: self.config.firefox_places,
            CHROME: self.config.chrome_bookmarks,
        }[target]
        if override:
            return Path(override)
        return self.importers[target].locate(self.locator)

    def read_target(self, target: str) -> List[BookmarkRecord]:
        """Locate and read the bookmarks of one browser."""
        path = self.store_path(target)
        logger.info(f"Reading {target} bookmarks from {path}")
        return self.importers[target].read_bookmarks(path)

    def export(self, targets: Optional[Iterable[str]] = None) -> str:
        """
        Export bookmarks for targets, Firefox first.

        Args:
            targets: Browser names; defaults to config.default_targets

        Returns:
            The concatenated rendered output

        Raises:
            ExporterError: The first extraction failure, unless
                config.continue_on_error is set
        """
        if not targets:
            targets = self.config.default_targets
        self.failures = []

        parts = []
        for target in resolve_targets(targets):
            try:
                records = self.read_target(target)
            except ExporterError as e:
                if not self.config.continue_on_error:
                    raise
                logger.debug(f"Skipping {target}: {e}")
                self.failures.append((target, e))
                continue
            parts.append(format_bookmarks(records, self.config.output_format))
        return "".join(parts)


def export_bookmarks(targets: Optional[Iterable[str]] = None,
                     output_format: str = "plain",
                     home: Optional[Union[str, Path]] = None,
                     **options: Any) -> str:
    """
    Export bookmarks from one or more browsers as text.

    Args:
        targets: Browser names ("firefox", "chrome"); both when empty
        output_format: "plain" or "link"
        home: Home directory; read from HOME when not given
        **options: Other ExporterConfig fields

    Returns:
        The rendered bookmarks
    """
    config = ExporterConfig(output_format=output_format, **options)
    locator = ProfileLocator(home) if home is not None else None
    return BrowserExportManager(config, locator).export(targets)
