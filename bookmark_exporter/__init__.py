"""
Bookmark Exporter

Extract bookmarks from Firefox and Google Chrome profiles and export them as
plain text or markdown-style links.

Example Usage:
    >>> from bookmark_exporter import export_bookmarks
    >>> print(export_bookmarks(["chrome"], output_format="link"))
    [Example](https://example.com)
"""

__version__ = "0.1.0"

# Configuration
from bookmark_exporter.config import ExporterConfig, get_config, init_config

# Errors
from bookmark_exporter.errors import (
    ExporterError,
    MissingEnvironmentError,
    OutputError,
    ParseError,
    ProfileNotFoundError,
    QueryError,
    StoreOpenError,
)

# Models
from bookmark_exporter.models import BookmarkRecord, FolderNode, LeafNode

# Extraction and export
from bookmark_exporter.profiles import ProfileLocator
from bookmark_exporter.browser_import import (
    BrowserExportManager,
    ChromeImporter,
    FirefoxImporter,
    export_bookmarks,
    flatten_bookmarks,
)
from bookmark_exporter.exporters import OutputFormat, export_file, format_bookmarks

__all__ = [
    # Config
    "ExporterConfig",
    "get_config",
    "init_config",
    # Errors
    "ExporterError",
    "MissingEnvironmentError",
    "OutputError",
    "ParseError",
    "ProfileNotFoundError",
    "QueryError",
    "StoreOpenError",
    # Models
    "BookmarkRecord",
    "FolderNode",
    "LeafNode",
    # Extraction and export
    "ProfileLocator",
    "BrowserExportManager",
    "ChromeImporter",
    "FirefoxImporter",
    "export_bookmarks",
    "flatten_bookmarks",
    "OutputFormat",
    "export_file",
    "format_bookmarks",
]
