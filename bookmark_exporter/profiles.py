"""
Location of browser bookmark stores under a user's home directory.

Firefox keeps bookmarks in a randomly named profile directory, so its store
is found by pattern matching. Chrome keeps them at a fixed path.
"""
import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional, Union

from bookmark_exporter.errors import MissingEnvironmentError, ProfileNotFoundError

logger = logging.getLogger(__name__)

HOME_VARIABLE = "HOME"

APPLICATION_SUPPORT = Path("Library/Application Support")
FIREFOX_PROFILES = APPLICATION_SUPPORT / "Firefox" / "Profiles"
FIREFOX_PROFILE_PATTERN = "*.default-release"
FIREFOX_PLACES = "places.sqlite"
CHROME_BOOKMARKS = APPLICATION_SUPPORT / "Google" / "Chrome" / "Default" / "Bookmarks"


class ProfileLocator:
    """Resolve bookmark store paths relative to a home directory."""

    def __init__(self, home: Union[str, Path]):
        self.home = Path(home)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ProfileLocator":
        """
        Build a locator from the HOME variable.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Raises:
            MissingEnvironmentError: If HOME is unset or empty
        """
        if environ is None:
            environ = os.environ
        home = environ.get(HOME_VARIABLE)
        if not home:
            raise MissingEnvironmentError(HOME_VARIABLE)
        return cls(home)

    @property
    def firefox_profile_pattern(self) -> Path:
        return self.home / FIREFOX_PROFILES / FIREFOX_PROFILE_PATTERN

    def find_firefox_profiles(self) -> List[Path]:
        """Return matching Firefox profile directories in lexicographic order."""
        profiles_dir = self.home / FIREFOX_PROFILES
        if not profiles_dir.is_dir():
            return []
        return sorted(p for p in profiles_dir.glob(FIREFOX_PROFILE_PATTERN) if p.is_dir())

    def firefox_places(self) -> Path:
        """
        Path to places.sqlite in the first default-release profile.

        Raises:
            ProfileNotFoundError: If no profile directory matches
        """
        profiles = self.find_firefox_profiles()
        if not profiles:
            raise ProfileNotFoundError(self.firefox_profile_pattern)
        if len(profiles) > 1:
            logger.debug(f"{len(profiles)} Firefox profiles match, using {profiles[0].name}")
        places = profiles[0] / FIREFOX_PLACES
        logger.debug(f"Firefox bookmarks database: {places}")
        return places

    def chrome_bookmarks(self) -> Path:
        """Path to the Chrome Bookmarks file. Existence is checked when it is opened."""
        path = self.home / CHROME_BOOKMARKS
        logger.debug(f"Chrome bookmarks file: {path}")
        return path
