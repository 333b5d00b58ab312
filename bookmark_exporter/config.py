"""
Configuration management for the bookmark exporter.

Provides a hierarchical configuration system with sensible defaults.
Supports both a user (~/.config/bookmark-exporter/config.toml) and a local
(bookmark-exporter.toml) configuration file.
"""
import os
import tomli
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field


ENV_PREFIX = "BOOKMARK_EXPORTER_"
NO_COLOR_VARIABLE = "NO_CLI_COLOR"

LOCAL_CONFIG_NAMES = ("bookmark-exporter.toml", ".bookmark-exporter.toml")


def _user_config_path() -> Path:
    return Path.home() / ".config" / "bookmark-exporter" / "config.toml"


@dataclass
class ExporterConfig:
    """
    Exporter configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (BOOKMARK_EXPORTER_*, NO_CLI_COLOR)
    3. Local config file (./bookmark-exporter.toml or ./.bookmark-exporter.toml)
    4. User config file (~/.config/bookmark-exporter/config.toml)
    5. System defaults
    """

    # Export settings
    output_format: str = field(default="plain")  # plain, link
    default_targets: List[str] = field(default_factory=lambda: ["firefox", "chrome"])
    continue_on_error: bool = field(default=False)

    # Bookmark stores (override profile lookup when set)
    firefox_places: Optional[str] = field(default=None)
    chrome_bookmarks: Optional[str] = field(default=None)
    snapshot_database: bool = field(default=False)  # Read a temporary copy of places.sqlite

    # Display settings
    color_output: bool = field(default=True)
    log_level: str = field(default="WARNING")

    @classmethod
    def load(cls, config_file: Optional[Path] = None,
             environ: Optional[Dict[str, str]] = None) -> "ExporterConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (applied after the search)
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = _user_config_path()
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        for name in LOCAL_CONFIG_NAMES:
            path = Path.cwd() / name
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file:
            config._merge(cls._load_toml(Path(config_file)))

        config._apply_env_vars(os.environ if environ is None else environ)
        config._expand_paths()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def _apply_env_vars(self, environ: Dict[str, str]):
        """Apply environment variables with the BOOKMARK_EXPORTER_ prefix."""
        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            config_key = key[len(ENV_PREFIX):].lower()
            if not hasattr(self, config_key):
                continue
            current_value = getattr(self, config_key)
            if isinstance(current_value, bool):
                setattr(self, config_key, value.lower() in ("true", "1", "yes"))
            elif isinstance(current_value, list):
                setattr(self, config_key, [v.strip() for v in value.split(",") if v.strip()])
            else:
                setattr(self, config_key, value)

        # Shared switch understood by other CLI tools
        if environ.get(NO_COLOR_VARIABLE):
            self.color_output = False

    def _expand_paths(self):
        """Expand ~ and environment variables in paths."""
        for field_name in ("firefox_places", "chrome_bookmarks"):
            value = getattr(self, field_name)
            if isinstance(value, str):
                expanded = os.path.expanduser(os.path.expandvars(value))
                setattr(self, field_name, expanded)


# Global configuration instance
_config: Optional[ExporterConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> ExporterConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = ExporterConfig.load(config_file)
    return _config


def init_config(config_file: Optional[Path] = None, **kwargs) -> ExporterConfig:
    """
    Initialize configuration with command-line overrides.

    Args:
        config_file: Config file given on the command line
        **kwargs: Other configuration overrides; None values are ignored

    Returns:
        Configured instance
    """
    config = get_config(reload=True, config_file=config_file)

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
