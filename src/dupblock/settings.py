import os
import tomllib
from pathlib import Path


# Settings key constants
SETTING_PATTERNS = 'scan.patterns'
SETTING_MIN_LINES = 'scan.min_lines'
SETTING_IGNORE_INDENTATION = 'scan.ignore_indentation'
SETTING_LOG_PATH = 'logging.path'
SETTING_LOG_LEVEL = 'logging.level'
SETTING_REPORT_FORMAT = 'report.format'

CONFIG_ENVIRONMENT_VARIABLE = 'DUPBLOCK_CONFIG'
DEFAULT_CONFIG_NAME = 'dupblock.toml'


class ConfigurationError(ValueError):
    """Raised for invalid run configuration: bad patterns, bad limits or malformed settings.

    Configuration errors are fatal and are always raised before any file is scanned.
    """


class Settings:
    """Read-only access to scan settings stored in a TOML file.

    The class does not validate the schema; callers interpret the raw values. A settings
    object without a file behaves as an empty table, so every get() returns its default.

    Example:
        settings = Settings(Path('dupblock.toml'))
        min_lines = settings.get(SETTING_MIN_LINES, 5)
        patterns = settings.get(SETTING_PATTERNS, [])
    """

    def __init__(self, path: Path | None = None):
        """Load settings from path.

        Args:
            path: TOML file to load, or None for empty settings

        Raises:
            FileNotFoundError: The file does not exist
            ConfigurationError: The file is not valid TOML
        """
        self._path = path
        self._settings = {}

        if path is not None:
            with open(path, 'rb') as f:
                try:
                    self._settings = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigurationError(f"Malformed configuration file {path}: {e}") from e

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default=None):
        """Get a setting value by dotted key, e.g. 'scan.min_lines' reads settings['scan']['min_lines'].

        Returns default if the key path does not exist or an intermediate value is not a table.
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @classmethod
    def locate(cls, explicit_path: str | os.PathLike | None = None) -> 'Settings':
        """Find and load the settings file for a run.

        Uses explicit_path if given, then the DUPBLOCK_CONFIG environment variable, then
        dupblock.toml in the current directory if it exists. Falls back to empty settings.
        """
        if explicit_path is None:
            explicit_path = os.environ.get(CONFIG_ENVIRONMENT_VARIABLE) or None

        if explicit_path is not None:
            return cls(Path(explicit_path))

        default_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if default_path.is_file():
            return cls(default_path)

        return cls()
