"""
Configuration — Settings for rendering dumps

Config hierarchy (highest to lowest priority):
  1. Environment variables (DUMPWALK_INDENT, DUMPWALK_TIMEZONE, DUMPWALK_LOG_LEVEL)
  2. Project config (.dumpwalk/config.yaml)
  3. User config (~/.dumpwalk/config.yaml)
  4. Defaults

Only TreeRenderer.from_config() and the CLI read configuration;
dump_walk() itself always uses its arguments.
"""

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .core.classifier import REFERENCE_ZONE
from .core.nodes import DEFAULT_INDENT
from .core.walker import MAX_DEPTH
from .logging import LEVELS


logger = logging.getLogger(__name__)


def _coerce_indent(value: Any) -> str:
    """Integer indents mean that many spaces."""
    if value is None:
        return DEFAULT_INDENT
    if isinstance(value, int) and not isinstance(value, bool):
        return " " * value
    if isinstance(value, str) and value.isdigit():
        return " " * int(value)
    return str(value)


@dataclass
class DisplayConfig:
    """Dump rendering preferences."""
    indent: str = DEFAULT_INDENT
    timezone: str = REFERENCE_ZONE  # Zone datetimes are displayed in
    max_depth: int = MAX_DEPTH

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.indent:
            return "Indent must not be empty"
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, TypeError, ValueError):
            return f"Unknown timezone '{self.timezone}'"
        if self.max_depth < 1:
            return f"max_depth must be at least 1, got {self.max_depth}"
        return None


@dataclass
class LoggingConfig:
    """Logging preferences."""
    level: str = "WARNING"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.level.upper() not in LEVELS:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(LEVELS)}"
        return None

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.level.upper(), logging.WARNING)


@dataclass
class Config:
    """Application configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "display": {
                "indent": self.display.indent,
                "timezone": self.display.timezone,
                "max_depth": self.display.max_depth,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """
        Create from dictionary.

        Missing or empty sections use defaults.

        Raises:
            ValueError: If max_depth is not an integer
        """
        display_data = data.get("display") or {}
        logging_data = data.get("logging") or {}
        if not isinstance(display_data, dict):
            display_data = {}
        if not isinstance(logging_data, dict):
            logging_data = {}

        return cls(
            display=DisplayConfig(
                indent=_coerce_indent(display_data.get("indent", DEFAULT_INDENT)),
                timezone=str(display_data.get("timezone", REFERENCE_ZONE)),
                max_depth=int(display_data.get("max_depth", MAX_DEPTH)),
            ),
            logging=LoggingConfig(
                level=str(logging_data.get("level", "WARNING")),
            ),
        )

    def validate(self) -> Optional[str]:
        return self.display.validate() or self.logging.validate()


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.dumpwalk/config.yaml)
      3. User config (~/.dumpwalk/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".dumpwalk"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".dumpwalk"
    PROJECT_CONFIG_FILE = "config.yaml"

    # Environment variable -> (section, setting)
    ENV_OVERRIDES = {
        "DUMPWALK_INDENT": ("display", "indent"),
        "DUMPWALK_TIMEZONE": ("display", "timezone"),
        "DUMPWALK_LOG_LEVEL": ("logging", "level"),
    }

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def _read(self, path: Path) -> Dict[str, Any]:
        """Read one YAML layer; malformed files are logged and ignored."""
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            return {}
        return data

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}
        config_data = self._merge(config_data, self._read(self.user_config_path))
        config_data = self._merge(config_data, self._read(self.project_config_path))

        for env_key, (section, setting) in self.ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                if not isinstance(config_data.get(section), dict):
                    config_data[section] = {}
                config_data[section][setting] = os.environ[env_key]

        self._config = self._validated(config_data)
        return self._config

    def _validated(self, config_data: Dict[str, Any]) -> Config:
        """Build a Config; invalid sections are logged and reset to defaults."""
        try:
            config = Config.from_dict(config_data)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid configuration: %s", e)
            return Config()

        error = config.display.validate()
        if error:
            logger.warning("Ignoring invalid display config: %s", error)
            config.display = DisplayConfig()
        error = config.logging.validate()
        if error:
            logger.warning("Ignoring invalid logging config: %s", error)
            config.logging = LoggingConfig()
        return config

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "display.indent")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        # Edit a copy so a rejected value never reaches the cached config
        config = copy.deepcopy(self.load())

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.indent')"

        section, setting = parts

        if section == "display":
            if setting == "indent":
                config.display.indent = _coerce_indent(value)
            elif setting == "timezone":
                config.display.timezone = value
            elif setting == "max_depth":
                try:
                    config.display.max_depth = int(value)
                except ValueError:
                    return f"max_depth must be an integer, got '{value}'"
            else:
                return f"Unknown display setting: {setting}. Valid: indent, timezone, max_depth"
            error = config.display.validate()
            if error:
                return error

        elif section == "logging":
            if setting == "level":
                config.logging.level = value.upper()
            else:
                return f"Unknown logging setting: {setting}. Valid: level"
            error = config.logging.validate()
            if error:
                return error
        else:
            return f"Unknown section: {section}. Valid: display, logging"

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        values = config.to_dict().get(section, {})
        if setting not in values:
            return None
        return str(values[setting])

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()

        lines = [
            "Configuration:",
            "",
            "Display:",
            f"  Indent: {config.display.indent!r}",
            f"  Timezone: {config.display.timezone}",
            f"  Max depth: {config.display.max_depth}",
            "",
            "Logging:",
            f"  Level: {config.logging.level}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
