"""
Configuration Loader - Load and merge configuration from multiple sources.

Configuration precedence (low → high):
1. ~/.dialectic/config.json (global defaults)
2. .dialectic/config.json (project config)
3. Environment variables (DIALECTIC_*)
4. Runtime overrides
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ..logger import get_logger


@dataclass
class DialecticConfig:
    """Parsed dialectic configuration.

    Attributes:
        server_name: MCP server name advertised to clients
        render_thoughts: Print a box rendering of each accepted thought to stderr
        render_width: Maximum border width of the rendering
        log_enabled: Enable the structured logger
        log_level: Logging level
        log_directory: Directory for log files (temp dir when unset)
        log_console: Echo log entries to stderr
        log_sensitive_data: Write thought text to the log (redacted when False)
    """
    server_name: str = "dialectic"
    render_thoughts: bool = True
    render_width: int = 100
    log_enabled: bool = True
    log_level: str = "INFO"
    log_directory: Optional[str] = None
    log_console: bool = False
    log_sensitive_data: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def parse_bool(value: Any, default: bool) -> bool:
    """Parse a config or environment value to boolean."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class ConfigLoader:
    """Load configuration from multiple sources with precedence.

    Example:
        loader = ConfigLoader(project_root="/path/to/project")
        config = loader.load(overrides={"render_thoughts": False})
    """

    ENV_MAPPINGS = {
        "DIALECTIC_SERVER_NAME": "server_name",
        "DIALECTIC_RENDER_THOUGHTS": "render_thoughts",
        "DIALECTIC_RENDER_WIDTH": "render_width",
        "DIALECTIC_LOG_ENABLED": "log_enabled",
        "DIALECTIC_LOG_LEVEL": "log_level",
        "DIALECTIC_LOG_DIRECTORY": "log_directory",
        "DIALECTIC_LOG_CONSOLE": "log_console",
        "DIALECTIC_LOG_SENSITIVE": "log_sensitive_data",
    }

    def __init__(
        self,
        project_root: Optional[str] = None,
        home_dir: Optional[str] = None,
    ):
        """Initialize the config loader.

        Args:
            project_root: Project root directory (default: current working dir)
            home_dir: Home directory (default: user's home)
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.home_dir = Path(home_dir) if home_dir else Path.home()

        self.global_config_path = self.home_dir / ".dialectic" / "config.json"
        self.project_config_path = self.project_root / ".dialectic" / "config.json"

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> DialecticConfig:
        """Load and merge configuration from all sources.

        Args:
            overrides: Runtime values that win over every other source.
                Keys set to None are ignored.

        Returns:
            Merged DialecticConfig object
        """
        config_dict: Dict[str, Any] = {}

        for path in (self.global_config_path, self.project_config_path):
            if path.exists():
                config_dict = self._deep_merge(config_dict, self._load_json(path))

        config_dict = self._apply_env_vars(config_dict)

        if overrides:
            config_dict = self._deep_merge(
                config_dict, {k: v for k, v in overrides.items() if v is not None}
            )

        defaults = DialecticConfig()
        return DialecticConfig(
            server_name=str(config_dict.get("server_name", defaults.server_name)),
            render_thoughts=parse_bool(config_dict.get("render_thoughts"), defaults.render_thoughts),
            render_width=self._parse_int(config_dict.get("render_width"), defaults.render_width),
            log_enabled=parse_bool(config_dict.get("log_enabled"), defaults.log_enabled),
            log_level=str(config_dict.get("log_level", defaults.log_level)),
            log_directory=config_dict.get("log_directory") or None,
            log_console=parse_bool(config_dict.get("log_console"), defaults.log_console),
            log_sensitive_data=parse_bool(
                config_dict.get("log_sensitive_data"), defaults.log_sensitive_data
            ),
        )

    def _load_json(self, path: Path) -> Dict[str, Any]:
        """Load a JSON configuration file, or {} when it cannot be read."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            get_logger().warn("config", "config_file_unreadable", {
                "path": str(path),
                "error": e,
            })
            return {}

        if not isinstance(data, dict):
            get_logger().warn("config", "config_file_not_object", {"path": str(path)})
            return {}
        return data

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries; values from override win."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply DIALECTIC_* environment variable overrides."""
        config = config.copy()
        for env_var, config_key in self.ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is not None:
                config[config_key] = value
        return config

    def _parse_int(self, value: Any, default: int) -> int:
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            get_logger().warn("config", "invalid_integer", {"value": value})
            return default


def load_config(
    project_root: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> DialecticConfig:
    """Convenience function to load configuration."""
    return ConfigLoader(project_root=project_root).load(overrides=overrides)
