"""Configuration management for the CDDBP client."""

import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar

from cddbp.config.file_ops import write_text_file
from cddbp.config.paths import default_config_path
from cddbp.platform.logging import logger

DEFAULT_SERVER_HOST = "gnudb.gnudb.org"
DEFAULT_CDDBP_PORT = 8880
DEFAULT_HTTP_PORT = 80
DEFAULT_HTTP_PATH = "/~cddb/cddb.cgi"
DEFAULT_PROTOCOL_LEVEL = 6
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_TRANSPORT = "cddbp"


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Client configuration."""

    # Server location
    server_host: str = DEFAULT_SERVER_HOST
    cddbp_port: int = DEFAULT_CDDBP_PORT
    http_port: int = DEFAULT_HTTP_PORT
    http_path: str = DEFAULT_HTTP_PATH

    # Protocol
    protocol_level: int = DEFAULT_PROTOCOL_LEVEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    transport: str = DEFAULT_TRANSPORT

    # Client identity sent with "cddb hello"
    client_name: str | None = None
    client_version: str | None = None
    hello_user: str | None = None
    hello_host: str | None = None

    # Log file path
    log_file: Path | None = _path_field()

    # Singleton instance
    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata."""

        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value) if value else None)

    def save(self, target: Path | None = None) -> Path:
        """Save configuration to file.

        Args:
            target: Destination file. Defaults to ``default_config_path()``.

        Returns:
            Path: The file that was written.
        """
        config_dict = asdict(self)

        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        destination = target or default_config_path()
        try:
            write_text_file(destination, self._render_toml(config_dict))
            logger.info("Configuration saved to %s", destination)
        except OSError as e:
            logger.error("Failed to save configuration: %s", e)
            raise
        return destination

    def _render_toml(self, config: dict[str, Any]) -> str:
        """Render configuration as TOML with inline guidance."""

        lines: list[str] = []

        lines.append("# CDDBP client configuration")
        lines.append("")

        lines.append("# Server to query (gnudb.org speaks both CDDBP and HTTP)")
        for key in ("server_host", "cddbp_port", "http_port", "http_path"):
            lines.append(f"{key} = {self._format_toml_value(config[key])}")
        lines.append("")

        lines.append("# Protocol level 6 returns DYEAR and DGENRE and UTF-8 text")
        lines.append(f"protocol_level = {self._format_toml_value(config['protocol_level'])}")
        lines.append("# Seconds before a connect or read is abandoned")
        lines.append(f"timeout_seconds = {self._format_toml_value(config['timeout_seconds'])}")
        lines.append('# Either "cddbp" (port 8880 line protocol) or "http"')
        lines.append(f"transport = {self._format_toml_value(config['transport'])}")
        lines.append("")

        lines.append("# Identity announced with 'cddb hello' (optional)")
        lines.append("# Defaults come from $EMAIL, then $USER and the host name")
        for key in ("client_name", "client_version", "hello_user", "hello_host"):
            if config.get(key):
                lines.append(f"{key} = {self._format_toml_value(config[key])}")
        lines.append("")

        lines.append("# Log file path (optional)")
        lines.append('# Example: log_file = "/path/to/logs/cddbp.log"')
        if config["log_file"] is not None:
            lines.append(f"log_file = {self._format_toml_value(config['log_file'])}")
        lines.append("")

        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization.

        Args:
            value: Value to format

        Returns:
            str: Formatted value
        """
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return str(value)

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Config":
        """Load configuration from file.

        A missing file yields defaults; nothing is written.

        Args:
            config_file: Explicit file to read. Defaults to ``default_config_path()``.

        Returns:
            Config: Loaded configuration object.
        """
        if config_file is None and cls._instance is not None:
            return cls._instance

        source = config_file or default_config_path()

        if not source.exists():
            logger.debug("No configuration at %s, using defaults", source)
            instance = cls()
        else:
            try:
                with open(source, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.error("Failed to load configuration: %s", e)
                raise

            known = {f.name for f in fields(cls)}
            for key in sorted(set(config_dict) - known):
                logger.warning("Ignoring unknown configuration key %r in %s", key, source)
                del config_dict[key]

            logger.debug("Configuration loaded from %s", source)
            instance = cls(**config_dict)

        if config_file is None:
            cls._instance = instance
            cls._loaded_from = source
        return instance


# Global configuration instance
config = Config.load()
