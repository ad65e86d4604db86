"""Configuration management for mpdwire."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .protocol.messages import DEFAULT_PORT


@dataclass
class ConnectionConfig:
    """Where and how to reach the server."""

    host: str = "localhost"
    port: int = DEFAULT_PORT
    password: str = ""
    timeout: float = 0.0  # seconds, 0 disables


@dataclass
class PollerConfig:
    """Status poller settings."""

    interval: float = 1.0


@dataclass
class LoggingConfig:
    level: str = "warning"


@dataclass
class Config:
    """Full mpdwire configuration."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    poller: PollerConfig = field(default_factory=PollerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the mpdwire config directory."""
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "mpdwire"
    return Path.home() / ".config" / "mpdwire"


def get_config_file() -> Path:
    return get_config_dir() / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file, then apply environment overrides."""
    config_file = path or get_config_file()

    if config_file.exists():
        with open(config_file, "rb") as f:
            data = tomllib.load(f)

        config = Config(
            connection=ConnectionConfig(**data.get("connection", {})),
            poller=PollerConfig(**data.get("poller", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )
    else:
        config = Config()

    return apply_env(config)


def parse_host(value: str) -> tuple[str, str]:
    """Split ``password@host`` into ``(host, password)``.

    A leading ``@`` names an abstract socket and is not a password separator.
    """
    password, sep, host = value.partition("@")
    if not sep or not password:
        return value, ""
    return host, password


def apply_env(config: Config) -> Config:
    """Apply ``MPD_HOST``, ``MPD_PORT`` and ``MPD_TIMEOUT`` overrides."""
    if env_host := os.environ.get("MPD_HOST"):
        host, password = parse_host(env_host)
        config.connection.host = host
        if password:
            config.connection.password = password

    if env_port := os.environ.get("MPD_PORT"):
        try:
            config.connection.port = int(env_port)
        except ValueError:
            raise ValueError(f"Invalid MPD_PORT: {env_port!r}") from None

    if env_timeout := os.environ.get("MPD_TIMEOUT"):
        try:
            config.connection.timeout = float(env_timeout)
        except ValueError:
            raise ValueError(f"Invalid MPD_TIMEOUT: {env_timeout!r}") from None

    return config
