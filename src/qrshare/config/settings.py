"""Configuration management for qrshare.

Loads settings from a YAML configuration file with environment variable
overrides (``QRSHARE_SERVER__PORT=8000`` and friends). Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/qrshare.yaml")


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=3000, ge=1, le=65535)
    advertise_host: str | None = Field(
        default=None, description="Address put in the share URL instead of the detected one"
    )
    ssl_certfile: str | None = Field(default=None)
    ssl_keyfile: str | None = Field(default=None)
    graceful_shutdown_timeout: float = Field(default=1.0, ge=0)

    @property
    def tls_enabled(self) -> bool:
        return bool(self.ssl_certfile and self.ssl_keyfile)

    @property
    def scheme(self) -> str:
        return "https" if self.tls_enabled else "http"


class SessionConfig(BaseModel):
    heartbeat_interval: float = Field(default=5.0, gt=0, description="Seconds between viewer heartbeats")
    stale_timeout: float = Field(default=15.0, gt=0, description="Seconds without heartbeat before eviction")
    sweep_interval: float = Field(default=5.0, gt=0, description="Seconds between liveness sweeps")

    @model_validator(mode="after")
    def _check_heartbeat_margin(self) -> SessionConfig:
        if self.heartbeat_interval >= self.stale_timeout:
            logger.warning(
                "heartbeat_interval (%.1fs) >= stale_timeout (%.1fs): "
                "viewers will be evicted between heartbeats",
                self.heartbeat_interval, self.stale_timeout,
            )
        return self


class PresentationConfig(BaseModel):
    open_browser: bool = Field(default=True)
    terminal_qr: bool = Field(default=True, description="Also print the QR code to the terminal")
    qr_box_size: int = Field(default=10, gt=0)
    qr_border: int = Field(default=4, ge=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for qrshare.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically. YAML values arrive as init kwargs and
    rank below the environment.
    """

    model_config = {
        "env_prefix": "QRSHARE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    presentation: PresentationConfig = Field(default_factory=PresentationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults. The bare
    ``PORT`` variable fills in ``server.port`` only when YAML leaves it unset.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply environment variable overrides for non-prefixed vars."""
    port = os.environ.get("PORT", "")
    if not port:
        return
    server = yaml_data.get("server") or {}
    yaml_data["server"] = server
    if "port" not in server:
        server["port"] = port
