"""
Configuration Management Module

Responsibilities:
1. Read host connection settings from environment variables / .env
2. Read projection, event-log and viewer settings from inspector_config.json
3. Config validation and defaults
4. Build the record source the rest of the app reads from

Environment Variables:
    RECORD_HOST_SOURCE          - "snapshot" (default) or "http"
    RECORD_HOST_SNAPSHOT_DIR    - Snapshot root for the snapshot source
    RECORD_HOST_BASE_URL        - Host export endpoint for the http source
    RECORD_HOST_API_TOKEN       - Bearer token for the http source
    RECORD_HOST_USER_ID         - User id reported as metadata.loadedBy
    RECORD_HOST_TIMEOUT_SECONDS - Request timeout (default: 30)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.exceptions import ConfigError

if TYPE_CHECKING:
    from src.host.source import RecordSource

logger = logging.getLogger(__name__)


class HostConfig(BaseSettings):
    """Host record source configuration.

    Loaded in this priority order:
    1. Environment variables (RECORD_HOST_*)
    2. .env file (if exists)
    """

    model_config = SettingsConfigDict(
        env_prefix="RECORD_HOST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    source: Literal["snapshot", "http"] = Field(default="snapshot", description="Record source kind")
    snapshot_dir: Path = Field(default=Path("data/records"), description="Snapshot root directory")
    base_url: str = Field(default="", description="Host export endpoint")
    api_token: str = Field(default="", description="Bearer token")
    user_id: str = Field(default="", description="User id reported as loadedBy")
    timeout_seconds: int = Field(default=30, ge=1, le=300, description="Request timeout (seconds)")

    def is_remote(self) -> bool:
        return self.source == "http"


class ProjectionConfig(BaseModel):
    """Projection limits and tracing."""

    max_sublist_lines: int = Field(1000, ge=1, le=100000, description="Lines kept per sublist")
    track_performance: bool = Field(True, description="Record timing marks")


class EventLogConfig(BaseModel):
    """Lifecycle event logging."""

    log_full_record_json: bool = Field(True, description="Log the projected record after submit")


class ViewerConfig(BaseModel):
    """Links back to this service."""

    base_url: str = Field("", description="Public base URL of the record viewer")


class InspectorSettings(BaseModel):
    """Complete application settings (JSON file)."""

    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
    events: EventLogConfig = Field(default_factory=EventLogConfig)
    viewer: ViewerConfig = Field(default_factory=ViewerConfig)

    @classmethod
    def load(cls, path: str = "inspector_config.json") -> "InspectorSettings":
        """Load settings from JSON file, defaults when missing."""
        config_path = Path(path)
        if config_path.exists():
            try:
                with config_path.open("r", encoding="utf-8") as handle:
                    data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
            return cls(**data)
        return cls()


class Config:
    """Host connection plus file settings.

    Built once per process by the app lifespan or the CLI and passed down
    explicitly; nothing reads configuration from module globals.
    """

    def __init__(self, host: HostConfig, settings: InspectorSettings):
        self.host = host
        self.settings = settings

    @property
    def projection(self) -> ProjectionConfig:
        return self.settings.projection

    @property
    def events(self) -> EventLogConfig:
        return self.settings.events

    @property
    def viewer(self) -> ViewerConfig:
        return self.settings.viewer

    @classmethod
    def load(cls, settings_path: str = "inspector_config.json") -> "Config":
        """Factory method to load config.

        Host settings: Environment variables > .env
        Everything else: inspector_config.json
        """
        return cls(host=HostConfig(), settings=InspectorSettings.load(settings_path))


def build_record_source(config: Config) -> "RecordSource":
    """Create the record source selected by ``config.host.source``."""
    host = config.host
    user_id: Optional[str] = host.user_id or None

    if host.is_remote():
        if not host.base_url:
            raise ConfigError("RECORD_HOST_BASE_URL is required for the http record source")
        from src.host.client import HttpRecordSource

        logger.info("Using HTTP record source at %s", host.base_url)
        return HttpRecordSource(host)

    from src.host.snapshot import SnapshotDirectorySource

    logger.info("Using snapshot record source at %s", host.snapshot_dir)
    return SnapshotDirectorySource(host.snapshot_dir, user_id=user_id)
