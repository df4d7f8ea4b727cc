"""Application configuration management."""
import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_PORT = 3000
CONFIG_FILE_ENV = "DUCKFS_CONFIG"


class Settings(BaseSettings):
    """Resolved application settings used by FastAPI dependencies."""

    model_config = SettingsConfigDict(env_prefix="DUCKFS_", extra="ignore")

    host: str = Field("0.0.0.0", description="Application bind address")
    port: int = Field(DEFAULT_PORT, description="Application bind port")
    log_level: str = Field("INFO", description="Root logging level")
    root: str = Field("/", description="Absolute path of the served filesystem subtree")
    static_dir: Optional[str] = Field(
        default=None,
        description="Directory holding the built single-page dashboard",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )
    gzip_minimum_size: int = Field(1000, description="Smallest response body worth compressing")
    list_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Abandon listings that take longer than this many seconds",
    )

    @field_validator("root")
    @classmethod
    def _root_must_be_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"root must be an absolute path, got {value!r}")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables win over values read from the config file.
        return env_settings, init_settings


def _get_config_file_path() -> Path:
    """Get the absolute path to the optional duckfs.json configuration file."""
    override = os.environ.get(CONFIG_FILE_ENV)
    if override:
        return Path(override)
    project_root = Path(__file__).parent.parent.parent
    return project_root / "duckfs.json"


def _load_config_from_json(config_path: Path) -> dict[str, Any]:
    """Read raw settings from ``config_path``; a missing file means defaults."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}")
    except OSError as e:
        raise RuntimeError(f"Error loading configuration from {config_path}: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {config_path} must be a JSON object")
    return data


def load_settings(config_path: Path | None = None) -> Settings:
    """Build settings from the config file and the environment (uncached)."""
    path = config_path or _get_config_file_path()
    return Settings(**_load_config_from_json(path))


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return load_settings()
