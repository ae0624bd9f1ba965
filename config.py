"""
Configuration for the image ops library.

Settings are read from environment variables prefixed with IMAGEOPS_,
nested sections separated by a double underscore, e.g.
IMAGEOPS_IMAGE__DEFAULT_QUALITY=bilinear or IMAGEOPS_SYSTEM__LOG_LEVEL=DEBUG.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import ImageConstants, SystemConstants
from core.enums import InterpolationQuality
from core.utils.enum_converter import enum_to_string, require_enum


class SystemSettings(BaseModel):
    """Logging and debug settings"""

    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT)
    debug: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Invalid log level: {value}")
        return level


class ImageSettings(BaseModel):
    """Defaults for image operations"""

    default_quality: InterpolationQuality = Field(
        default=InterpolationQuality.HIGH,
        description="Interpolation quality used when a call passes none",
    )
    thumbnail_size: int = Field(default=ImageConstants.DEFAULT_THUMBNAIL_SIZE, ge=1)

    @field_validator("default_quality", mode="before")
    @classmethod
    def parse_quality(cls, value: Any) -> InterpolationQuality:
        return require_enum(value, InterpolationQuality, normalize=True)


class Settings(BaseSettings):
    """Top-level settings"""

    model_config = SettingsConfigDict(
        env_prefix=SystemConstants.ENV_PREFIX,
        env_nested_delimiter=SystemConstants.ENV_NESTED_DELIMITER,
        extra="ignore",
    )

    environment: str = Field(default="development")
    system: SystemSettings = Field(default_factory=SystemSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict view (enums as strings)"""
        data = self.model_dump()
        data["image"]["default_quality"] = enum_to_string(self.image.default_quality)
        return data


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading the environment."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.system.log_level),
        format=SystemConstants.LOG_FORMAT,
    )
