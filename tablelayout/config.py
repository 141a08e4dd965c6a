"""Configuration management for the table layout engine.

This module handles environment variable loading and provides type-safe
configuration access using Pydantic models. The values defined here are the
engine defaults that every resolved cell style starts from.
"""

import logging
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Engine configuration loaded from environment variables and .env file.

    All configuration values are automatically loaded from:
    1. `.env` file in the project root (if present)
    2. Environment variables prefixed with ``TABLELAYOUT_`` (as fallback)

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        default_font_name: Font used when no style layer names one
        default_font_size: Font size in points for unstyled cells
        default_cell_padding: Padding in points applied to all four sides
        default_min_cell_width: Floor for ``auto`` cells without minCellWidth
        default_line_color: Border color for cells and the table box
        default_page_size: Page size used when the caller supplies none
        measurement_cache_enabled: Whether text widths are memoized
        measurement_cache_size: Maximum number of memoized text widths
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLELAYOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    default_font_name: str = Field(
        default="Helvetica",
        description="Font used when no style layer names one",
        min_length=1,
    )

    default_font_size: float = Field(
        default=10.0,
        description="Font size in points for unstyled cells",
        gt=0.0,
        le=500.0,
    )

    default_cell_padding: float = Field(
        default=5.0,
        description="Cell padding in points applied to every side",
        ge=0.0,
    )

    default_min_cell_width: float = Field(
        default=10.0,
        description="Minimum width of auto-sized cells that declare no minCellWidth",
        ge=0.0,
    )

    default_line_color: str = Field(
        default="#000000",
        description="Default border color in hex format",
    )

    default_page_size: Literal["A4", "Letter", "Legal"] = Field(
        default="A4",
        description="Page size used when the caller supplies none",
    )

    measurement_cache_enabled: bool = Field(
        default=True,
        description="Enable/disable memoization of measured text widths",
    )

    measurement_cache_size: int = Field(
        default=4096,
        description="Maximum number of memoized text widths (LRU)",
        ge=1,
        le=1_000_000,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values.

        Args:
            value: Log level string to validate

        Returns:
            Uppercase log level string

        Raises:
            ValueError: If log level is not one of the allowed values
        """
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(
                f"log_level must be one of {allowed_levels}, got {value}"
            )
        return upper_value

    @field_validator("default_line_color")
    @classmethod
    def validate_line_color(cls, value: str) -> str:
        """Ensure the default border color is a hex color."""
        if not value.startswith("#") or len(value) not in (4, 7):
            raise ValueError(f"default_line_color must be a hex color, got {value}")
        return value


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Loads configuration on first call and returns the same instance on
    subsequent calls (singleton pattern).

    Returns:
        Config instance with loaded configuration values

    Raises:
        ValueError: If configuration values are invalid
    """
    logger = logging.getLogger(__name__)

    global _config
    if _config is None:
        _config = Config()
        logger.debug(
            f"Configuration loaded: "
            f"LOG_LEVEL={_config.log_level}, "
            f"DEFAULT_FONT_NAME={_config.default_font_name}, "
            f"DEFAULT_PAGE_SIZE={_config.default_page_size}, "
            f"MEASUREMENT_CACHE={'on' if _config.measurement_cache_enabled else 'off'}"
        )
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when configuration changes at runtime.

    Returns:
        New Config instance with reloaded configuration values
    """
    global _config
    _config = Config()
    return _config


def configure_logging(config: Config | None = None) -> None:
    """Configure root logging from the engine configuration.

    Args:
        config: Optional configuration; the global instance is used if omitted
    """
    config = config or get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(getattr(logging, config.log_level))
