"""Configuration management."""

import logging
import sys
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings pulled from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    # Triangulation
    qhull_options: Optional[str] = Field(
        default=None, description="Override for scipy's default Qhull options"
    )
    joggle_degenerate: bool = Field(
        default=True,
        description="Retry collinear or near-degenerate input with Qhull's QJ option",
    )

    # Voronoi
    relax_iterations: int = Field(default=3, ge=0, description="Lloyd relaxation iterations")

    model_config = SettingsConfigDict(
        env_prefix="PY_DELAUNAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def configure_logging(config: Optional[Settings] = None) -> None:
    """Configure structlog on top of the stdlib logging module.

    Args:
        config: Settings to read level and renderer from, defaults to the
            module level settings
    """
    config = config or settings
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


settings = Settings()
