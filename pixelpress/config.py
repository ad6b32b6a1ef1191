"""Service configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv

DEFAULT_SERVICE_URL = "http://localhost:8080"
DEFAULT_OUTPUT_DIR = Path("output")


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class ServiceConfig:
    """Where the image service lives and where results go."""

    base_url: str = DEFAULT_SERVICE_URL
    timeout: float | None = None
    output_dir: Path = DEFAULT_OUTPUT_DIR


def _parse_base_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"PIXELPRESS_SERVICE_URL must be an http(s) URL, got '{value}'"
        )
    return value.rstrip("/")


def _parse_timeout(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError as e:
        raise ConfigError(f"PIXELPRESS_TIMEOUT must be a number, got '{value}'") from e
    if timeout <= 0:
        raise ConfigError(f"PIXELPRESS_TIMEOUT must be positive, got {timeout}")
    return timeout


def load_config(
    base_url: str | None = None,
    output_dir: Path | None = None,
) -> ServiceConfig:
    """Load configuration from ``.env`` and the process environment.

    Args:
        base_url: Overrides PIXELPRESS_SERVICE_URL when given
        output_dir: Overrides PIXELPRESS_OUTPUT_DIR when given

    Returns:
        The resolved ServiceConfig

    Raises:
        ConfigError: If a value cannot be parsed
    """
    _ = load_dotenv(find_dotenv(usecwd=True))

    url = base_url or os.getenv("PIXELPRESS_SERVICE_URL") or DEFAULT_SERVICE_URL
    env_output = os.getenv("PIXELPRESS_OUTPUT_DIR")

    return ServiceConfig(
        base_url=_parse_base_url(url),
        timeout=_parse_timeout(os.getenv("PIXELPRESS_TIMEOUT")),
        output_dir=output_dir or (Path(env_output) if env_output else DEFAULT_OUTPUT_DIR),
    )
