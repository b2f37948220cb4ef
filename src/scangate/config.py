"""Global configuration — scanner endpoint, polling, XDG paths, env vars."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "scangate"
    return Path.home() / ".config" / "scangate"


@dataclass
class ScanGateConfig:
    """Application-wide configuration."""

    zap_url: str = "http://127.0.0.1:8080"
    api_key: str = ""
    config_dir: Path = field(default_factory=_default_config_dir)
    poll_interval: float = 1.0
    # No deadline unless one is configured explicitly
    poll_timeout: float | None = None
    request_timeout: float = 30.0
    base_url: str = ""
    base_secure_url: str = ""
    verbose: bool = False

    @property
    def categories_path(self) -> Path:
        """User file extending the built-in policy category registry."""
        return self.config_dir / "categories.yaml"

    @classmethod
    def load(cls) -> ScanGateConfig:
        """Load config from environment variables with XDG defaults."""
        config = cls()

        zap_url = os.environ.get("SCANGATE_ZAP_URL")
        if zap_url:
            config.zap_url = zap_url.rstrip("/")

        config.api_key = os.environ.get("SCANGATE_ZAP_API_KEY", config.api_key)

        env_interval = os.environ.get("SCANGATE_POLL_INTERVAL")
        if env_interval:
            config.poll_interval = float(env_interval)

        env_timeout = os.environ.get("SCANGATE_POLL_TIMEOUT")
        if env_timeout:
            config.poll_timeout = float(env_timeout)

        env_request_timeout = os.environ.get("SCANGATE_REQUEST_TIMEOUT")
        if env_request_timeout:
            config.request_timeout = float(env_request_timeout)

        config.base_url = os.environ.get("SCANGATE_BASE_URL", config.base_url)
        config.base_secure_url = os.environ.get(
            "SCANGATE_BASE_SECURE_URL", config.base_secure_url
        )

        return config
