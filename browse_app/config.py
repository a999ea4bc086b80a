"""Configuration helpers for the wardrobe item browser."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_API_BASE_URL = "http://localhost:3001/api"
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_PAGE_SIZE = 50


@dataclass
class BrowseConfig:
    """Configuration values for the item browser.

    The REST backend is an external collaborator, so the only required value is
    where to find it. Everything else has a default matching the web client.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: Optional[str] = None
    request_timeout_seconds: float = 5.0
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    page_size: int = DEFAULT_PAGE_SIZE
    brand_page_size: int = 50
    preferences_path: Optional[str] = None
    environment: str | None = None

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @classmethod
    def from_env(cls) -> "BrowseConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default. Environment variables win over file values so that tokens can
        be injected by the runtime.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("BROWSE_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(key.upper(), yaml_config.get(key, default))

        return cls(
            api_base_url=str(get_value("api_base_url", DEFAULT_API_BASE_URL) or DEFAULT_API_BASE_URL).rstrip("/"),
            api_token=get_value("api_token"),
            request_timeout_seconds=_as_float(get_value("request_timeout_seconds"), 5.0),
            debounce_ms=_as_int(get_value("debounce_ms"), DEFAULT_DEBOUNCE_MS),
            page_size=_as_int(get_value("page_size"), DEFAULT_PAGE_SIZE),
            brand_page_size=_as_int(get_value("brand_page_size"), 50),
            preferences_path=get_value("preferences_path"),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` YAML file without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
                value = value[1:-1]
            config[key.strip()] = value
        return config


def _as_int(raw: Optional[str], default: int) -> int:
    try:
        return int(raw) if raw not in (None, "") else default
    except ValueError:
        return default


def _as_float(raw: Optional[str], default: float) -> float:
    try:
        return float(raw) if raw not in (None, "") else default
    except ValueError:
        return default
