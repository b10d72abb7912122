"""
config.py: Environment configuration for the API.

Plain environment variables, optionally seeded from a .env file in the
project root. Variables already set in the environment win over .env.
"""

import os
from functools import lru_cache
from pathlib import Path

from gridboard.engine.units import DEFAULT_LAYOUT_KEY, DESKTOP_COLUMNS, DRAG_THRESHOLD, GRID_GAP

# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Application
        self.app_name: str = os.environ.get("APP_NAME", "gridboard")
        self.app_version: str = os.environ.get("APP_VERSION", "0.1.0")
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()

        # Server settings
        self.host: str = os.environ.get("HOST", "0.0.0.0")
        self.port: int = int(os.environ.get("PORT", "8000"))
        self.debug: bool = _env_flag("DEBUG", "false")

        # CORS settings
        self.cors_origins: list = os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
        ).split(",")

        # Layout storage
        self.redis_url: str = os.environ.get("REDIS_URL", "")
        self.store_prefix: str = os.environ.get("STORE_PREFIX", "gridboard:")
        self.layout_base_key: str = os.environ.get("LAYOUT_BASE_KEY", DEFAULT_LAYOUT_KEY)
        self.mirror_legacy_layout: bool = _env_flag("MIRROR_LEGACY_LAYOUT", "true")

        # Grid
        self.grid_gap: float = float(os.environ.get("GRID_GAP", str(GRID_GAP)))
        self.default_columns: int = int(os.environ.get("DEFAULT_COLUMNS", str(DESKTOP_COLUMNS)))
        self.drag_threshold: float = float(os.environ.get("DRAG_THRESHOLD", str(DRAG_THRESHOLD)))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
