"""Configuration management from environment variables."""
import json
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
SETTINGS_FILE = Path(os.getenv("SETTINGS_FILE", str(PROJECT_ROOT / "appsettings.json")))


def _load_settings(path: Path) -> dict:
    """Read the optional appsettings.json file."""
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        settings = json.load(f)
    return settings if isinstance(settings, dict) else {}


def _max_threads(settings: dict) -> int:
    # Environment overrides the settings file
    value = os.getenv("MaxThreads") or os.getenv("MAX_THREADS") or settings.get("MaxThreads")
    try:
        threads = int(value) if value is not None else 1
    except (TypeError, ValueError):
        threads = 1
    return max(threads, 1)


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


_settings = _load_settings(SETTINGS_FILE)


class Config:
    """Application configuration."""

    # Huur API (violations sink)
    HUUR_API_BASE: str | None = os.getenv("HUUR_API_BASE")
    HUUR_API_KEY: str | None = os.getenv("HUUR_API_KEY")

    # Finders
    MAX_THREADS: int = _max_threads(_settings)
    TIMEOUT: float = float(os.getenv("TIMEOUT", "30"))
    FIND_TIMEOUT: float = float(os.getenv("FIND_TIMEOUT", "120"))
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
    ENABLED_FINDERS: list[str] = _split_list(os.getenv("ENABLED_FINDERS"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # API Security
    API_KEY: str | None = os.getenv("API_KEY")

    @classmethod
    def validate(cls, require_sink: bool = True) -> None:
        """Validate required configuration."""
        errors = []
        if require_sink and not cls.HUUR_API_BASE:
            errors.append("HUUR_API_BASE is required (specify Huur API url)")
        if cls.MAX_THREADS < 1:
            errors.append("MAX_THREADS must be at least 1")
        if cls.TIMEOUT <= 0:
            errors.append("TIMEOUT must be positive")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


config = Config()
