"""
Configuration settings for the Drug Discovery Dashboard
"""
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__

# Load .env file from the package directory FIRST so os.getenv sees it
_package_dir = Path(__file__).parent
_env_file = _package_dir / ".env"
if _env_file.exists():
    load_dotenv(_env_file, override=True)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


class Settings:
    """Application settings loaded from environment variables"""

    def __init__(self):
        # Service identity
        self.app_name: str = os.getenv("APP_NAME", "Drug Discovery Dashboard")
        self.version: str = __version__

        # Server
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _env_int("PORT", 5000)
        self.allowed_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Store
        self.seed_data: bool = _env_bool("SEED_DATA", True)

        # Prebuilt single-page client, served from "/" when set
        static_dir = os.getenv("STATIC_DIR")
        self.static_dir: Optional[Path] = Path(static_dir) if static_dir else None

        # Prediction defaults
        self.default_generation_count: int = _env_int("GENERATION_COUNT", 5)
        self.default_screening_top_n: int = _env_int("SCREENING_TOP_N", 10)
        self.default_screening_mode: str = os.getenv("SCREENING_MODE", "docking")


settings = Settings()
