"""Centralised settings for the SupportSpark server.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    data_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("SUPPORTSPARK_DATA_DIR", "data"))
    )
    seed_demo_data: bool = field(
        default_factory=lambda: _env_bool("SEED_DEMO_DATA", "true")
    )

    @property
    def images_dir(self) -> Path:
        """Root directory for uploaded conversation images."""
        return self.data_dir / "images"

    @property
    def quotes_path(self) -> Path:
        return self.data_dir / "quotes.json"

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    session_secret: str = field(
        default_factory=lambda: os.environ.get("SESSION_SECRET") or secrets.token_urlsafe(32)
    )
    session_max_age: int = field(
        default_factory=lambda: int(os.environ.get("SESSION_MAX_AGE", "86400"))
    )

    # ------------------------------------------------------------------
    # Rate limiting (auth endpoints)
    # ------------------------------------------------------------------
    auth_rate_limit: int = field(
        default_factory=lambda: int(os.environ.get("AUTH_RATE_LIMIT", "5"))
    )
    auth_rate_window: float = field(
        default_factory=lambda: float(os.environ.get("AUTH_RATE_WINDOW", "900"))
    )

    # ------------------------------------------------------------------
    # Image uploads
    # ------------------------------------------------------------------
    max_image_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))
    )
    max_images_per_upload: int = field(
        default_factory=lambda: int(os.environ.get("MAX_IMAGES_PER_UPLOAD", "5"))
    )

    # ------------------------------------------------------------------
    # Server / logging
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "5000")))
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler at *level* (defaults to ``settings.log_level``)."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Module-level singleton, import this everywhere:
#   from supportspark.config import settings
settings = Settings()
