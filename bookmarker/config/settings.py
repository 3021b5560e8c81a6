"""
Runtime settings read from the environment.

Values are read once by Settings.from_env() and injected into the
application factory; tests construct Settings directly.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() == "true"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    """Service configuration."""

    upload_dir: Path = Path("uploads")
    keep_after_process: bool = False
    upload_ttl_hours: int = 6
    sweep_interval_seconds: int = 30 * 60
    embed_timeout_seconds: float = 60.0
    max_upload_mb: int = 10
    port: int = 4000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def upload_ttl_seconds(self) -> float:
        return self.upload_ttl_hours * 60 * 60

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Returns:
            Settings with defaults for unset or malformed variables
        """
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            upload_dir=Path(os.environ.get("UPLOAD_DIR", "uploads")),
            keep_after_process=_env_bool("KEEP_AFTER_PROCESS"),
            upload_ttl_hours=_env_int("UPLOAD_TTL_HOURS", 6),
            sweep_interval_seconds=_env_int("SWEEP_INTERVAL_SECONDS", 30 * 60),
            embed_timeout_seconds=float(_env_int("EMBED_TIMEOUT_SECONDS", 60)),
            max_upload_mb=_env_int("MAX_UPLOAD_MB", 10),
            port=_env_int("PORT", 4000),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
