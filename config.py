# config.py - environment-driven settings
import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    database_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    academic_year: str = "2025-2026"
    semester: str = "I. Dönem"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and .env, if present)."""
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            academic_year=os.getenv("ACADEMIC_YEAR", "2025-2026"),
            semester=os.getenv("SEMESTER", "I. Dönem"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
