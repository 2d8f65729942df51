"""Configuration management for Pharmabook"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv
load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen = True)
class Settings:
    supabase_url: str = os.getenv("SUPABASE_URL", "http://localhost:54321").rstrip("/")
    supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "30"))

    ## auth
    auth_redirect_url: str = os.getenv("AUTH_REDIRECT_URL", "http://localhost:8501/")
    require_session: bool = _flag("REQUIRE_SESSION")

    # Local storage file holding the favorites key
    favorites_path: Path = Path(
        os.getenv("FAVORITES_PATH", str(Path.home() / ".pharmabook" / "storage.json"))
    ).expanduser()

SETTINGS = Settings()
