"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_USER_ID = "guest"
DEFAULT_TIMEOUT = 10.0
DEFAULT_TOAST_SECONDS = 3.0


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    default_user_id: str = DEFAULT_USER_ID
    state_dir: Path = Path(".storefront")
    timeout: float = DEFAULT_TIMEOUT
    toast_seconds: float = DEFAULT_TOAST_SECONDS

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv()
        return cls(
            api_url=os.environ.get("STOREFRONT_API_URL", DEFAULT_API_URL).rstrip("/"),
            default_user_id=os.environ.get("STOREFRONT_DEFAULT_USER", DEFAULT_USER_ID),
            state_dir=Path(os.environ.get("STOREFRONT_STATE_DIR", ".storefront")),
            timeout=float(os.environ.get("STOREFRONT_TIMEOUT", DEFAULT_TIMEOUT)),
            toast_seconds=float(os.environ.get("STOREFRONT_TOAST_SECONDS", DEFAULT_TOAST_SECONDS)),
        )
