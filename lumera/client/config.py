"""
Client-side configuration using Pydantic Settings
Read from LUMERA_* environment variables
"""

from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path
from typing import Optional

class ClientSettings(BaseSettings):
    """Settings for the wishlist client"""

    # API boundary
    API_BASE_URL: str = "http://localhost:8000"
    HTTP_TIMEOUT: float = 10.0
    ACCESS_TOKEN: Optional[str] = None

    # Local storage slot for the anonymous wishlist
    WISHLIST_STORAGE_PATH: Optional[Path] = Path(".lumera") / "local-storage.json"
    WISHLIST_STORAGE_KEY: str = "lumera-wishlist"

    # Keep ids whose add failed during a login merge for the next sign-in
    WISHLIST_RETAIN_FAILED_MERGE: bool = True

    class Config:
        env_prefix = "LUMERA_"
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

@lru_cache()
def get_client_settings() -> ClientSettings:
    return ClientSettings()
