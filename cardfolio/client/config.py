"""Client-side settings read from the environment."""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class ClientSettings:
    api_base_url: str
    home_dir: str
    request_timeout: float


@lru_cache
def get_client_settings() -> ClientSettings:
    try:
        timeout = float(os.getenv("API_TIMEOUT_SECONDS", "30"))
    except ValueError:
        timeout = 30.0
    return ClientSettings(
        api_base_url=os.getenv("API_BASE_URL", "http://localhost:5000").rstrip("/"),
        home_dir=os.getenv("CARDFOLIO_HOME") or os.path.join(os.path.expanduser("~"), ".cardfolio"),
        request_timeout=timeout,
    )
