# anti_search/config.py
import os

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel

_ = load_dotenv(find_dotenv(usecwd=True))

DEFAULT_BASE_URL = "http://localhost:8317"
DEFAULT_API_KEY = "dummy"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 120.0


class Settings(BaseModel):
    """Gateway connection settings, read from the environment."""
    base_url: str = DEFAULT_BASE_URL
    api_key: str = DEFAULT_API_KEY
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT


def _timeout_from_env() -> float:
    raw = os.getenv("ANTI_TIMEOUT")
    try:
        timeout = float(raw) if raw else DEFAULT_TIMEOUT
    except ValueError:
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


def load_settings() -> Settings:
    # Values are forwarded to the gateway unvalidated.
    return Settings(
        base_url=os.getenv("ANTI_BASE_URL") or DEFAULT_BASE_URL,
        api_key=os.getenv("ANTI_API_KEY") or DEFAULT_API_KEY,
        model=os.getenv("ANTI_MODEL") or DEFAULT_MODEL,
        timeout=_timeout_from_env(),
    )
