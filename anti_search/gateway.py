# anti_search/gateway.py
from enum import Enum
from typing import Iterable, Optional

import requests
from pydantic import ValidationError

from .config import Settings, load_settings
from .logger import get_logger
from .schemas import UpstreamResponse

logger = get_logger(__name__)


class Capability(Enum):
    """Tool activations understood by the generateContent endpoint."""
    SEARCH = "googleSearch"
    URL_CONTEXT = "urlContext"

    def as_tool(self) -> dict:
        return {self.value: {}}


def build_url_prompt(url: str, instruction: Optional[str] = None) -> str:
    if instruction:
        return f"{instruction}: {url}"
    return f"Summarize the content from {url}"


class GatewayClient:
    """
    Sends single generateContent requests to a Gemini-compatible gateway.

    Failures never raise: connection problems, timeouts and unreadable
    bodies come back as an UpstreamResponse whose ``error`` is set, the same
    way the gateway reports its own errors.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()

    @property
    def endpoint(self) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}/v1beta/models/{self.settings.model}:generateContent"

    def build_payload(self, prompt: str, capabilities: Iterable[Capability]) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [capability.as_tool() for capability in capabilities],
        }

    def invoke(self, prompt: str, capabilities: Iterable[Capability]) -> UpstreamResponse:
        payload = self.build_payload(prompt, capabilities)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
        }
        logger.debug(f"POST {self.endpoint} tools={payload['tools']}")

        try:
            resp = requests.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Gateway request failed: {e}")
            return UpstreamResponse.failure(f"Gateway request failed: {e}")

        try:
            body = resp.json()
        except ValueError:
            logger.warning(f"Gateway returned non-JSON body (HTTP {resp.status_code})")
            return UpstreamResponse.failure(f"Gateway returned non-JSON body (HTTP {resp.status_code})")

        try:
            return UpstreamResponse.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Gateway returned malformed body (HTTP {resp.status_code}): {e}")
            return UpstreamResponse.failure(f"Gateway returned malformed body (HTTP {resp.status_code})")
