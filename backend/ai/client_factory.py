"""
OpenAI client construction for the chat trainer.

The trainer holds one OpenAI client per process. When Helicone is enabled
the client is pointed at the Helicone proxy and carries the Helicone-Auth
header; per-request tracking (user, chat session, feature) is sent as
extra headers on each completion call instead of being baked into the
client.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

HELICONE_OPENAI_BASE_URL = "https://oai.helicone.ai/v1"

DEFAULT_TIMEOUT = 60.0

# Only letters, digits and hyphens survive in a Helicone property name
_HEADER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9\-]+$")


def _clean_value(value: str) -> str:
    """Strip everything but printable ASCII (no CR/LF header injection)."""
    return "".join(char for char in value if char.isprintable() and ord(char) < 128)


def _property_header(name: str) -> Optional[str]:
    """"session_kind" -> "Helicone-Property-Session-Kind", or None if unusable."""
    candidate = name.replace("_", "-").title()
    if not _HEADER_NAME_PATTERN.match(candidate):
        return None
    return f"Helicone-Property-{candidate}"


@dataclass
class AIRequestContext:
    """Who and what a single completion call is for."""

    user_id: Optional[str] = None
    session_id: Optional[str] = None
    feature_name: Optional[str] = None
    custom_properties: Dict[str, str] = field(default_factory=dict)

    def to_tracking_headers(self, environment: str) -> Dict[str, str]:
        headers = {"Helicone-Property-Environment": _clean_value(environment)}
        if self.user_id:
            headers["Helicone-User-Id"] = _clean_value(self.user_id)
        if self.session_id:
            headers["Helicone-Session-Id"] = _clean_value(self.session_id)
        if self.feature_name:
            headers["Helicone-Property-Feature"] = _clean_value(self.feature_name)
        for key, value in self.custom_properties.items():
            header = _property_header(key)
            if header is None:
                logger.debug(f"Skipping tracking property with invalid name {key!r}")
                continue
            headers[header] = _clean_value(str(value))
        return headers


class AIClientFactory:
    """
    Builds the OpenAI client for a Settings instance.

    Usage:
        >>> factory = AIClientFactory(settings)
        >>> client = factory.create_openai_client()
        >>> extra = factory.request_headers(AIRequestContext(user_id="user-1"))
    """

    def __init__(self, settings: Optional[Settings] = None, timeout: float = DEFAULT_TIMEOUT):
        self.settings = settings or get_settings()
        self.timeout = timeout

    @property
    def uses_helicone(self) -> bool:
        if not self.settings.helicone_enabled:
            return False
        if not self.settings.helicone_api_key:
            logger.warning("helicone_enabled is set without helicone_api_key; calling OpenAI directly")
            return False
        return True

    def create_openai_client(self) -> Any:
        """
        Create the OpenAI client. The caller owns it and must close() it.

        Raises:
            ValueError: If the OpenAI API key is not configured
        """
        import openai

        if not self.settings.openai_api_key:
            raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

        if not self.uses_helicone:
            logger.debug("Creating OpenAI client (direct)")
            return openai.OpenAI(api_key=self.settings.openai_api_key, timeout=self.timeout)

        logger.debug("Creating OpenAI client behind the Helicone proxy")
        return openai.OpenAI(
            api_key=self.settings.openai_api_key,
            timeout=self.timeout,
            base_url=HELICONE_OPENAI_BASE_URL,
            default_headers={"Helicone-Auth": f"Bearer {self.settings.helicone_api_key}"},
            http_client=httpx.Client(
                timeout=self.timeout,
                limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
            ),
        )

    def request_headers(self, context: AIRequestContext) -> Dict[str, str]:
        """Per-call headers; empty unless requests go through Helicone."""
        if not self.uses_helicone:
            return {}
        return context.to_tracking_headers(self.settings.environment)
