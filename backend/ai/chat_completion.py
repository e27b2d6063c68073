"""OpenAI chat-completions adapter for the chat trainer."""
import logging
import threading
from typing import Any, Dict, List, Optional

from backend.ai.client_factory import AIClientFactory, AIRequestContext
from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class OpenAIChatCompletionClient:
    """
    ChatCompletionClient backed by the OpenAI chat-completions API.

    The underlying OpenAI client (and its connection pool) is built on the
    first call and reused until close().
    """

    def __init__(self, settings: Optional[Settings] = None, factory: Optional[AIClientFactory] = None):
        self._settings = settings or get_settings()
        self._factory = factory or AIClientFactory(self._settings)
        self._client: Any = None
        self._lock = threading.Lock()

    def _get_client(self) -> Any:
        with self._lock:
            if self._client is None:
                self._client = self._factory.create_openai_client()
            return self._client

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> str:
        context = AIRequestContext(
            user_id=user_id,
            session_id=session_id,
            feature_name="fitness_ai_chat",
            custom_properties={"model": self._settings.chat_model},
        )
        response = self._get_client().chat.completions.create(
            model=self._settings.chat_model,
            messages=messages,
            temperature=self._settings.chat_temperature,
            max_tokens=self._settings.chat_max_tokens,
            extra_headers=self._factory.request_headers(context),
        )
        reply = response.choices[0].message.content
        if not reply:
            raise ValueError("Completion returned an empty reply")
        return reply

    def close(self) -> None:
        """Release the OpenAI client's connections. Safe to call repeatedly."""
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()
            logger.debug("Closed OpenAI client")
