"""
Chat Completion Client Interface (Port).

Wraps the third-party chat-completion API behind a single call so the chat
relay can be tested with a deterministic fake.
"""
from typing import Protocol, List, Dict, Optional


class ChatCompletionClient(Protocol):
    """
    Abstract interface for a chat-completion provider.
    """

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> str:
        """
        Run a chat completion.

        Args:
            messages: OpenAI-style [{"role": ..., "content": ...}] list
            user_id: Requesting user, for usage tracking
            session_id: Conversation ID, for usage tracking

        Returns:
            The assistant reply text

        Raises:
            Exception: any upstream failure (the relay converts it to a fallback)
        """
        ...
