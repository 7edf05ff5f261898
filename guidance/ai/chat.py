"""
Career Chat

Normalises client chat history, prepends the counsellor persona and relays
the model's streamed reply as Server-Sent Events.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

from ..errors import GuidanceError, InvalidRequestError, LLMNotConfiguredError
from .llm_client import llm, LLMClient
from .prompt_builder import build_system_prompt

logger = logging.getLogger(__name__)

CHAT_ROLES = ("user", "assistant")


def _message_text(message: Dict[str, Any]) -> str:
    """Text of a {role, content} message or a UI message with text parts."""
    content = message.get("content")
    if isinstance(content, str):
        return content
    parts = message.get("parts") or (content if isinstance(content, list) else [])
    texts = [
        part.get("text", "") for part in parts
        if isinstance(part, dict) and part.get("type", "text") == "text"
    ]
    return "".join(texts)


def normalize_messages(messages: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Convert client messages to provider format.

    Client-sent system messages are dropped; the server owns the persona.
    """
    normalized = []
    for message in messages:
        role = message.get("role")
        if role not in CHAT_ROLES:
            if role == "system":
                logger.debug("Dropping client-sent system message")
            continue
        text = _message_text(message).strip()
        if text:
            normalized.append({"role": role, "content": text})
    return normalized


def _sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


class CareerChat:
    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client or llm
        self.max_tokens = 2000
        self.temperature = 0.7

    def build_messages(self, messages: List[Dict[str, Any]]) -> List[Dict[str, str]]:
        return [{"role": "system", "content": build_system_prompt()}] + normalize_messages(messages)

    def stream_events(self, messages: List[Dict[str, Any]]) -> Iterator[str]:
        """
        SSE events for a reply: content chunks, then a final done event.

        Raises:
            LLMNotConfiguredError: before any event, so the caller can still
                return a JSON error response
        """
        prompt = self.build_messages(messages)
        if len(prompt) == 1:
            raise InvalidRequestError("No chat messages provided")

        if not self.client.configured:
            raise LLMNotConfiguredError("AI service is not configured")
        return self._events(prompt)

    def _events(self, prompt: List[Dict[str, str]]) -> Iterator[str]:
        try:
            for chunk in self.client.stream(prompt, max_tokens=self.max_tokens, temperature=self.temperature):
                yield _sse({"content": chunk, "done": False})
        except GuidanceError as e:
            # Headers are already sent; report in-band
            logger.error(f"Chat stream interrupted: {e.message}")
            yield _sse({"error": e.message})
            return
        yield _sse({"content": "", "done": True})


# Singleton instance
career_chat = CareerChat()
