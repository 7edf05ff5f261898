import os
import logging
from typing import Dict, Iterator, List, Optional

import openai
from dotenv import load_dotenv

from ..errors import LLMNotConfiguredError, LLMServiceError

# Load env vars (if not already loaded)
load_dotenv()

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"


class LLMClient:
    """
    Chat-completion client for the hosted model (Groq via its
    OpenAI-compatible endpoint).
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or os.getenv("GROQ_API_KEY") or os.getenv("LLM_API_KEY")
        self.base_url = base_url or os.getenv("LLM_BASE_URL", GROQ_BASE_URL)
        self.model = model or os.getenv("LLM_MODEL", DEFAULT_MODEL)
        self.timeout = float(os.getenv("EXTERNAL_SERVICE_TIMEOUT", "30"))
        self.client = None
        if self.api_key:
            self.client = openai.OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=2,
            )

    @property
    def configured(self) -> bool:
        return self.client is not None

    def _require_client(self) -> openai.OpenAI:
        if not self.client:
            logger.warning("LLM API key not found (GROQ_API_KEY / LLM_API_KEY)")
            raise LLMNotConfiguredError("AI service is not configured")
        return self.client

    def generate(self, prompt: str, max_tokens: int = 1000, temperature: float = 0.7) -> str:
        """
        Single-shot completion for a user prompt.

        Raises:
            LLMNotConfiguredError: no API key
            LLMServiceError: provider error or empty response
        """
        client = self._require_client()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error(f"LLM completion failed: {e}")
            raise LLMServiceError("AI service request failed", details=str(e))

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMServiceError("AI service returned an empty response")
        return content

    def stream(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> Iterator[str]:
        """
        Stream completion text chunks for a chat history.

        The request is opened before the first chunk is yielded, so a
        provider that rejects the request fails on the first `next()`.
        """
        client = self._require_client()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
            )
            for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.OpenAIError as e:
            logger.error(f"LLM stream failed: {e}")
            raise LLMServiceError("AI service stream failed", details=str(e))


# Singleton instance
llm = LLMClient()
