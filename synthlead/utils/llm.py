"""LLM client utilities for OpenAI and Anthropic."""
import time
from typing import Optional, List, Dict
import openai
import anthropic
from anthropic import Anthropic
from synthlead.config import (
    LLM_PROVIDER,
    OPENAI_API_KEY,
    ANTHROPIC_API_KEY,
    MODEL_NAME,
)
from synthlead.errors import ProviderError
from synthlead.utils.logging import get_logger, log_llm_call

logger = get_logger(__name__)


class LLMClient:
    """Unified LLM client for OpenAI and Anthropic."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        self.provider = provider or LLM_PROVIDER
        self.model = model or MODEL_NAME

        if self.provider == "openai":
            key = api_key or OPENAI_API_KEY
            if not key:
                raise ValueError("OPENAI_API_KEY not set")
            self.client = openai.OpenAI(api_key=key)
        elif self.provider == "anthropic":
            key = api_key or ANTHROPIC_API_KEY
            if not key:
                raise ValueError("ANTHROPIC_API_KEY not set")
            self.client = Anthropic(api_key=key)
        else:
            raise ValueError(f"Unknown LLM provider: {self.provider}")

    def call(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        system: Optional[str] = None,
    ) -> str:
        """Make an LLM call and return the response text.

        Raises:
            ProviderError: transport/auth failure or a response with no text part
        """
        started = time.monotonic()
        try:
            text = self._dispatch(messages, temperature, max_tokens, system)
        except (openai.OpenAIError, anthropic.AnthropicError) as e:
            self._log(started, temperature, max_tokens, error=str(e))
            raise ProviderError(f"{self.provider} call failed: {e}") from e
        except ProviderError as e:
            self._log(started, temperature, max_tokens, error=str(e))
            raise

        self._log(started, temperature, max_tokens)
        return text

    def _dispatch(
        self,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: Optional[int],
        system: Optional[str],
    ) -> str:
        if self.provider == "openai":
            # OpenAI format
            msgs = messages.copy()
            if system:
                msgs.insert(0, {"role": "system", "content": system})

            response = self.client.chat.completions.create(
                model=self.model,
                messages=msgs,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            if not response.choices or response.choices[0].message.content is None:
                raise ProviderError("Unexpected response from OpenAI: no text content")
            return response.choices[0].message.content

        # Anthropic format
        response = self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or 1024,
            temperature=temperature,
            system=system or "",
            messages=messages,
        )
        if not response.content or response.content[0].type != "text":
            raise ProviderError("Unexpected response type from Claude")
        return response.content[0].text

    def _log(self, started: float, temperature: float, max_tokens: Optional[int], error: Optional[str] = None):
        log_llm_call(
            logger,
            provider=self.provider,
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            duration_ms=int((time.monotonic() - started) * 1000),
            success=error is None,
            error=error,
        )


# Global singleton
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the global LLM client."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
