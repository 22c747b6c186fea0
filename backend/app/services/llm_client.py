"""Chat-completion client for the configured LLM provider."""

import logging

from app.config import Settings
from app.exceptions import CompletionFailed, ConfigMissing

logger = logging.getLogger(__name__)


class CompletionClient:
    """Issue single chat completions against OpenAI-compatible or Anthropic APIs."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._openai_client = None
        self._anthropic_client = None

    def _get_openai_client(self):
        """Lazy load OpenAI client."""
        if self._openai_client is None:
            if not self.settings.openai_api_key:
                raise ConfigMissing("KLUSTER_API_KEY is not defined.")
            from openai import AsyncOpenAI
            self._openai_client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.llm_base_url,
                timeout=self.settings.llm_timeout_seconds,
                max_retries=0,
            )
        return self._openai_client

    def _get_anthropic_client(self):
        """Lazy load Anthropic client."""
        if self._anthropic_client is None:
            if not self.settings.anthropic_api_key:
                raise ConfigMissing("ANTHROPIC_API_KEY is not defined.")
            from anthropic import AsyncAnthropic
            self._anthropic_client = AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.llm_timeout_seconds,
                max_retries=0,
            )
        return self._anthropic_client

    def ensure_configured(self) -> None:
        """Raise ConfigMissing if the selected provider has no API key."""
        if self.settings.llm_provider == "openai":
            self._get_openai_client()
        elif self.settings.llm_provider == "anthropic":
            self._get_anthropic_client()
        else:
            raise ConfigMissing(f"Unknown LLM provider: {self.settings.llm_provider}")

    async def _call_openai(
        self, system_prompt: str, user_prompt: str, max_tokens: int, n: int
    ) -> str | None:
        """Call an OpenAI-compatible chat completions endpoint."""
        from openai import OpenAIError

        client = self._get_openai_client()
        try:
            response = await client.chat.completions.create(
                model=self.settings.llm_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                n=n,
                max_tokens=max_tokens,
            )
        except OpenAIError as e:
            raise CompletionFailed(f"OpenAI request failed: {e}") from e

        if not response.choices:
            return None
        return response.choices[0].message.content

    async def _call_anthropic(
        self, system_prompt: str, user_prompt: str, max_tokens: int
    ) -> str | None:
        """Call Anthropic messages API."""
        from anthropic import AnthropicError

        client = self._get_anthropic_client()
        try:
            response = await client.messages.create(
                model=self.settings.llm_model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except AnthropicError as e:
            raise CompletionFailed(f"Anthropic request failed: {e}") from e

        texts = [block.text for block in response.content if getattr(block, "text", None)]
        return "\n".join(texts) or None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        n: int = 1,
    ) -> str | None:
        """Return the first completion's text, or None if the response is empty.

        Raises:
            ConfigMissing: If the selected provider has no API key
            CompletionFailed: If the provider call errors out
        """
        provider = self.settings.llm_provider
        logger.info(f"Calling {provider} {self.settings.llm_model}...")

        if provider == "openai":
            return await self._call_openai(system_prompt, user_prompt, max_tokens, n)
        elif provider == "anthropic":
            # Anthropic has no multi-choice sampling; n is ignored
            return await self._call_anthropic(system_prompt, user_prompt, max_tokens)
        else:
            raise ConfigMissing(f"Unknown LLM provider: {provider}")
