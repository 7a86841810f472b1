"""Translation of admin-entered text through an OpenAI-compatible chat model."""

import os
from typing import Any, Dict, List, Optional

from openai import APIConnectionError, AsyncOpenAI, RateLimitError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ._utils import logger, resolve_env_placeholder
from .config import TranslationConfig

SYSTEM_PROMPT = (
    "You are a professional translator. Translate the user's text{source} into "
    "the language with code '{target}'. Reply with the translation only, keep "
    "placeholders, markup and line breaks unchanged."
)


class TranslationError(Exception):
    """Base exception for translation failures."""
    pass


class TranslationSetupError(TranslationError):
    """No usable model or API key is configured."""
    pass


def select_model(models: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Pick the model flagged ``default``, else the first enabled one."""
    for model in models:
        if model.get("default"):
            return model
    return models[0] if models else None


def resolve_api_key(model: Dict[str, Any], fallback: str = "") -> Optional[str]:
    """API key from the model config, then ``<PROVIDER>_API_KEY``, then ``fallback``."""
    key = resolve_env_placeholder(model.get("apiKey"))
    if key:
        return key

    provider = (model.get("provider") or "openai").upper().replace("-", "_")
    return os.getenv(f"{provider}_API_KEY") or fallback or None


class Translator:
    """Send a single translation request to the configured language model."""

    def __init__(self, config: Optional[TranslationConfig] = None):
        self.config = config or TranslationConfig()

    def _client(self, model: Dict[str, Any], api_key: str) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=api_key,
            base_url=model.get("url") or None,
            timeout=self.config.request_timeout,
            max_retries=0  # Retries are handled by tenacity
        )

    async def translate(
        self,
        text: str,
        target: str,
        models: List[Dict[str, Any]],
        source: Optional[str] = None,
    ) -> str:
        """Translate ``text`` into ``target``.

        Args:
            text: Text to translate
            target: Target language code
            models: Enabled model definitions from the config cache
            source: Source language code, detected by the model if omitted

        Returns:
            Translated text

        Raises:
            TranslationSetupError: If no model or API key is available
            TranslationError: If the model call fails
        """
        model = select_model(models)
        if model is None:
            raise TranslationSetupError("No model available for translation")

        api_key = resolve_api_key(model, self.config.api_key)
        if not api_key:
            raise TranslationSetupError(
                f"No API key configured for model {model.get('id', 'unknown')}"
            )

        model_name = model.get("modelId") or model.get("id")
        messages = [
            {
                "role": "system",
                "content": SYSTEM_PROMPT.format(
                    source=f" from the language with code '{source}'" if source else "",
                    target=target,
                ),
            },
            {"role": "user", "content": text},
        ]

        logger.info(f"Translating {len(text)} characters to {target} with {model_name}")

        async with self._client(model, api_key) as client:
            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self.config.max_retries),
                    wait=wait_exponential(multiplier=1, min=1, max=10),
                    retry=retry_if_exception_type((RateLimitError, APIConnectionError)),
                    reraise=True,
                ):
                    with attempt:
                        response = await client.chat.completions.create(
                            model=model_name,
                            messages=messages,
                            temperature=self.config.temperature,
                        )
            except Exception as e:
                logger.error(f"Translation request failed: {e}")
                raise TranslationError(str(e)) from e

        content = response.choices[0].message.content
        if content is None:
            logger.warning(f"Got None content from {model_name}, finish_reason: {response.choices[0].finish_reason}")
            content = ""

        return content.strip()
