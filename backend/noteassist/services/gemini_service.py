"""
NoteAssist Backend — Google Gemini Provider
=============================================

What:  Concrete LLMProvider backed by the Google Gemini API.
How:   Sends a text prompt with generate_content_async and returns the reply
       text, translating SDK failures into ProviderError / ProviderBlockedError.
Who:   Constructed once by the app factory with explicit credentials and
       injected into AssistService.
When:  On each summarize / fix-grammar / auto-tag request.

Failure policy:
    - One attempt per request. No retry, backoff or circuit breaker.
    - A reply the SDK cannot turn into text (no valid Part, no candidates)
      is treated as safety-blocked.
    - A blank reply is a generic ProviderError.
    - A missing API key does not prevent construction; the first generate()
      call raises ConfigurationError instead.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Optional

import google.generativeai as genai

from noteassist.exceptions import ConfigurationError, ProviderBlockedError, ProviderError
from noteassist.services.llm_base import LLMProvider

logger = logging.getLogger(__name__)

# Fragments of the ValueError raised by `response.text` when the reply has
# no usable parts, which happens when the safety filter intervenes
_BLOCKED_MARKERS = (
    "valid `Part`",
    "none were returned",
    "prompt_feedback",
    "SAFETY",
)


def _is_blocked_message(message: str) -> bool:
    return any(marker in message for marker in _BLOCKED_MARKERS)


class GeminiProvider(LLMProvider):
    """
    Google Gemini implementation of LLMProvider.

    Architecture:
        - Credentials, model name, temperature and timeout are constructor
          arguments; nothing is read from the environment at call time
        - The GenerativeModel is built once and reused across requests
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-1.5-flash",
        temperature: float = 0.2,
        timeout: int = 60,
    ):
        self.api_key = (api_key or "").strip()
        self.model_name = model_name
        self.temperature = temperature
        self.timeout = timeout
        self.model: Optional[Any] = None

        if self.is_configured:
            # The SDK keeps credentials in module-level state
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(
                model_name,
                generation_config={"temperature": temperature},
            )
            logger.info(
                "GeminiProvider initialized with model=%s, temperature=%.2f",
                model_name,
                temperature,
            )
        else:
            logger.warning(
                "GeminiProvider created without an API key; AI-assist calls will fail"
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "your_gemini_api_key_here"

    async def generate(self, prompt: str, operation: str = "generate") -> str:
        if self.model is None:
            raise ConfigurationError(
                context={"setting": "GEMINI_API_KEY", "operation": operation},
            )

        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        try:
            response = await self.model.generate_content_async(
                prompt,
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "[%s] Gemini %s call failed after %.0fms: %s",
                call_id,
                operation,
                duration_ms,
                str(e),
            )
            raise ProviderError(
                context={
                    "call_id": call_id,
                    "operation": operation,
                    "error_type": type(e).__name__,
                },
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        text = self._response_text(response, call_id, operation)

        logger.info(
            "[%s] Gemini %s completed in %.0fms, %d chars",
            call_id,
            operation,
            duration_ms,
            len(text),
        )
        return text

    def _response_text(self, response: Any, call_id: str, operation: str) -> str:
        """
        Read the reply text, raising before any JSON parsing is attempted.

        Raises:
            ProviderBlockedError: `response.text` reported no usable parts.
            ProviderError: The reply text was empty or whitespace.
        """
        try:
            text = response.text
        except ValueError as e:
            if _is_blocked_message(str(e)):
                logger.warning("[%s] Gemini %s reply blocked: %s", call_id, operation, str(e))
                raise ProviderBlockedError(
                    context={"call_id": call_id, "operation": operation},
                ) from e
            raise ProviderError(
                context={"call_id": call_id, "operation": operation, "error": str(e)},
            ) from e

        if not isinstance(text, str) or not text.strip():
            logger.warning("[%s] Gemini %s returned no text", call_id, operation)
            raise ProviderError(
                message="The AI service returned no text (empty or blocked). Try different content.",
                context={"call_id": call_id, "operation": operation},
            )
        return text

    async def health_check(self) -> bool:
        """
        Lists available models to verify the API key and connectivity.

        list_models is free and does not consume generation quota. It is a
        blocking call, so it runs in a worker thread.
        """
        if not self.is_configured:
            return False
        try:
            model_names = await asyncio.to_thread(lambda: [m.name for m in genai.list_models()])
            target = f"models/{self.model_name}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False
