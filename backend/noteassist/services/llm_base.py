"""
NoteAssist Backend — Abstract LLM Provider Interface
======================================================

What:  Abstract base class for text-in/text-out generative model providers.
How:   Concrete implementations inherit from LLMProvider and implement
       generate() and health_check().
Who:   Called by AssistService, which owns prompts and response parsing.

Keeping the provider this narrow means tests can substitute a fake that
returns canned text, and AssistService never touches an SDK directly.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Abstract interface for a generative text model.

    Contract:
        - generate() returns non-empty text, or raises
        - Empty and safety-blocked replies are failures, never ""
        - All implementation-specific errors are wrapped in ProviderError
          (or ProviderBlockedError); a missing credential raises
          ConfigurationError

    Implementations:
        - GeminiProvider: Google Gemini via google-generativeai
    """

    @abstractmethod
    async def generate(self, prompt: str, operation: str = "generate") -> str:
        """
        Send a single prompt and return the model's text reply.

        Args:
            prompt:    The complete prompt text.
            operation: Short label used in log lines (e.g. "summarize").

        Returns:
            The reply text, guaranteed non-blank.

        Raises:
            ProviderBlockedError: The safety filter blocked the prompt or reply.
            ProviderError: The call failed or produced no text.
            ConfigurationError: The provider has no API key.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight connectivity test (does NOT consume generation quota).

        Returns True if the provider is reachable, False otherwise. Never raises.
        """
        ...
