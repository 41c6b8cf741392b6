"""
NoteAssist Backend — AI Assist Service
========================================

What:  Three single-purpose AI operations over note text: summarize,
       fix grammar, auto-tag.
How:   Builds a prompt asking for a JSON object, sends it through an
       LLMProvider, extracts the object from the free-text reply, and maps
       it onto a response schema.
Who:   Called by the /notes/ai/* route handlers.

Soft-degradation:
    The provider's reply is unstructured text. If it arrives but cannot be
    parsed, each operation returns a safe default instead of failing:
        summarize   → "Unable to generate summary."
        fix_grammar → the original content, no corrections
        auto_tag    → no tags
    These defaults look the same as a legitimate "nothing to change" result.

    Empty or blocked replies are different: the provider raises before any
    parsing happens, and the error reaches the caller.
"""

import logging
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from noteassist.exceptions import ValidationError
from noteassist.schemas.note import (
    AutoTagResponse,
    Correction,
    FixGrammarResponse,
    SummarizeResponse,
)
from noteassist.services.extraction import extract_json_object
from noteassist.services.llm_base import LLMProvider

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Unable to generate summary."
MAX_TAGS = 5

SUMMARIZE_PROMPT = """You are a helpful AI assistant. Summarize the following note content \
in a concise manner (2-3 sentences maximum). Return ONLY a JSON object with this exact structure:
{{
  "summary": "your summary here"
}}

Content to summarize:
{content}"""

FIX_GRAMMAR_PROMPT = """You are a grammar correction assistant. Fix all grammar, spelling, \
and punctuation errors in the following text. Return ONLY a JSON object with this exact structure:
{{
  "fixedContent": "the corrected text",
  "corrections": [
    {{
      "original": "incorrect text",
      "corrected": "corrected text",
      "reason": "brief explanation"
    }}
  ]
}}

Text to fix:
{content}"""

AUTO_TAG_PROMPT = """You are a content tagging assistant. Analyze the following note and \
generate 3-5 relevant tags. Tags should be:
- Single words or short phrases (max 2 words)
- Lowercase
- Relevant to the content
- Specific and meaningful

Return ONLY a JSON object with this exact structure:
{{
  "tags": ["tag1", "tag2", "tag3"]
}}

Note title: {title}
Note content: {content}"""


def _require_text(value: str, field: str) -> None:
    if not value or not value.strip():
        raise ValidationError(message=f"{field.capitalize()} must not be empty", field=field)


class AssistService:
    """
    Prompt construction and response parsing for the AI-assist endpoints.

    Stateless apart from the injected provider, so one instance serves
    every request.
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    async def summarize(self, content: str) -> SummarizeResponse:
        """
        Summarize note content in 2-3 sentences.

        Raises:
            ValidationError: content is blank (no provider call is made)
            ProviderError / ProviderBlockedError: the provider failed
        """
        _require_text(content, "content")

        text = await self.provider.generate(
            SUMMARIZE_PROMPT.format(content=content), operation="summarize"
        )
        parsed = extract_json_object(text)

        summary = parsed.get("summary") if parsed else None
        if not isinstance(summary, str) or not summary.strip():
            logger.warning("Summarize reply could not be parsed; returning fallback")
            return SummarizeResponse(summary=SUMMARY_FALLBACK)
        return SummarizeResponse(summary=summary.strip())

    async def fix_grammar(self, content: str) -> FixGrammarResponse:
        """
        Correct grammar, spelling and punctuation.

        On an unparsable reply the original content comes back unchanged
        with an empty corrections list.
        """
        _require_text(content, "content")

        text = await self.provider.generate(
            FIX_GRAMMAR_PROMPT.format(content=content), operation="fix_grammar"
        )
        parsed = extract_json_object(text)
        if parsed is None:
            logger.warning("Fix-grammar reply could not be parsed; returning original content")
            return FixGrammarResponse(fixed_content=content, corrections=[])

        fixed = parsed.get("fixedContent")
        if not isinstance(fixed, str) or not fixed:
            fixed = content

        return FixGrammarResponse(
            fixed_content=fixed,
            corrections=self._parse_corrections(parsed.get("corrections")),
        )

    async def auto_tag(self, title: str, content: str) -> AutoTagResponse:
        """
        Suggest up to five tags for a note.

        Title or content may be empty, but not both.
        """
        if not (title or "").strip() and not (content or "").strip():
            raise ValidationError(
                message="Title or content must not be empty",
                field="content",
            )

        text = await self.provider.generate(
            AUTO_TAG_PROMPT.format(title=title, content=content), operation="auto_tag"
        )
        parsed = extract_json_object(text)

        raw_tags = parsed.get("tags") if parsed else None
        if not isinstance(raw_tags, list):
            logger.warning("Auto-tag reply could not be parsed; returning no tags")
            return AutoTagResponse(tags=[])

        tags = [tag for tag in raw_tags if isinstance(tag, str)]
        return AutoTagResponse(tags=tags[:MAX_TAGS])

    @staticmethod
    def _parse_corrections(raw: Any) -> List[Correction]:
        """Keep the well-formed correction entries, drop the rest."""
        if not isinstance(raw, list):
            return []
        corrections = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                corrections.append(Correction.model_validate(item))
            except PydanticValidationError:
                logger.debug("Dropping malformed correction entry: %r", item)
        return corrections
