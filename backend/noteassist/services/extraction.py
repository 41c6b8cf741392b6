"""
NoteAssist Backend — Best-Effort Structured Extraction
========================================================

What:  Pulls a JSON object out of free-form model text.
Who:   Called by AssistService after the provider returned non-empty text.

The model is asked for "ONLY a JSON object" but often wraps it in a
markdown fence or adds a sentence before or after. Candidates are tried in
order:
    1. The body of a fenced code block (``` or ```json)
    2. The span from the first "{" to the last "}"
    3. The whole reply, stripped

The first candidate that decodes to a JSON object wins. Anything else
(arrays, scalars, broken JSON) yields None so the caller can fall back to
its default value.
"""

import json
import logging
import re
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json|JSON)?[ \t]*\r?\n(.*?)\r?\n?```", re.DOTALL)
_BRACE_SPAN = re.compile(r"\{.*\}", re.DOTALL)


def _candidates(text: str) -> Iterator[str]:
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        yield fenced.group(1)
    braces = _BRACE_SPAN.search(text)
    if braces:
        yield braces.group(0)
    yield text


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Return the first JSON object found in `text`, or None.

    Never raises: malformed input is the expected case, not an error.

    >>> extract_json_object('Sure!\\n```json\\n{"summary": "hi"}\\n```')
    {'summary': 'hi'}
    >>> extract_json_object("no json here") is None
    True
    """
    if not text or not text.strip():
        return None

    for candidate in _candidates(text):
        try:
            parsed = json.loads(candidate.strip())
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.debug("No JSON object found in model reply (%d chars)", len(text))
    return None
