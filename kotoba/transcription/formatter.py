"""Formatting contract, prompt construction and response extraction."""

import re
import logging
from typing import Protocol

from ..errors import InvalidResponse

logger = logging.getLogger(__name__)

OPEN_TAG = "<formatted_text>"
CLOSE_TAG = "</formatted_text>"
_FORMATTED_RE = re.compile(r"<formatted_text>([\s\S]*?)</formatted_text>")

SYSTEM_PROMPT = """# Text Formatting Task

## Rules
- NEVER add greetings (Hi, Hello, Hey, Dear) unless the input STARTS with one
- NEVER add closings (Thanks, Best, Regards, Sincerely) unless the input ENDS with one
- NEVER add a signature or name unless the input includes one
- NEVER add new sentences or ideas not in the original
- NEVER change the speaker's intent or meaning
- Minor grammar fixes (articles, prepositions) are OK
- REMOVE filler words: "um", "uh", "like", "you know", "basically"
- REMOVE "so" ONLY when used as a sentence-starter filler (keep "so that", "and so", etc.)
- FIX grammar: add missing articles, fix verb tense, improve flow
- FIX punctuation: periods, commas, question marks
- FIX capitalization: sentence starts, proper nouns, acronyms
- ADD paragraph breaks where appropriate between distinct sections or topics

## Examples

### Filler removal + grammar fix:
<input>so the main issue is that um we need more time</input>
<formatted_text>The main issue is that we need more time.</formatted_text>

### Body only - no salutations added:
<input>the meeting is moved to 3pm please update your calendars</input>
<formatted_text>The meeting is moved to 3pm. Please update your calendars.</formatted_text>

## Output Format
<formatted_text>
[Your formatted text]
</formatted_text>

## Input Format
<input>[Raw unformatted transcription]</input>
"""


class FormattingEngine(Protocol):
    """Protocol for services that clean up raw transcripts."""

    def format(self, endpoint: str, model_id: str, text: str) -> str:
        """Return the formatted text or raise a FormattingError."""
        ...


def build_user_prompt(text: str) -> str:
    return f"<input>{text}</input>"


def extract_formatted_text(response: str) -> str:
    """Extract the formatted text from a model reply.

    Args:
        response: Raw model output expected to contain <formatted_text> tags

    Returns:
        Text between the tags

    Raises:
        InvalidResponse: Tags are missing, malformed, or enclose only whitespace
    """
    if OPEN_TAG in response and CLOSE_TAG not in response:
        raise InvalidResponse("malformed_tags")

    match = _FORMATTED_RE.search(response)
    if not match:
        raise InvalidResponse("no_tags")

    extracted = match.group(1)
    if not extracted.strip():
        raise InvalidResponse("empty_content" if extracted == "" else "whitespace_only")

    return extracted.strip()
