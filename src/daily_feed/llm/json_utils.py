"""JSON parsing helpers for language model output."""

from __future__ import annotations

import json
import re


def fix_escape_sequences(text: str) -> str:
    """Fix invalid JSON escape sequences in LLM output.

    Models sometimes emit backslash sequences like ``\\_`` that are
    invalid inside JSON strings; lone backslashes that do not start a
    valid escape are doubled.

    Args:
        text: Raw text potentially containing invalid escapes.

    Returns:
        Text with invalid escape sequences fixed.
    """
    return re.sub(r'(?<!\\)\\(?!["\\/bfnrtu])', r"\\\\", text)


def strip_markdown_fences(text: str) -> str:
    """Strip a surrounding markdown code fence such as ```json ... ```.

    Args:
        text: Raw text potentially wrapped in code fences.

    Returns:
        Text with code fences removed.
    """
    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1 :]
        else:
            text = text[len("```") :]
        if text.endswith("```"):
            text = text[: -len("```")]
        text = text.strip()
    return text


def try_parse_json_object(text: str) -> dict[str, object] | None:
    """Parse text as a JSON object, retrying once with fixed escapes.

    Args:
        text: Candidate JSON text.

    Returns:
        Parsed dict, or None if the text is not a JSON object.
    """
    for candidate in (text, fix_escape_sequences(text)):
        try:
            parsed = json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        if isinstance(parsed, dict):
            return parsed
        return None
    return None
