"""Lenient JSON extraction from LLM responses."""

import json
import re
from typing import Any

# Outermost JSON object or array embedded in surrounding prose
EMBEDDED_JSON = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)


def extract_json(response: str) -> Any | None:
    """
    Extract a JSON value from an LLM response.

    Handles various formats:
    - Plain JSON: {"sql": "..."} or [{...}, ...]
    - Markdown code block: ```json {...} ```
    - Text with embedded JSON

    Args:
        response: Raw LLM response text

    Returns:
        Parsed JSON value or None if parsing fails
    """
    if not response:
        return None
    content = response.strip()

    if "```" in content:
        parts = content.split("```")
        for i, part in enumerate(parts):
            if i % 2 == 1:  # Odd indices are inside code blocks
                code_content = part.strip()
                if code_content.startswith("json"):
                    code_content = code_content[4:].strip()
                try:
                    return json.loads(code_content)
                except json.JSONDecodeError:
                    continue

    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass

    match = EMBEDDED_JSON.search(content)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass

    return None
