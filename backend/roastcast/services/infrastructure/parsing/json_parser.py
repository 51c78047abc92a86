"""
JSON parsing utilities for LLM responses.

Model output often wraps the JSON we asked for in prose or markdown fences,
and occasionally contains invalid escape sequences. These helpers recover the
first JSON object from such text.
"""

import json
import re
from typing import Any, Dict, List, Optional

_ESCAPE_PATTERN = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})?')


def strip_markdown_fences(text: str) -> str:
    """Remove ``` fence lines while keeping their content"""
    stripped = text.strip()
    if "```" not in stripped:
        return stripped
    lines = [line for line in stripped.split("\n") if not line.strip().startswith("```")]
    return "\n".join(lines).strip()


def extract_first_balanced_json(text: str) -> Optional[str]:
    """Extract the first balanced ``{...}`` span from text.

    Scans for balanced braces/brackets while respecting string literals and
    escapes, so a ``}`` inside a quoted value does not end the object.

    Args:
        text: Source text potentially containing a JSON object.

    Returns:
        The first balanced object substring, or None if there is none.
    """
    if not text:
        return None

    in_string = False
    escape = False
    stack: List[str] = []
    start_idx: Optional[int] = None

    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if start_idx is None:
            if ch == "{":
                start_idx = i
                stack.append(ch)
            continue

        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append(ch)
        elif ch in "}]":
            open_ch = stack[-1]
            if (open_ch == "{" and ch == "}") or (open_ch == "[" and ch == "]"):
                stack.pop()
                if not stack:
                    return text[start_idx:i + 1]
            else:
                # Mismatched closing; restart the scan after this opening brace
                return extract_first_balanced_json(text[start_idx + 1:])

    return None


def fix_json_escapes(text: str) -> str:
    """Fix common JSON escape sequence issues from LLM responses.

    Escapes lone backslashes while preserving valid JSON escapes
    (\\", \\\\, \\/, \\b, \\f, \\n, \\r, \\t, \\uXXXX).
    """
    # Valid escapes are matched as a unit so an escaped backslash is never split
    return _ESCAPE_PATTERN.sub(lambda m: m.group(0) if m.group(1) else "\\\\", text)


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse the first JSON object out of an LLM response.

    Tries, in order: the whole (fence-stripped) text, the first balanced
    ``{...}`` span, and that span with its escapes repaired.

    Returns:
        The parsed object, or None if nothing parseable was found.
    """
    if not text or not text.strip():
        return None

    cleaned = strip_markdown_fences(text)

    try:
        parsed = json.loads(cleaned)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    candidate = extract_first_balanced_json(cleaned)
    if candidate is None:
        return None

    for attempt in (candidate, fix_json_escapes(candidate)):
        try:
            parsed = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    return None
