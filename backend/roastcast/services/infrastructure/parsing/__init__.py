"""
Parsing Module

Provides utilities for recovering JSON from LLM responses.

Usage:
    from roastcast.services.infrastructure.parsing import parse_json_object
"""

from .json_parser import (
    parse_json_object,
    extract_first_balanced_json,
    fix_json_escapes,
    strip_markdown_fences,
)

__all__ = [
    "parse_json_object",
    "extract_first_balanced_json",
    "fix_json_escapes",
    "strip_markdown_fences",
]
