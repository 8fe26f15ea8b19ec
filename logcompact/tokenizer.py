"""
Token classification and line parsing.

Tokens are whitespace-delimited and classified by shallow lexical shape
only: hex literals, bracketed hex addresses, HH:MM:SS timestamps and long
decimal numbers. Everything else is kept verbatim.
"""

import re
from typing import List, Tuple

from .models import ClassifiedToken, ParsedLine, TokenShape


# Checked in order, first full match wins
_SHAPE_PATTERNS: List[Tuple[re.Pattern, TokenShape]] = [
    (re.compile(r'\[0x[0-9a-fA-F]+\]'), TokenShape.BRACKETED_HEX),
    (re.compile(r'0x[0-9a-fA-F]+'), TokenShape.HEX),
    (re.compile(r'[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]+)?'), TokenShape.TIME),
    (re.compile(r'[0-9]{5,}'), TokenShape.NUMBER),
]

_TOKEN_PATTERN = re.compile(r'\S+')

# Leading whitespace and call-tree markers of sample/crash report frames
_INDENT_PATTERN = re.compile(r'^[\s+!|:]+')


def classify_token(token: str) -> ClassifiedToken:
    """Classify a single verbatim token."""
    for pattern, shape in _SHAPE_PATTERNS:
        if pattern.fullmatch(token):
            return ClassifiedToken(shape.value, True)
    return ClassifiedToken(token, False)


def tokenize(line: str) -> List[str]:
    return _TOKEN_PATTERN.findall(line)


def strip_indent(line: str) -> str:
    """Remove leading indentation and tree markers such as ``+ ! : |``."""
    return _INDENT_PATTERN.sub('', line, count=1)


def parse_line(line: str, strip_tree_indent: bool = False) -> ParsedLine:
    """
    Split a raw line into tokens and classify each of them.

    Args:
        line: Raw line without its trailing newline
        strip_tree_indent: Drop leading indentation markers before splitting

    Returns:
        ParsedLine with one ClassifiedToken per token; blank lines yield no tokens
    """
    if strip_tree_indent:
        line = strip_indent(line)
    tokens = tokenize(line)
    return ParsedLine(tokens=tokens, classified=[classify_token(t) for t in tokens])
