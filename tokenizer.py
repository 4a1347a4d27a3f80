#!/usr/bin/env python3
# tokenizer.py - split an input line into arguments

import logging
from typing import List

from exceptions import UnterminatedQuoteError

logger = logging.getLogger(__name__)

SEPARATOR = " "
QUOTE = '"'
ESCAPE = "\\"


def _find_closing_quote(line: str, position: int) -> int:
    """Index of the next unescaped quote at or after position, or -1."""
    length = len(line)
    while position < length:
        char = line[position]
        if char == ESCAPE:
            position += 2
            continue
        if char == QUOTE:
            return position
        position += 1
    return -1


def _find_separator(line: str, position: int) -> int:
    end = line.find(SEPARATOR, position)
    return len(line) if end == -1 else end


def split_line(line: str) -> List[str]:
    """
    Split a raw line into its arguments.

    Runs of spaces separate arguments. A double-quoted span becomes one
    argument with its content kept verbatim. A backslash protects the
    character after it; the argument it starts keeps the backslash and
    runs to the next space. An empty or blank line gives [].

    Raises UnterminatedQuoteError if a quote is never closed.
    """
    parts = []
    position = 0
    length = len(line)
    while position < length:
        char = line[position]
        if char == SEPARATOR:
            position += 1
            continue

        if char == QUOTE:
            end = _find_closing_quote(line, position + 1)
            if end == -1:
                raise UnterminatedQuoteError(line, position)
            parts.append(line[position + 1:end])
            position = end + 1
            continue

        start = position
        if char == ESCAPE:
            # the escaped character belongs to the argument even if it is a space
            position = min(position + 2, length)
        end = _find_separator(line, position)
        parts.append(line[start:end])
        position = end

    logger.debug("split %r into %r", line, parts)
    return parts
