"""
Field readers and line skippers for whitespace-aligned report text.

Every reader takes the full report text and a cursor position and returns
``(value, new_position)``. Nothing is consumed on failure: the reader raises
UnexpectedToken carrying the position it was called with, so a caller can
catch it and try something else from the same place.
"""
import re
from typing import Optional, Tuple

from pilercr_parser.errors import UnexpectedToken

_DIGITS = re.compile(r'[0-9]*')
_FLOAT = re.compile(r'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')
_WHITESPACE = re.compile(r'[ \t]*')
_LETTERS = re.compile(r'[A-Za-z]*')
_NON_WHITESPACE = re.compile(r'\S*')
_NOT_LINE_ENDING = re.compile(r'[^\r\n]*')
_LINE_ENDING = re.compile(r'\r?\n')


def _read(pattern, text: str, pos: int, expected: str, required: bool) -> Tuple[str, int]:
    """Match ``pattern`` at ``pos``; an empty match fails when ``required``."""
    match = pattern.match(text, pos)
    span = match.group(0) if match else ''
    if required and not span:
        raise UnexpectedToken(pos, expected, text)
    return span, pos + len(span)


def read_digits(text: str, pos: int, required: bool = True) -> Tuple[str, int]:
    """Read a run of decimal digits."""
    return _read(_DIGITS, text, pos, 'digits', required)


def read_uint(text: str, pos: int) -> Tuple[int, int]:
    """Read a run of decimal digits and convert it."""
    digits, new_pos = read_digits(text, pos)
    try:
        return int(digits), new_pos
    except ValueError:
        raise UnexpectedToken(pos, 'an unsigned integer', text) from None


def read_float(text: str, pos: int) -> Tuple[float, int]:
    """Read floating-point text such as ``100.0`` or ``92.5``."""
    span, new_pos = _read(_FLOAT, text, pos, 'a decimal number', True)
    try:
        return float(span), new_pos
    except ValueError:
        raise UnexpectedToken(pos, 'a decimal number', text) from None


def read_whitespace(text: str, pos: int, required: bool = False) -> Tuple[str, int]:
    """Read spaces and tabs. Line terminators are never whitespace here."""
    return _read(_WHITESPACE, text, pos, 'whitespace', required)


def read_letters(text: str, pos: int, required: bool = False) -> Tuple[str, int]:
    """Read an alphabetic run such as a flank or spacer sequence."""
    return _read(_LETTERS, text, pos, 'letters', required)


def read_non_whitespace(text: str, pos: int, required: bool = True) -> Tuple[str, int]:
    """Read everything up to the next whitespace or line terminator."""
    return _read(_NON_WHITESPACE, text, pos, 'a non-whitespace field', required)


def read_tag(text: str, pos: int, tag: str) -> Tuple[str, int]:
    """Read the literal ``tag``."""
    if not text.startswith(tag, pos):
        raise UnexpectedToken(pos, repr(tag), text)
    return tag, pos + len(tag)


def read_line_ending(text: str, pos: int) -> Tuple[str, int]:
    """Read a single ``\\n`` or ``\\r\\n``."""
    return _read(_LINE_ENDING, text, pos, 'a line ending', True)


def read_end_of_row(text: str, pos: int) -> Tuple[Optional[str], int]:
    """Read a line ending, or accept the end of the input in its place."""
    if pos == len(text):
        return None, pos
    return read_line_ending(text, pos)


def skip_one_line(text: str, pos: int) -> int:
    """Skip a line's content and its terminator.

    Fails when the input ends before a terminator is found.
    """
    _, pos = _read(_NOT_LINE_ENDING, text, pos, 'line content', False)
    _, pos = read_line_ending(text, pos)
    return pos


def skip_empty_line(text: str, pos: int) -> int:
    """Skip one line terminator with nothing in front of it."""
    _, pos = read_line_ending(text, pos)
    return pos
