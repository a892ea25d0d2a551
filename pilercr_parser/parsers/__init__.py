"""
PILER-CR report grammar.

Primitive field readers live in ``primitives``; the report layout (header,
array blocks, data rows, summary rows) in ``parse_pilercr``.
"""

from .parse_pilercr import (
    parse,
    parse_array,
    parse_array_summary_line,
    parse_raw_repeat_spacer,
    skip_header,
)

__all__ = [
    'parse',
    'parse_array',
    'parse_array_summary_line',
    'parse_raw_repeat_spacer',
    'skip_header',
]
