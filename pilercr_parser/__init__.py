"""
PILER-CR report parser

Decodes the text report of PILER-CR, a CRISPR array annotation tool, into
arrays of repeat-spacers. PILER-CR v1.06 reports wrong coordinates when a
repeat's difference pattern contains gaps, and gives repeats only as
difference patterns against the consensus. Both are corrected here.

    from pilercr_parser import parse

    with open('pilercr.txt') as f:
        arrays = parse(f.read())
    for array in arrays:
        print(f"{array.accession} has {len(array.repeat_spacers)} repeat-spacers")
"""

from .errors import (
    FormatError,
    LengthMismatch,
    PilercrParseError,
    UnexpectedToken,
)
from .parsers import parse
from .records import Array, RepeatSpacer

__all__ = [
    'parse',
    'Array',
    'RepeatSpacer',
    'PilercrParseError',
    'UnexpectedToken',
    'FormatError',
    'LengthMismatch',
]
