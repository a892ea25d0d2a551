"""
Records produced by decoding a PILER-CR report.

Coordinates are zero-indexed with an inclusive start and an exclusive end,
so ``contig_seq[rs.spacer_start:rs.spacer_end] == rs.spacer``.
"""
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class RawRepeatSpacer:
    """One data row as printed by PILER-CR.

    ``end`` repeats the tool's own arithmetic and is wrong by the number of
    gap characters in ``repeat_diff``; the repeat sequence only exists as a
    difference pattern against the consensus.
    """
    start: int
    end: int
    repeat_diff: str
    spacer: str
    # offset of the row in the report, for error messages
    position: int = field(default=0, compare=False)


@dataclass(frozen=True)
class RepeatSpacer:
    """A repeat followed by its spacer, with corrected coordinates."""
    start: int
    end: int
    repeat_start: int
    repeat_end: int
    spacer_start: int
    spacer_end: int
    repeat: str
    spacer: str


@dataclass(frozen=True)
class Array:
    """A single CRISPR array from the detail report."""
    accession: str
    # the Nth array in the report, zero-indexed
    order: int
    start: int
    end: int
    # may contain gaps
    consensus_repeat_sequence: str
    repeat_spacers: Tuple[RepeatSpacer, ...]
