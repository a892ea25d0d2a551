"""
Repeat reconstruction and coordinate correction for PILER-CR arrays.

PILER-CR (v1.06 at least) prints each repeat as a difference pattern against
the array's consensus repeat:

    '.'     identical to the consensus at this column
    '-'     gap, the repeat has no base at this column
    letter  substitution, the repeat carries this base instead

The tool counts gap columns as if they were bases when it reports
coordinates, so every gap pushes the rest of the array one base further
downstream. Correcting a row therefore needs the gaps of all preceding rows
in the same array.
"""
from typing import List, Optional, Sequence

from pilercr_parser.errors import LengthMismatch
from pilercr_parser.records import RawRepeatSpacer, RepeatSpacer

GAP = '-'
IDENTICAL = '.'


def count_gaps(repeat_diff: str) -> int:
    """Number of gap columns in a difference pattern."""
    return repeat_diff.count(GAP)


def reconstruct_repeat(repeat_diff: str, consensus: str) -> str:
    """Build a repeat's sequence from its difference pattern.

    Args:
        repeat_diff: Difference pattern from a data row
        consensus: Consensus repeat of the array, same length as repeat_diff

    Returns:
        The repeat sequence, gap columns removed
    """
    return ''.join(
        c if r == IDENTICAL else r
        for r, c in zip(repeat_diff, consensus)
        if r != GAP
    )


def correct_repeat_spacers(
    consensus: str,
    raw_repeat_spacers: Sequence[RawRepeatSpacer],
    text: Optional[str] = None
) -> List[RepeatSpacer]:
    """
    Convert raw rows of one array into corrected repeat-spacers.

    Rows must be given in report order: the offset applied to a row is the
    number of gaps seen in all rows before it.

    Args:
        consensus: Consensus repeat sequence of the array
        raw_repeat_spacers: Raw rows of the array, in report order
        text: Report text the rows came from, used to locate a bad row

    Returns:
        List of RepeatSpacer in the same order

    Raises:
        LengthMismatch: If a difference pattern and the consensus differ in length
    """
    output = []
    total_gap_count = 0

    for row_index, raw in enumerate(raw_repeat_spacers):
        if len(raw.repeat_diff) != len(consensus):
            raise LengthMismatch(
                row_index, len(raw.repeat_diff), len(consensus), raw.position, text
            )

        repeat = reconstruct_repeat(raw.repeat_diff, consensus)
        gap_count = count_gaps(raw.repeat_diff)

        start = raw.start - total_gap_count
        end = raw.end - total_gap_count - gap_count
        repeat_end = start + len(repeat)

        output.append(RepeatSpacer(
            start=start,
            end=end,
            repeat_start=start,
            repeat_end=repeat_end,
            spacer_start=repeat_end,
            spacer_end=end,
            repeat=repeat,
            spacer=raw.spacer,
        ))
        total_gap_count += gap_count

    return output
