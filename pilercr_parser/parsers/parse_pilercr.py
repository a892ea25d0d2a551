"""
Parse the text report written by PILER-CR (run with -noinfo) into CRISPR arrays.

Report layout:
- An 11-line preamble (tool name, author, array count, "DETAIL REPORT")
- One block per array:

    Array 18
    >MGYG000232241_150

           Pos  Repeat     %id  Spacer  Left flank    Repeat                                      Spacer
    ==========  ======  ======  ======  ==========    ========================================    ======
          3832      40    92.5      34  CATATAGCAA    ..A..................................CC.    GAATTACATCG...
          3987      40    92.5          TGGCGGCTAC    GG............-......................--.    ATCACATTCA
    ==========  ======  ======  ======  ==========    ========================================
             3      40              37                AAGTTTCCGTCCCCTTTCGGGGAATCATTTAGAAAAT--A

- Summary sections ("SUMMARY BY SIMILARITY", "SUMMARY BY POSITION"), which
  repeat what the detail report already says and are not read.

Column alignment is cosmetic; fields are separated by any run of spaces or
tabs. The last row of an array has no spacer length and may have no spacer.
"""
from typing import List, Tuple

from pilercr_parser.correction import correct_repeat_spacers
from pilercr_parser.errors import UnexpectedToken
from pilercr_parser.parsers.primitives import (
    read_digits,
    read_end_of_row,
    read_float,
    read_letters,
    read_line_ending,
    read_non_whitespace,
    read_tag,
    read_uint,
    read_whitespace,
    skip_empty_line,
    skip_one_line,
)
from pilercr_parser.records import Array, RawRepeatSpacer

ARRAY_MARKER = 'Array '
ACCESSION_MARKER = '>'

# True for a line with content, False for a blank line
HEADER_LAYOUT = (True, True, False, True, False, False, False, True, False, False, False)


def skip_header(text: str, pos: int = 0) -> int:
    """Skip the fixed preamble that precedes the first array."""
    for has_content in HEADER_LAYOUT:
        pos = skip_one_line(text, pos) if has_content else skip_empty_line(text, pos)
    return pos


def _read_one_based(text: str, pos: int, what: str) -> Tuple[int, int]:
    """Read a 1-based number and return it zero-indexed."""
    value, new_pos = read_uint(text, pos)
    if value == 0:
        raise UnexpectedToken(pos, f"a 1-based {what}", text)
    return value - 1, new_pos


def _read_optional_number(text: str, pos: int) -> int:
    """Skip a numeric field followed by whitespace, if there is one."""
    digits, after_digits = read_digits(text, pos, required=False)
    if not digits:
        return pos
    gap, after_gap = read_whitespace(text, after_digits)
    if not gap:
        return pos
    return after_gap


def _starts_row(text: str, pos: int) -> bool:
    """True when the line at ``pos`` begins with a position field.

    The rule line under the last row does not; a row that does is parsed in
    full and any later field error is raised from where it occurs.
    """
    _, pos = read_whitespace(text, pos)
    digits, _ = read_digits(text, pos, required=False)
    return bool(digits)


def parse_raw_repeat_spacer(text: str, pos: int = 0) -> Tuple[RawRepeatSpacer, int]:
    """
    Parse one data row of an array table.

    Row fields: position, repeat length, %id, spacer length (absent on the
    last row), left flank, repeat difference pattern, spacer (may be absent
    on the last row). Only the position, difference pattern and spacer are
    kept.

    The end coordinate reproduces PILER-CR's arithmetic, which counts gap
    columns of the difference pattern as bases. correct_repeat_spacers()
    removes that error once the whole array has been read.

    Args:
        text: Report text
        pos: Offset of the start of the row

    Returns:
        Tuple of (RawRepeatSpacer, offset after the row's line ending)
    """
    row_pos = pos
    _, pos = read_whitespace(text, pos)
    start, pos = _read_one_based(text, pos, 'repeat position')
    _, pos = read_whitespace(text, pos, required=True)
    _, pos = read_uint(text, pos)  # repeat length
    _, pos = read_whitespace(text, pos, required=True)
    _, pos = read_float(text, pos)  # %id
    _, pos = read_whitespace(text, pos, required=True)
    pos = _read_optional_number(text, pos)  # spacer length

    # Left flank, unless the array starts at the contig edge. A letter run
    # only counts as the flank when whitespace follows it, otherwise it is
    # the beginning of the difference pattern.
    flank, after_flank = read_letters(text, pos)
    if flank:
        gap, after_gap = read_whitespace(text, after_flank)
        if gap:
            pos = after_gap

    repeat_diff, pos = read_non_whitespace(text, pos)
    _, pos = read_whitespace(text, pos)
    spacer, pos = read_letters(text, pos)
    _, pos = read_whitespace(text, pos)
    _, pos = read_end_of_row(text, pos)

    end = start + len(repeat_diff) + len(spacer)
    raw = RawRepeatSpacer(
        start=start,
        end=end,
        repeat_diff=repeat_diff,
        spacer=spacer,
        position=row_pos,
    )
    return raw, pos


def parse_array_summary_line(text: str, pos: int = 0) -> Tuple[str, int]:
    """
    Get the consensus repeat from the last line of an array and discard the rest.

    The line holds the number of repeats, the repeat length, an optional
    %id, the average spacer length and the consensus sequence.

    Returns:
        Tuple of (consensus sequence, offset after the line ending)
    """
    _, pos = read_whitespace(text, pos)
    _, pos = read_uint(text, pos)  # number of repeats
    _, pos = read_whitespace(text, pos, required=True)
    _, pos = read_uint(text, pos)  # repeat length
    _, pos = read_whitespace(text, pos, required=True)
    # %id is usually blank; when present, the spacer length follows it
    _, pos = read_uint(text, pos)
    _, pos = read_whitespace(text, pos, required=True)
    pos = _read_optional_number(text, pos)
    consensus, pos = read_non_whitespace(text, pos)
    _, pos = read_whitespace(text, pos)
    _, pos = read_line_ending(text, pos)
    return consensus, pos


def parse_array(text: str, pos: int = 0) -> Tuple[Array, int]:
    """
    Parse a single CRISPR array block and correct its coordinates.

    Args:
        text: Report text
        pos: Offset of the "Array N" line

    Returns:
        Tuple of (Array, offset after the block's trailing blank lines)

    Raises:
        UnexpectedToken: If the block does not follow the report layout
        LengthMismatch: If a difference pattern disagrees with the consensus
    """
    _, pos = read_tag(text, pos, ARRAY_MARKER)
    order, pos = _read_one_based(text, pos, 'array number')
    _, pos = read_whitespace(text, pos)
    _, pos = read_line_ending(text, pos)

    _, pos = read_tag(text, pos, ACCESSION_MARKER)
    accession, pos = read_non_whitespace(text, pos)
    pos = skip_one_line(text, pos)  # anything after the accession
    pos = skip_empty_line(text, pos)

    # Column titles and the rule under them
    pos = skip_one_line(text, pos)
    pos = skip_one_line(text, pos)

    raw, pos = parse_raw_repeat_spacer(text, pos)
    raw_repeat_spacers = [raw]
    while _starts_row(text, pos):
        raw, pos = parse_raw_repeat_spacer(text, pos)
        raw_repeat_spacers.append(raw)

    pos = skip_one_line(text, pos)  # rule above the summary line
    consensus, pos = parse_array_summary_line(text, pos)
    pos = skip_empty_line(text, pos)
    pos = skip_empty_line(text, pos)

    repeat_spacers = correct_repeat_spacers(consensus, raw_repeat_spacers, text)
    array = Array(
        accession=accession,
        order=order,
        start=repeat_spacers[0].start,
        end=repeat_spacers[-1].end,
        consensus_repeat_sequence=consensus,
        repeat_spacers=tuple(repeat_spacers),
    )
    return array, pos


def parse(text: str) -> List[Array]:
    """
    Parse the PILER-CR report for one contig/genome.

    Arrays are read until the text after the last one no longer starts a new
    "Array N" block; the summary sections that follow are ignored.

    Args:
        text: Full report text

    Returns:
        List of Array in report order

    Raises:
        PilercrParseError: On the first malformed header, array block or row
    """
    pos = skip_header(text)
    arrays = []
    while text.startswith(ARRAY_MARKER, pos):
        array, pos = parse_array(text, pos)
        arrays.append(array)
    return arrays
