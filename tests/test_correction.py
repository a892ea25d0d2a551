"""Tests for pilercr_parser.correction."""
import pytest

from pilercr_parser.correction import (
    correct_repeat_spacers,
    count_gaps,
    reconstruct_repeat,
)
from pilercr_parser.errors import FormatError, LengthMismatch
from pilercr_parser.records import RawRepeatSpacer

from conftest import GAPPED_CONSENSUS


def _raw(start, repeat_diff, spacer):
    return RawRepeatSpacer(
        start=start,
        end=start + len(repeat_diff) + len(spacer),
        repeat_diff=repeat_diff,
        spacer=spacer,
    )


class TestReconstructRepeat:
    def test_identical_pattern_yields_consensus(self) -> None:
        consensus = "GCTGTAGTTCCCGGTTATTACTTGGTATGTTATAAT"
        assert reconstruct_repeat("." * len(consensus), consensus) == consensus

    def test_substitutions(self) -> None:
        diff = "..A..................................CC."
        assert reconstruct_repeat(diff, GAPPED_CONSENSUS) == "AAATTTCCGTCCCCTTTCGGGGAATCATTTAGAAAATCCA"

    def test_gaps_are_dropped(self) -> None:
        assert reconstruct_repeat("A-.-", "CCGT") == "AG"

    def test_count_gaps(self) -> None:
        assert count_gaps("GG............-......................--.") == 3
        assert count_gaps("....") == 0


class TestCorrectRepeatSpacers:
    def test_repeats(self) -> None:
        raws = [
            RawRepeatSpacer(
                start=3831,
                end=3906,
                repeat_diff="..A..................................CC.",
                spacer="GAATTACATCGTATGCCAATACGCAGTTGCTTTT",
            ),
            RawRepeatSpacer(
                start=3831,
                end=3906,
                repeat_diff="GG............-......................--.",
                spacer="ATCACATTCA",
            ),
        ]
        rs = correct_repeat_spacers(GAPPED_CONSENSUS, raws)
        assert len(rs) == 2
        assert rs[0].repeat == "AAATTTCCGTCCCCTTTCGGGGAATCATTTAGAAAATCCA"
        assert rs[1].repeat == "GGGTTTCCGTCCCCTTCGGGGAATCATTTAGAAAATA"

    def test_gap_offsets_accumulate(self) -> None:
        consensus = "ACGTACGTAC"
        raws = [_raw(100, "..-.......", "TTTTT")]
        raws.append(_raw(raws[-1].end, "--........", "GGGG"))
        raws.append(_raw(raws[-1].end, "..........", "CCC"))
        raws.append(_raw(raws[-1].end, ".-........", ""))

        rs = correct_repeat_spacers(consensus, raws)
        offsets = [raw.start - r.start for raw, r in zip(raws, rs)]
        assert offsets == [0, 1, 3, 3]
        assert offsets == sorted(offsets)
        for left, right in zip(rs, rs[1:]):
            assert left.end == right.start

    def test_repeat_length_excludes_gaps(self) -> None:
        raws = [_raw(0, "..-.--....", "ACGT")]
        (rs,) = correct_repeat_spacers("ACGTACGTAC", raws)
        assert len(rs.repeat) == 10 - 3
        assert rs.end - rs.start == len(rs.repeat) + len(rs.spacer)

    def test_empty_spacer(self) -> None:
        (rs,) = correct_repeat_spacers("ACGT", [_raw(10, "....", "")])
        assert rs.spacer == ""
        assert rs.spacer_start == rs.spacer_end == 14

    def test_length_mismatch(self) -> None:
        raws = [_raw(0, "....", "A"), _raw(5, ".....", "A")]
        with pytest.raises(LengthMismatch) as exc:
            correct_repeat_spacers("ACGT", raws)
        assert exc.value.row_index == 1
        assert exc.value.diff_length == 5
        assert exc.value.consensus_length == 4
        assert isinstance(exc.value, FormatError)
        assert exc.value.line is None

    def test_no_rows(self) -> None:
        assert correct_repeat_spacers("ACGT", []) == []
