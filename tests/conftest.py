"""Shared PILER-CR report fixtures."""
import pytest

HEADER = (
    "pilercr v1.06\n"
    "By Robert C. Edgar\n"
    "\n"
    "MGYG000232241.fna: 2 putative CRISPR arrays found.\n"
    "\n"
    "\n"
    "\n"
    "DETAIL REPORT\n"
    "\n"
    "\n"
    "\n"
)

UNGAPPED_ARRAY = """Array 5
>MGYG000273829_14

       Pos  Repeat     %id  Spacer  Left flank    Repeat                                  Spacer
==========  ======  ======  ======  ==========    ====================================    ======
     16576      36   100.0      30  AAACAGTTCT    ....................................    ACGAACTTAGTACCCTTTTCTGGGCGGCAT
     16642      36   100.0      30  TGGGCGGCAT    ....................................    CCGCAGGTGCTACCGCTGTTATACTCTGTT
     16708      36   100.0      30  ATACTCTGTT    ....................................    CGTAAATCGTTGGCGAAACGCTACCAACTG
     16774      36   100.0      30  CTACCAACTG    ....................................    CCTCGGTCTGCTCTAACAGATCCCCCAAGT
     16840      36   100.0      30  TCCCCCAAGT    ....................................    ACAGAGAAAGAAAGAGAGATTAACGACTAC
     16906      36   100.0      30  TAACGACTAC    ....................................    TGAAACGGAGTGGACAGGTAAAGGAATGGG
     16972      36   100.0      30  AAGGAATGGG    ....................................    TGCGGTCCCTTGGTTCCGTCAACAACATCA
     17038      36   100.0      30  AACAACATCA    ....................................    TGTCCTATTCCCTTTTATGCTGCGTGTATA
     17104      36   100.0      30  TGCGTGTATA    ....................................    AATACAAGCATAAAGAACGAACCGCAACGG
     17170      36   100.0          ACCGCAACGG    ....................................    AGGGAA
==========  ======  ======  ======  ==========    ====================================
        10      36              30                GCTGTAGTTCCCGGTTATTACTTGGTATGTTATAAT


"""

GAPPED_ARRAY = """Array 18
>MGYG000232241_150

       Pos  Repeat     %id  Spacer  Left flank    Repeat                                      Spacer
==========  ======  ======  ======  ==========    ========================================    ======
      3832      40    92.5      34  CATATAGCAA    ..A..................................CC.    GAATTACATCGTATGCCAATACGCAGTTGCTTTT
      3906      40    97.5      41  AGTTGCTTTT    .....................................---    TGTACTACTATGCGGTATTCCATCTGAAGGATGGCGGCTAC
      3987      40    92.5          TGGCGGCTAC    GG............-......................--.    ATCACATTCA
==========  ======  ======  ======  ==========    ========================================
         3      40              37                AAGTTTCCGTCCCCTTTCGGGGAATCATTTAGAAAAT--A


"""

SUMMARY_SECTIONS = """SUMMARY BY SIMILARITY



       Array          Sequence    Position      Length  # Copies  Repeat  Spacer  +  Consensus
==========  ================  ==========  ==========  ========  ======  ======  =  =========
         1  MGYG000273829_1       16576         641        10      36      30  +    GCTGTAGTTCCCGGTTATTACTTGGTATGTTATAAT
"""

GAPPED_CONSENSUS = "AAGTTTCCGTCCCCTTTCGGGGAATCATTTAGAAAAT--A"


@pytest.fixture
def ungapped_array_text():
    return UNGAPPED_ARRAY


@pytest.fixture
def gapped_array_text():
    return GAPPED_ARRAY


@pytest.fixture
def report_text():
    return HEADER + UNGAPPED_ARRAY + GAPPED_ARRAY + SUMMARY_SECTIONS


@pytest.fixture
def report_file(tmp_path, report_text):
    path = tmp_path / "MGYG000232241.txt"
    path.write_text(report_text)
    return path


@pytest.fixture
def gapped_contig():
    """Contig holding the gapped array at its corrected coordinates."""
    repeat_spacers = [
        ("AAATTTCCGTCCCCTTTCGGGGAATCATTTAGAAAATCCA", "GAATTACATCGTATGCCAATACGCAGTTGCTTTT"),
        ("AAGTTTCCGTCCCCTTTCGGGGAATCATTTAGAAAAT", "TGTACTACTATGCGGTATTCCATCTGAAGGATGGCGGCTAC"),
        ("GGGTTTCCGTCCCCTTCGGGGAATCATTTAGAAAATA", "ATCACATTCA"),
    ]
    array_seq = ''.join(repeat + spacer for repeat, spacer in repeat_spacers)
    return 'A' * 3831 + array_seq + 'A' * 100
