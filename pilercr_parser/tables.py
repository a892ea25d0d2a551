"""
Convert parsed PILER-CR arrays into tables and FASTA with deterministic IDs.

Outputs:
- crispr_arrays.tsv (one row per array)
- crispr_repeat_spacers.tsv (one row per repeat-spacer, IDs based on parent array)
- crispr_spacers.fasta (non-empty spacers only)

Table coordinates are GFF-style: 1-based, inclusive on both ends. The
records returned by parse() stay zero-indexed and end-exclusive.
"""
import math
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from pilercr_parser.correction import GAP
from pilercr_parser.records import Array

ARRAY_COLUMNS = [
    'genome_id', 'feature_type', 'ID', 'tool_id', 'contig', 'start', 'end', 'strand',
    'order', 'repeat_sequence', 'repeat_length', 'n_repeats', 'n_spacers',
    'spacer_length_avg', 'gap_count'
]

REPEAT_SPACER_COLUMNS = [
    'genome_id', 'feature_type', 'ID', 'Parent', 'contig', 'start', 'end', 'strand',
    'repeat_idx', 'repeat_start', 'repeat_end', 'repeat', 'repeat_length',
    'spacer_start', 'spacer_end', 'spacer', 'spacer_length', 'entropy'
]


def calculate_entropy(seq: str) -> float:
    """Calculate 3-mer entropy for a sequence.

    Low entropy indicates repetitive/low-complexity sequence.
    """
    if len(seq) < 3:
        return 0.0
    kmers = [seq[i:i+3] for i in range(len(seq)-2)]
    counts = Counter(kmers)
    total = len(kmers)
    entropy = 0.0
    for count in counts.values():
        p = count / total
        entropy -= p * math.log2(p)
    return round(entropy, 6)


def get_empty_arrays_df() -> pd.DataFrame:
    """Return empty DataFrame with array schema."""
    return pd.DataFrame(columns=ARRAY_COLUMNS)


def get_empty_repeat_spacers_df() -> pd.DataFrame:
    """Return empty DataFrame with repeat-spacer schema."""
    return pd.DataFrame(columns=REPEAT_SPACER_COLUMNS)


def build_tables(arrays: Sequence[Array], genome_id: str) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Build array and repeat-spacer tables for one genome.

    Arrays are sorted by contig and start before IDs are assigned, so the
    same report always yields the same IDs:
    ``{genome_id}__CRA0001`` for arrays, ``{array_id}_rs001`` for repeat-spacers.

    Args:
        arrays: Arrays returned by parse()
        genome_id: Genome identifier for ID prefixing

    Returns:
        Tuple of (arrays_df, repeat_spacers_df)
    """
    if not arrays:
        return get_empty_arrays_df(), get_empty_repeat_spacers_df()

    array_rows: List[dict] = []
    repeat_spacer_rows: List[dict] = []

    ordered = sorted(arrays, key=lambda a: (a.accession, a.start))
    for i, array in enumerate(ordered, start=1):
        array_id = f"{genome_id}__CRA{i:04d}"
        consensus = array.consensus_repeat_sequence
        spacer_lengths = [len(rs.spacer) for rs in array.repeat_spacers if rs.spacer]

        # Each gap column shortens the reconstructed repeat by one base
        gap_count = sum(len(consensus) - len(rs.repeat) for rs in array.repeat_spacers)

        spacer_length_avg = None
        if spacer_lengths:
            spacer_length_avg = round(sum(spacer_lengths) / len(spacer_lengths), 2)

        array_rows.append({
            'genome_id': genome_id,
            'feature_type': 'CRISPR_array',
            'ID': array_id,
            'tool_id': f"{array.accession}_{array.order + 1}",
            'contig': array.accession,
            'start': array.start + 1,
            'end': array.end,
            'strand': '.',  # Updated by assign_strands
            'order': array.order,
            'repeat_sequence': consensus,
            'repeat_length': len(consensus.replace(GAP, '')),
            'n_repeats': len(array.repeat_spacers),
            'n_spacers': len(spacer_lengths),
            'spacer_length_avg': spacer_length_avg,
            'gap_count': gap_count
        })

        for idx, rs in enumerate(array.repeat_spacers, start=1):
            has_spacer = bool(rs.spacer)
            repeat_spacer_rows.append({
                'genome_id': genome_id,
                'feature_type': 'CRISPR_repeat_spacer',
                'ID': f"{array_id}_rs{idx:03d}",
                'Parent': array_id,
                'contig': array.accession,
                'start': rs.start + 1,
                'end': rs.end,
                'strand': '.',
                'repeat_idx': idx,
                'repeat_start': rs.repeat_start + 1,
                'repeat_end': rs.repeat_end,
                'repeat': rs.repeat,
                'repeat_length': len(rs.repeat),
                'spacer_start': rs.spacer_start + 1 if has_spacer else None,
                'spacer_end': rs.spacer_end if has_spacer else None,
                'spacer': rs.spacer,
                'spacer_length': len(rs.spacer),
                'entropy': calculate_entropy(rs.spacer)
            })

    arrays_df = pd.DataFrame(array_rows, columns=ARRAY_COLUMNS)
    repeat_spacers_df = pd.DataFrame(repeat_spacer_rows, columns=REPEAT_SPACER_COLUMNS)
    # Rows without a spacer have no spacer coordinates; keep the rest integral
    for column in ['spacer_start', 'spacer_end']:
        repeat_spacers_df[column] = repeat_spacers_df[column].astype('Int64')
    return arrays_df, repeat_spacers_df


def load_genome_sequences(genome_fasta: str) -> Dict[str, str]:
    """Load genome sequences into a dict keyed by contig ID."""
    sequences = {}
    for record in SeqIO.parse(genome_fasta, 'fasta'):
        sequences[record.id] = str(record.seq).upper()
    return sequences


def determine_spacer_strand(
    contig_seq: str,
    spacer_seq: str,
    spacer_start: int,
    spacer_end: int
) -> str:
    """Compare a spacer with the genome at its corrected coordinates.

    PILER-CR prints spacers as they appear on the forward strand, so a
    forward match confirms the gap correction. A reverse-complement match is
    reported as well in case the report was produced from a reversed contig.

    Args:
        contig_seq: Full contig sequence (uppercase)
        spacer_seq: Spacer sequence from the report
        spacer_start: 1-based start position of spacer
        spacer_end: 1-based, inclusive end position of spacer

    Returns:
        '+' if forward strand, '-' if reverse strand, '.' if no match
    """
    if not spacer_seq or not contig_seq:
        return '.'

    start_idx = spacer_start - 1
    end_idx = spacer_end

    if start_idx < 0 or end_idx > len(contig_seq):
        return '.'

    genomic_seq = contig_seq[start_idx:end_idx]
    spacer_upper = spacer_seq.upper()

    if genomic_seq == spacer_upper:
        return '+'

    spacer_revcomp = str(Seq(spacer_upper).reverse_complement())
    if genomic_seq == spacer_revcomp:
        return '-'

    return '.'


def assign_strands(
    arrays_df: pd.DataFrame,
    repeat_spacers_df: pd.DataFrame,
    genome_sequences: Dict[str, str]
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Check spacer coordinates against the genome and set array strands.

    Every non-empty spacer gets ``coords_verified`` (True when the genome
    holds the spacer, in either orientation, at its coordinates). The array
    strand is taken from its first non-empty spacer and copied to all of its
    repeat-spacers.

    Args:
        arrays_df: Arrays table from build_tables()
        repeat_spacers_df: Repeat-spacer table from build_tables()
        genome_sequences: Dict mapping contig IDs to sequences

    Returns:
        Tuple of updated copies of (arrays_df, repeat_spacers_df)
    """
    arrays_df = arrays_df.copy()
    repeat_spacers_df = repeat_spacers_df.copy()
    repeat_spacers_df['coords_verified'] = None
    if repeat_spacers_df.empty:
        return arrays_df, repeat_spacers_df

    repeat_spacers_df['coords_verified'] = repeat_spacers_df['coords_verified'].astype('object')
    missing_contigs = set()
    first_strand_per_array: Dict[str, str] = {}
    mismatches = 0

    for idx, row in repeat_spacers_df.iterrows():
        spacer = row['spacer']
        if not spacer:
            continue

        contig_seq = genome_sequences.get(row['contig'])
        if contig_seq is None:
            if row['contig'] not in missing_contigs:
                print(f"WARNING: Contig {row['contig']} not found in genome FASTA for {row['Parent']}")
                missing_contigs.add(row['contig'])
            continue

        strand = determine_spacer_strand(
            contig_seq, spacer, int(row['spacer_start']), int(row['spacer_end'])
        )
        repeat_spacers_df.at[idx, 'coords_verified'] = strand != '.'
        if strand == '.':
            mismatches += 1
        first_strand_per_array.setdefault(row['Parent'], strand)

    if mismatches:
        print(f"WARNING: {mismatches} spacers do not match the genome at their coordinates")

    arrays_df['strand'] = arrays_df['ID'].map(first_strand_per_array).fillna('.')
    repeat_spacers_df['strand'] = repeat_spacers_df['Parent'].map(first_strand_per_array).fillna('.')
    return arrays_df, repeat_spacers_df


def write_tables(
    arrays_df: pd.DataFrame,
    repeat_spacers_df: pd.DataFrame,
    arrays_tsv: str,
    repeat_spacers_tsv: str
) -> None:
    """Write both tables as TSV, creating parent directories."""
    for path in [arrays_tsv, repeat_spacers_tsv]:
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    arrays_df.to_csv(arrays_tsv, sep='\t', index=False, na_rep='NULL')
    repeat_spacers_df.to_csv(repeat_spacers_tsv, sep='\t', index=False, na_rep='NULL')


def write_spacers_fasta(repeat_spacers_df: pd.DataFrame, output_fasta: str) -> int:
    """
    Write every non-empty spacer to FASTA.

    Args:
        repeat_spacers_df: Repeat-spacer table from build_tables()
        output_fasta: Output path

    Returns:
        Number of records written
    """
    Path(output_fasta).parent.mkdir(parents=True, exist_ok=True)

    records: List[SeqRecord] = []
    for _, row in repeat_spacers_df.iterrows():
        spacer: Optional[str] = row['spacer']
        if not spacer:
            continue
        description = f"{row['contig']}:{int(row['spacer_start'])}-{int(row['spacer_end'])}"
        records.append(SeqRecord(Seq(spacer), id=row['ID'], description=description))

    return SeqIO.write(records, output_fasta, 'fasta')
