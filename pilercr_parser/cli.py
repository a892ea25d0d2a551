#!/usr/bin/env python3
"""
Parse PILER-CR reports into array and repeat-spacer tables.

Usage:
    pilercr-parse --input <pilercr.txt> [--genome-id <id>] [--genome-fasta <fna>] \
        --arrays-tsv <arrays.tsv> --repeat-spacers-tsv <repeat_spacers.tsv> \
        [--spacers-fasta <spacers.fasta>]

    pilercr-parse --samplesheet <samples.tsv> \
        --arrays-tsv <all_arrays.tsv> --repeat-spacers-tsv <all_repeat_spacers.tsv>
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from pilercr_parser.common import genome_for, load_samplesheet, report_for
from pilercr_parser.errors import PilercrParseError
from pilercr_parser.parsers import parse
from pilercr_parser.tables import (
    assign_strands,
    build_tables,
    get_empty_arrays_df,
    get_empty_repeat_spacers_df,
    load_genome_sequences,
    write_spacers_fasta,
    write_tables,
)


def parse_report(
    report_path: str,
    genome_id: str,
    genome_fasta: Optional[str] = None
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Parse one PILER-CR report and build its tables.

    Args:
        report_path: Path to PILER-CR text output
        genome_id: Genome identifier for ID prefixing
        genome_fasta: Optional genome FASTA used to check coordinates and strands

    Returns:
        Tuple of (arrays_df, repeat_spacers_df)
    """
    with open(report_path) as f:
        text = f.read()

    arrays = parse(text)
    for array in arrays:
        print(f"{array.accession} has {len(array.repeat_spacers)} repeat-spacers")

    arrays_df, repeat_spacers_df = build_tables(arrays, genome_id)

    if genome_fasta:
        if Path(genome_fasta).exists():
            genome_sequences = load_genome_sequences(genome_fasta)
            arrays_df, repeat_spacers_df = assign_strands(
                arrays_df, repeat_spacers_df, genome_sequences
            )
        else:
            print(f"WARNING: Genome FASTA not found: {genome_fasta}")

    return arrays_df, repeat_spacers_df


def _concat(frames: List[pd.DataFrame], empty: pd.DataFrame) -> pd.DataFrame:
    frames = [df for df in frames if not df.empty]
    if not frames:
        return empty
    return pd.concat(frames, ignore_index=True)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Parse PILER-CR reports, correcting gap-induced coordinate errors'
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--input',
        help='Path to a PILER-CR report (run with -noinfo)'
    )
    source.add_argument(
        '--samplesheet',
        help='Tab-delimited samplesheet of sample, PILER-CR report and optional genome FASTA'
    )
    parser.add_argument(
        '--genome-id',
        help='Genome identifier for --input (default: report file name without extension)'
    )
    parser.add_argument(
        '--genome-fasta',
        help='Genome FASTA for --input, used to verify coordinates and assign strands'
    )
    parser.add_argument(
        '--arrays-tsv', required=True,
        help='Output path for arrays TSV'
    )
    parser.add_argument(
        '--repeat-spacers-tsv', required=True,
        help='Output path for repeat-spacers TSV'
    )
    parser.add_argument(
        '--spacers-fasta',
        help='Optional output path for spacers FASTA'
    )

    args = parser.parse_args(argv)

    if args.input:
        genome_id = args.genome_id or Path(args.input).stem
        jobs = [(genome_id, args.input, args.genome_fasta)]
    else:
        samplesheet = load_samplesheet(args.samplesheet)
        jobs = [
            (sample, report_for(sample, samplesheet), genome_for(sample, samplesheet))
            for sample in samplesheet
        ]

    all_arrays = []
    all_repeat_spacers = []
    for genome_id, report_path, genome_fasta in jobs:
        try:
            arrays_df, repeat_spacers_df = parse_report(report_path, genome_id, genome_fasta)
        except PilercrParseError as e:
            print(f"ERROR: {genome_id}: {e}", file=sys.stderr)
            sys.exit(1)
        all_arrays.append(arrays_df)
        all_repeat_spacers.append(repeat_spacers_df)

    arrays_df = _concat(all_arrays, get_empty_arrays_df())
    repeat_spacers_df = _concat(all_repeat_spacers, get_empty_repeat_spacers_df())

    write_tables(arrays_df, repeat_spacers_df, args.arrays_tsv, args.repeat_spacers_tsv)

    print(f"Parsed {len(arrays_df)} CRISPR arrays from {len(jobs)} reports")
    print(f"  - Repeat-spacers: {len(repeat_spacers_df)}")
    if args.spacers_fasta:
        n_written = write_spacers_fasta(repeat_spacers_df, args.spacers_fasta)
        print(f"  - Spacers written to FASTA: {n_written}")


if __name__ == '__main__':
    main()
