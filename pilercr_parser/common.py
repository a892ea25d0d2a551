"""
Samplesheet helpers for running the parser over many PILER-CR reports.
"""
import csv

# Column name alternatives for common file types
SAMPLE_COLUMNS = ("sample", "genome_id", "file_name", "id", "name")
REPORT_COLUMNS = ("pilercr", "pilercr_txt", "report", "path_to_pilercr_output")
GENOME_COLUMNS = ("genome", "genome_fasta", "path_to_genomic_FASTA", "fna")


def load_samplesheet(path):
    """Load samplesheet and key its rows by sample identifier.

    Supports two formats:
    - Header format: one of SAMPLE_COLUMNS, one of REPORT_COLUMNS and
      optionally one of GENOME_COLUMNS, in any order
    - Headerless format (2 or 3 columns): sample, report, [genome]

    Args:
        path: Path to tab-delimited samplesheet file

    Returns:
        dict: Mapping of sample_id -> row dict

    Raises:
        ValueError: If a row is missing its sample identifier
    """
    with open(path, newline="") as handle:
        first_line = handle.readline().strip()
        handle.seek(0)

        fields = first_line.split('\t') if '\t' in first_line else first_line.split()
        has_header = bool(fields) and fields[0].lower() in SAMPLE_COLUMNS

        if has_header:
            reader = csv.DictReader(handle, delimiter="\t")
            rows = list(reader)
        else:
            rows = []
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                # Split by tab, fallback to whitespace
                fields = line.split('\t') if '\t' in line else line.split()
                if len(fields) >= 2:
                    rows.append({
                        'sample': fields[0],
                        'pilercr': fields[1],
                        'genome': fields[2] if len(fields) > 2 else None,
                    })

    samplesheet = {}
    for row in rows:
        sample_id = None
        for column in SAMPLE_COLUMNS:
            if row.get(column):
                sample_id = row[column]
                break
        if not sample_id:
            raise ValueError(f"Row missing sample identifier: {row}")
        samplesheet[sample_id] = row

    return samplesheet


def report_for(sample, samplesheet):
    """Get PILER-CR report path for a sample.

    Raises:
        ValueError: If sample not found or no report column exists
    """
    row = samplesheet.get(sample)
    if row is None:
        raise ValueError(f"Sample {sample} is missing from the samplesheet.")
    for column in REPORT_COLUMNS:
        path = row.get(column)
        if path:
            return path
    raise ValueError(f"No PILER-CR report column found for {sample}. Expected one of {REPORT_COLUMNS}.")


def genome_for(sample, samplesheet):
    """Get genome FASTA path for a sample, or None if not present."""
    row = samplesheet.get(sample)
    if row is None:
        raise ValueError(f"Sample {sample} is missing from the samplesheet.")
    for column in GENOME_COLUMNS:
        path = row.get(column)
        if path:
            return path
    return None
