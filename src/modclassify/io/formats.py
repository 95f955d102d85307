"""
Delimiter detection for tabular expression and gene-set files.
"""

from __future__ import annotations

import csv
from pathlib import Path

__all__ = ['sniff_delimiter', 'DELIMITER_BY_SUFFIX']

DELIMITER_BY_SUFFIX = {
    '.csv': ',',
    '.tsv': '\t',
    '.tab': '\t',
}


def sniff_delimiter(path: Path, sample_size: int = 8192) -> str:
    """
    Detect the delimiter of a tabular file.

    Known extensions (.csv, .tsv, .tab) decide directly. Otherwise uses
    Python's csv.Sniffer with a first-line count as fallback.

    Args:
        path: Path to data file
        sample_size: Bytes to sample for detection

    Returns:
        Detected delimiter character ('\\t', ',' or ';')

    Raises:
        ValueError: If delimiter cannot be determined
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in DELIMITER_BY_SUFFIX:
        return DELIMITER_BY_SUFFIX[suffix]

    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        sample = f.read(sample_size)

    try:
        dialect = csv.Sniffer().sniff(sample, delimiters='\t,;')
        return dialect.delimiter
    except csv.Error:
        pass

    # Fallback: count delimiter occurrences in first line
    first_line = sample.split('\n')[0]
    counts = {
        '\t': first_line.count('\t'),
        ',': first_line.count(','),
        ';': first_line.count(';'),
    }

    if max(counts.values()) == 0:
        raise ValueError(f"Could not detect delimiter in {path}")

    return max(counts, key=counts.get)
