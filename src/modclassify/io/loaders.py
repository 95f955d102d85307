"""
Loaders for expression matrices and gene module sets.

Expression matrices are read from delimited text (CSV/TSV) with genes in the
first column and one column per sample. Gene modules are read from YAML/JSON
mappings or GMT files.

Expected expression layout:
    ```
    "",OS_001,OS_002
    RUNX2,1.21,-0.33
    SP7,0.87,NA
    ```
    Empty cells and NA are read as unmeasured (NaN). Duplicate or missing
    gene/sample labels are rejected rather than silently dropped: the
    scoring stages rely on unique labels.

Module file layouts:
    YAML / JSON::

        Osteoblast-like: [RUNX2, SP7, ALPL]
        Fibroblast-like: [COL1A1, COL3A1, DCN]

    GMT (one module per line, tab-separated)::

        Osteoblast-like<TAB>description<TAB>RUNX2<TAB>SP7<TAB>ALPL

Examples:
    >>> from modclassify.io.loaders import load_matrix, load_gene_modules
    >>> matrix = load_matrix("expression.tsv")
    >>> modules = load_gene_modules("modules.yaml")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd
import yaml

from modclassify.core.biomatrix import BioMatrix
from modclassify.core.errors import InputError
from modclassify.core.modules import GeneModuleSet
from modclassify.io.formats import sniff_delimiter

logger = logging.getLogger(__name__)

__all__ = ['load_matrix', 'load_gene_modules']


def load_matrix(path: Path) -> BioMatrix:
    """
    Load a genes × samples expression matrix from delimited text.

    Args:
        path: Path to CSV/TSV file

    Returns:
        BioMatrix with float values (NaN for empty/NA cells)

    Raises:
        FileNotFoundError: If path does not exist
        InputError: If the file is empty or malformed (non-numeric values,
            duplicate or missing labels, infinite values)
    """
    path = _existing_file(path)

    delimiter = sniff_delimiter(path)
    try:
        df = pd.read_csv(path, sep=delimiter, index_col=0)
    except pd.errors.EmptyDataError as e:
        raise InputError(f"Expression file is empty: {path}") from e
    except pd.errors.ParserError as e:
        raise InputError(f"Failed to parse expression file {path}: {e}") from e

    if df.shape[0] == 0:
        raise InputError(f"Expression file contains no genes (rows): {path}")
    if df.shape[1] == 0:
        raise InputError(f"Expression file contains no samples (columns): {path}")

    # pandas renames repeated headers ("S1", "S1.1"), so check the raw header row
    raw_header = pd.read_csv(path, sep=delimiter, header=None, nrows=1).iloc[0, 1:]
    if raw_header.isna().any():
        raise InputError(f"Expression file has {int(raw_header.isna().sum())} unnamed sample column(s): {path}")
    if raw_header.duplicated().any():
        dupes = ", ".join(str(s) for s in raw_header[raw_header.duplicated()].unique()[:5])
        raise InputError(f"Expression file has duplicated sample IDs: {dupes}")

    non_numeric = [c for c, dtype in df.dtypes.items() if not pd.api.types.is_numeric_dtype(dtype)]
    if non_numeric:
        examples = []
        for col in non_numeric[:5]:
            bad = pd.to_numeric(df[col], errors='coerce').isna() & df[col].notna()
            if bad.any():
                gene = bad.idxmax()
                examples.append(f"row '{gene}', col '{col}': {df.at[gene, col]!r}")
        raise InputError(
            "Expression file contains non-numeric values:\n"
            + "\n".join(f"  - {x}" for x in examples)
        )

    n_nan = int(df.isna().to_numpy().sum())
    if n_nan:
        logger.info(f"{n_nan:,} unmeasured values ({100 * n_nan / df.size:.2f}% of data)")

    matrix = BioMatrix(
        data=df.to_numpy(dtype=np.float64),
        feature_ids=pd.Index(df.index),
        sample_ids=pd.Index(df.columns),
    )
    logger.info(f"Loaded {matrix.n_features} genes × {matrix.n_samples} samples from {path}")
    return matrix


def load_gene_modules(path: Path) -> GeneModuleSet:
    """
    Load gene modules from a YAML, JSON or GMT file.

    Args:
        path: Module file (.yaml, .yml, .json or .gmt)

    Returns:
        GeneModuleSet in file order

    Raises:
        FileNotFoundError: If path does not exist
        InputError: If the format is unsupported or the content is not a
            mapping of module name -> gene list
    """
    path = _existing_file(path)
    suffix = path.suffix.lower()

    if suffix == '.gmt':
        modules = _read_gmt(path)
    elif suffix in ('.yaml', '.yml', '.json'):
        try:
            with open(path, 'r') as f:
                modules = yaml.safe_load(f) if suffix != '.json' else json.load(f)
        except yaml.YAMLError as e:
            raise InputError(f"Invalid YAML in module file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise InputError(f"Invalid JSON in module file {path}: {e}") from e
    else:
        raise InputError(
            f"Unsupported module file format: {suffix}. Use .yaml, .yml, .json or .gmt"
        )

    if not isinstance(modules, dict):
        raise InputError(f"Module file must contain a mapping of module name -> genes: {path}")

    module_set = GeneModuleSet(modules)
    logger.info(f"Loaded {len(module_set)} modules from {path}")
    return module_set


def _read_gmt(path: Path) -> dict[str, list[str]]:
    modules: dict[str, list[str]] = {}
    with open(path, 'r') as f:
        for line_no, line in enumerate(f, start=1):
            line = line.rstrip('\n\r')
            if not line.strip():
                continue
            fields = line.split('\t')
            if len(fields) < 2:
                raise InputError(
                    f"{path}:{line_no}: GMT lines need a name and a description column"
                )
            name = fields[0]
            if name in modules:
                raise InputError(f"{path}:{line_no}: duplicated module name {name!r}")
            modules[name] = [g for g in fields[2:] if g]
    return modules


def _existing_file(path) -> Path:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise InputError(f"Path is not a file: {path}")
    return path
