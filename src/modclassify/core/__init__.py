"""
Core data structures for module-based subtype classification.

This module provides the foundational types that the scoring stages build on:

1. BioMatrix: Validated expression matrix (genes × samples)
2. GeneModuleSet: Ordered mapping of module name -> gene identifiers
3. InputError: Raised for any malformed input, before computation starts

Examples:
    >>> from modclassify.core import BioMatrix, GeneModuleSet, resolve_module_order
    >>> matrix = BioMatrix.from_dataframe(expr_df)
    >>> modules = GeneModuleSet(gene_lists)
    >>> order = resolve_module_order(modules)
"""

from modclassify.core.biomatrix import BioMatrix
from modclassify.core.errors import InputError
from modclassify.core.modules import (
    GeneModuleSet,
    REFERENCE_MODULE_ORDER,
    UNCLASSIFIED,
    resolve_module_order,
)

__all__ = [
    'BioMatrix',
    'InputError',
    'GeneModuleSet',
    'REFERENCE_MODULE_ORDER',
    'UNCLASSIFIED',
    'resolve_module_order',
]
