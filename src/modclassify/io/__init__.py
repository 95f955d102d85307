"""Input/output for expression matrices, gene modules and results."""

from modclassify.io.loaders import load_matrix, load_gene_modules
from modclassify.io.writers import write_score_table, write_heatmap_inputs
from modclassify.io.formats import sniff_delimiter

__all__ = [
    'load_matrix',
    'load_gene_modules',
    'write_score_table',
    'write_heatmap_inputs',
    'sniff_delimiter',
]
