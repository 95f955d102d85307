"""
modclassify - Gene-Module Subtype Classification for Osteosarcoma

Scores tumour samples against curated gene modules, assigns each sample to
its dominant module (TopCluster), quantifies how unambiguous that assignment
is (SimplicityScore) and prepares an ordered heatmap of the result.
"""

__version__ = "0.1.0"

from modclassify.core.biomatrix import BioMatrix
from modclassify.core.errors import InputError
from modclassify.core.modules import GeneModuleSet, REFERENCE_MODULE_ORDER, UNCLASSIFIED
from modclassify.scoring.module_scores import compute_module_scores
from modclassify.scoring.simplicity import SimplicityMethod, add_simplicity_scores
from modclassify.scoring.ordering import order_and_prepare_heatmap
from modclassify.pipeline import ClassificationResult, classify_samples

__all__ = [
    "BioMatrix",
    "InputError",
    "GeneModuleSet",
    "REFERENCE_MODULE_ORDER",
    "UNCLASSIFIED",
    "compute_module_scores",
    "SimplicityMethod",
    "add_simplicity_scores",
    "order_and_prepare_heatmap",
    "ClassificationResult",
    "classify_samples",
]
