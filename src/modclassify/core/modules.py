"""
Gene module definitions and the module display order.

A gene module is a named, curated set of gene identifiers representing a
molecular programme (for example an osteosarcoma subtype signature derived
from consensus NMF). Module sets are always passed in by the caller; this
package ships only the names of its reference subtypes, never gene lists.

Examples:
    >>> from modclassify.core.modules import GeneModuleSet, resolve_module_order
    >>> modules = GeneModuleSet({
    ...     "Fibroblast-like": ["COL1A1", "COL3A1", "DCN"],
    ...     "Osteoblast-like": ["RUNX2", "SP7", "ALPL"],
    ... })
    >>> resolve_module_order(modules, ["Osteoblast-like", "Chondroblast-like"])
    ['Osteoblast-like', 'Fibroblast-like']
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Optional, Sequence

from modclassify.core.errors import InputError

__all__ = [
    'GeneModuleSet',
    'REFERENCE_MODULE_ORDER',
    'UNCLASSIFIED',
    'resolve_module_order',
]


REFERENCE_MODULE_ORDER: tuple[str, ...] = (
    'Proliferating-like',
    'Osteoblast-like',
    'Chondroblast-like',
    'Fibroblast-like',
)
"""Display order of the built-in osteosarcoma reference subtypes."""

UNCLASSIFIED = 'Unclassified'
"""TopCluster label for a sample whose every module score is missing."""


class GeneModuleSet(Mapping[str, tuple]):
    """
    Validated, ordered mapping from module name to gene identifiers.

    Insertion order is preserved and used as the fallback module order.
    Gene lists are stored as tuples with duplicates removed (first
    occurrence kept). An empty gene list is allowed; such a module simply
    never overlaps the expression matrix.

    Raises:
        InputError: If the mapping is empty, a name is not a non-empty
            string, a name collides with the ``Unclassified`` sentinel, or a
            gene list is not a sequence of identifiers
    """

    def __init__(self, modules: Mapping[str, Iterable[str]]):
        if isinstance(modules, GeneModuleSet):
            self._modules = dict(modules._modules)
            return

        if not isinstance(modules, Mapping):
            raise InputError(
                f"gene modules must be a mapping of module name -> genes, got {type(modules).__name__}"
            )
        if len(modules) == 0:
            raise InputError("gene modules must contain at least one module")

        parsed: dict[str, tuple] = {}
        for name, genes in modules.items():
            if not isinstance(name, str) or not name.strip():
                raise InputError(f"module names must be non-empty strings, got {name!r}")
            if name == UNCLASSIFIED:
                raise InputError(
                    f"module name {UNCLASSIFIED!r} is reserved for samples with no defined score"
                )
            if genes is None or isinstance(genes, (str, bytes)) or not isinstance(genes, Iterable):
                raise InputError(
                    f"module {name!r} must map to a sequence of gene identifiers, got {type(genes).__name__}"
                )
            gene_list = list(genes)
            if any(g is None for g in gene_list):
                raise InputError(f"module {name!r} contains a null gene identifier")
            try:
                parsed[name] = tuple(dict.fromkeys(gene_list))
            except TypeError as e:
                raise InputError(
                    f"module {name!r} contains a gene identifier that is not a scalar value: {e}"
                ) from e

        self._modules = parsed

    def __getitem__(self, name: str) -> tuple:
        return self._modules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    @property
    def names(self) -> list[str]:
        """Module names in insertion order."""
        return list(self._modules)

    def overlap(self, name: str, genes: Iterable[str]) -> list[str]:
        """
        Genes of module ``name`` that are also in ``genes``.

        Keeps the module's own gene order, so averaging is reproducible.
        """
        available = set(genes)
        return [g for g in self._modules[name] if g in available]

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}={len(v)}" for k, v in self._modules.items())
        return f"GeneModuleSet({sizes})"


def resolve_module_order(
    modules: Mapping[str, Iterable[str]],
    preferred: Optional[Sequence[str]] = REFERENCE_MODULE_ORDER,
) -> list[str]:
    """
    Finalize the module order used by every downstream stage.

    Modules named in ``preferred`` come first, in that order; the remaining
    modules follow in the module set's own order. Preferred names that are
    not in the module set are ignored, as are repeats.

    Args:
        modules: Module set (any mapping keyed by module name)
        preferred: Desired display order, or None for mapping order only

    Returns:
        A permutation of the module names with no duplicates or omissions

    Raises:
        InputError: If ``preferred`` is a bare string or holds non-scalar names
    """
    if isinstance(preferred, str):
        raise InputError("preferred module order must be a sequence of names, not a single string")

    names = list(modules)
    try:
        wanted = list(dict.fromkeys(preferred or ()))
    except TypeError as e:
        raise InputError(f"preferred module order must be a sequence of module names: {e}") from e
    head = [m for m in wanted if m in modules]
    tail = [m for m in names if m not in head]
    return head + tail
