"""Genome representation for gene knockout optimization.

A Genome maps every gene of a metabolic network to its activation state.
The gene universe is fixed for a whole run, so all genomes of a run share the
same ordered key set. Genomes are immutable; mutation always yields a new one.
"""

from collections.abc import Iterable, Iterator, Mapping

import numpy as np


class Genome(Mapping[str, bool]):
    """Immutable ordered mapping from gene identifier to activation state.

    The activation pattern is stored as a read-only numpy bool array aligned
    with ``genes``, which makes conversion to and from population rows cheap.

    Attributes:
        genes: Gene identifiers in a fixed order.
        active: Read-only bool array of shape (n_genes,).

    Example:
        >>> g = Genome.wild_type(["b0001", "b0002"])
        >>> g["b0001"]
        True
        >>> g.knockouts
        ()
    """

    __slots__ = ("_genes", "_active", "_index")

    def __init__(self, genes: Iterable[str], active: np.ndarray | Iterable[bool]) -> None:
        genes = tuple(genes)
        if len(set(genes)) != len(genes):
            raise ValueError("gene identifiers must be unique")

        active = np.array(active, dtype=bool)
        if active.ndim != 1:
            raise ValueError(f"active must be 1D, got shape {active.shape}")
        if active.shape[0] != len(genes):
            raise ValueError(f"active has {active.shape[0]} entries, expected {len(genes)} to match genes")
        active.setflags(write=False)

        self._genes = genes
        self._active = active
        self._index = {gene: i for i, gene in enumerate(genes)}

    @classmethod
    def wild_type(cls, genes: Iterable[str]) -> "Genome":
        """Create the genome with every gene active."""
        genes = tuple(genes)
        return cls(genes, np.ones(len(genes), dtype=bool))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, bool]) -> "Genome":
        """Create a genome from any gene -> bool mapping, keeping its order."""
        return cls(mapping.keys(), [bool(v) for v in mapping.values()])

    @property
    def genes(self) -> tuple[str, ...]:
        return self._genes

    @property
    def active(self) -> np.ndarray:
        return self._active

    @property
    def knockouts(self) -> tuple[str, ...]:
        """Genes that are switched off, in gene order."""
        return tuple(gene for gene, on in zip(self._genes, self._active) if not on)

    def with_active(self, active: np.ndarray | Iterable[bool]) -> "Genome":
        """Return a new genome over the same genes with a new activation pattern."""
        return Genome(self._genes, active)

    def __getitem__(self, gene: str) -> bool:
        return bool(self._active[self._index[gene]])

    def __iter__(self) -> Iterator[str]:
        return iter(self._genes)

    def __len__(self) -> int:
        return len(self._genes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Genome):
            return self._genes == other._genes and np.array_equal(self._active, other._active)
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash((self._genes, self._active.tobytes()))

    def __repr__(self) -> str:
        return f"Genome(n_genes={len(self._genes)}, knockouts={list(self.knockouts)})"
