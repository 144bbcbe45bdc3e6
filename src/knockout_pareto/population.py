"""Population data structures for gene knockout optimization.

This module provides the core data structures for representing populations
of genomes in the NSGA-II loop:

- Population: A struct-of-arrays representation of multiple individuals
- IndividualView: A read-only view of a single individual

Both classes are immutable (frozen dataclasses) to enforce functional style.
Rows of ``x`` are gene activation patterns aligned with ``genes``.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from knockout_pareto.genome import Genome


@dataclass(frozen=True)
class IndividualView:
    """Read-only view of a single individual in a population.

    Attributes:
        genes: Gene identifiers shared by the whole population.
        x: Activation pattern for this individual, shape (n_genes,).
        objectives: Fitness vector for this individual, shape (n_obj,), or None.
        rank: Pareto front index (1 = first front), or None if not computed.
        crowding_distance: Crowding distance value, or None if not computed.

    Example:
        >>> pop = Population.from_genomes([Genome.wild_type(["g1", "g2"])])
        >>> pop[0].genome["g1"]
        True
    """

    genes: tuple[str, ...]
    x: np.ndarray
    objectives: np.ndarray | None
    rank: int | None
    crowding_distance: float | None

    @property
    def genome(self) -> Genome:
        """Materialize this individual's activation pattern as a Genome."""
        return Genome(self.genes, self.x)


@dataclass(frozen=True)
class Population:
    """Immutable struct-of-arrays representation of a population.

    All arrays are copied on construction to ensure immutability.

    Attributes:
        genes: Gene identifiers, one per column of x.
        x: Gene activation patterns, bool array of shape (n, n_genes).
        objectives: Fitness vectors, shape (n, n_obj), or None if not evaluated.
        rank: Pareto front indices, shape (n,), or None if not sorted.
        crowding_distance: Crowding distances, shape (n,), or None if not computed.

    Example:
        >>> x = np.array([[True, True], [True, False]])
        >>> obj = np.array([[0.8, 0.0], [0.5, 1.2]])
        >>> pop = Population(genes=("g1", "g2"), x=x, objectives=obj)
        >>> len(pop)
        2
        >>> pop.n_obj
        2
    """

    genes: tuple[str, ...]
    x: np.ndarray
    objectives: np.ndarray | None = None
    rank: np.ndarray | None = None
    crowding_distance: np.ndarray | None = None

    def __post_init__(self) -> None:
        """Validate shapes and dtypes, and copy every array.

        Raises:
            TypeError: If x or an optional field is not a numpy array.
            ValueError: If shapes or dtypes are inconsistent.
        """
        object.__setattr__(self, "genes", tuple(self.genes))

        x = _as_checked_array("x", self.x, ndim=2)
        if x.dtype != np.bool_:
            raise ValueError(f"x must have bool dtype, got {x.dtype}")
        if x.shape[1] != len(self.genes):
            raise ValueError(f"x has {x.shape[1]} columns, expected {len(self.genes)} to match genes")
        object.__setattr__(self, "x", x.copy())
        n = x.shape[0]

        if self.objectives is not None:
            objectives = _as_checked_array("objectives", self.objectives, ndim=2)
            if objectives.shape[0] != n:
                raise ValueError(f"objectives has {objectives.shape[0]} individuals, expected {n} to match x")
            object.__setattr__(self, "objectives", objectives.astype(np.float64))

        # Per-individual selection state
        for name, kind, label in (("rank", np.integer, "integer"), ("crowding_distance", np.floating, "float")):
            value = getattr(self, name)
            if value is None:
                continue
            value = _as_checked_array(name, value, ndim=1)
            if value.shape[0] != n:
                raise ValueError(f"{name} has {value.shape[0]} elements, expected {n} to match x")
            if not np.issubdtype(value.dtype, kind):
                raise ValueError(f"{name} must have {label} dtype, got {value.dtype}")
            object.__setattr__(self, name, value.copy())

    @classmethod
    def from_genomes(cls, genomes: Sequence[Genome], objectives: np.ndarray | None = None) -> "Population":
        """Build a population from genomes sharing one gene universe.

        Args:
            genomes: At least one genome; all must have identical gene order.
            objectives: Optional fitness vectors aligned with genomes.

        Raises:
            ValueError: If genomes is empty or the gene sets differ.
        """
        if len(genomes) == 0:
            raise ValueError("cannot build a population from zero genomes")
        genes = genomes[0].genes
        for g in genomes[1:]:
            if g.genes != genes:
                raise ValueError("all genomes in a population must share the same genes")
        x = np.stack([g.active for g in genomes])
        return cls(genes=genes, x=x, objectives=objectives)

    def __len__(self) -> int:
        return self.x.shape[0]

    def __getitem__(self, idx: int) -> IndividualView:
        """Get a read-only view of a single individual.

        Args:
            idx: Index of the individual (supports negative indexing).

        Raises:
            TypeError: If idx is not an integer.
            IndexError: If idx is out of bounds.
        """
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"indices must be integers, got {type(idx).__name__}")

        n = len(self)
        original_idx = idx
        if idx < 0:
            idx = n + idx
        if idx < 0 or idx >= n:
            raise IndexError(f"index {original_idx} is out of bounds for population with {n} individuals")

        return IndividualView(
            genes=self.genes,
            x=self.x[idx],
            objectives=self.objectives[idx] if self.objectives is not None else None,
            rank=int(self.rank[idx]) if self.rank is not None else None,
            crowding_distance=float(self.crowding_distance[idx]) if self.crowding_distance is not None else None,
        )

    def take(self, indices: np.ndarray) -> "Population":
        """Return a new population holding the given rows, in the given order.

        Each kept individual keeps its rank and crowding distance as computed
        in this population, so a subset such as the Pareto front still
        reports them.
        """
        indices = np.asarray(indices, dtype=np.intp)
        return Population(
            genes=self.genes,
            x=self.x[indices],
            objectives=self.objectives[indices] if self.objectives is not None else None,
            rank=self.rank[indices] if self.rank is not None else None,
            crowding_distance=self.crowding_distance[indices] if self.crowding_distance is not None else None,
        )

    def genomes(self) -> list[Genome]:
        """Return every individual as a Genome."""
        return [Genome(self.genes, row) for row in self.x]

    @property
    def n_individuals(self) -> int:
        return self.x.shape[0]

    @property
    def n_genes(self) -> int:
        return self.x.shape[1]

    @property
    def n_obj(self) -> int | None:
        """Return the number of objectives, or None if not evaluated."""
        if self.objectives is None:
            return None
        return self.objectives.shape[1]


def _as_checked_array(name: str, value: object, ndim: int) -> np.ndarray:
    if not isinstance(value, np.ndarray):
        raise TypeError(f"{name} must be a numpy array, got {type(value).__name__}")
    if value.ndim != ndim:
        raise ValueError(f"{name} must be {ndim}D, got shape {value.shape}")
    return value
