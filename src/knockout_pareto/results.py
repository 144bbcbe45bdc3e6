"""Result type of a knockout optimization run.

NSGA2Result bundles the final survivors with their front indices, crowding
distances and run counters. It is immutable (frozen dataclass) and copies its
arrays on construction. Its population carries the same rank and crowding
distance, so individual views and the Pareto front report them too.

Reported fitness values are the rounded values that ranking worked on, so the
Pareto front a user sees is exactly the one the optimizer selected.
"""

from dataclasses import dataclass, replace

import numpy as np

from knockout_pareto.genome import Genome
from knockout_pareto.population import Population


@dataclass(frozen=True)
class NSGA2Result:
    """Results from a knockout NSGA-II run.

    Attributes:
        population: The final survivors, with rounded objectives.
        rank: Front index for each individual, shape (n,). Front 1 is the
            Pareto front approximation.
        crowding_distance: Crowding distance for each individual, shape (n,).
            Individuals at the extremes of their front have infinite distance.
        generations: Number of generations completed.
        evaluations: Total number of fitness evaluations performed.

    Example:
        >>> result = nsga2(genes, evaluate, OptimizerConfig(pop_size=20, n_generations=10))
        >>> for genome, fitness in result.pareto_genomes():
        ...     print(genome.knockouts, fitness)
    """

    population: Population
    rank: np.ndarray
    crowding_distance: np.ndarray
    generations: int
    evaluations: int

    def __post_init__(self) -> None:
        """Validate shapes and copy arrays for immutability.

        Raises:
            TypeError: If rank or crowding_distance are not numpy arrays.
            ValueError: If array shapes are inconsistent or objectives are missing.
        """
        n = len(self.population)

        if self.population.objectives is None:
            raise ValueError("result population must have objectives")

        if not isinstance(self.rank, np.ndarray):
            raise TypeError(f"rank must be a numpy array, got {type(self.rank).__name__}")
        if self.rank.ndim != 1:
            raise ValueError(f"rank must be 1D, got shape {self.rank.shape}")
        if self.rank.shape[0] != n:
            raise ValueError(f"rank has {self.rank.shape[0]} elements, expected {n} to match population size")

        if not isinstance(self.crowding_distance, np.ndarray):
            raise TypeError(f"crowding_distance must be a numpy array, got {type(self.crowding_distance).__name__}")
        if self.crowding_distance.ndim != 1:
            raise ValueError(f"crowding_distance must be 1D, got shape {self.crowding_distance.shape}")
        if self.crowding_distance.shape[0] != n:
            raise ValueError(
                f"crowding_distance has {self.crowding_distance.shape[0]} elements, expected {n} to match population size"
            )

        object.__setattr__(self, "rank", self.rank.copy())
        object.__setattr__(self, "crowding_distance", self.crowding_distance.copy())

        # Individuals report the same front and crowding as the result
        object.__setattr__(
            self,
            "population",
            replace(self.population, rank=self.rank, crowding_distance=self.crowding_distance),
        )

    @property
    def objectives(self) -> np.ndarray:
        """Fitness vectors of the final survivors, shape (n, n_obj)."""
        assert self.population.objectives is not None  # Checked in __post_init__
        return self.population.objectives

    @property
    def pareto_front(self) -> Population:
        """Extract the front-1 individuals as a new Population."""
        return self.population.take(np.where(self.rank == 1)[0])

    def pareto_genomes(self) -> list[tuple[Genome, np.ndarray]]:
        """List front-1 genomes with their fitness vectors.

        Sorted by the first objective, best first, with ties broken by the
        remaining objectives.

        Returns:
            List of (genome, fitness) pairs.
        """
        front = self.pareto_front
        assert front.objectives is not None
        order = np.lexsort(tuple(-front.objectives[:, m] for m in reversed(range(front.n_obj))))
        return [(Genome(front.genes, front.x[i]), front.objectives[i].copy()) for i in order]
