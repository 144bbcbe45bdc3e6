"""Protocol definitions for the pluggable parts of the optimizer.

The optimizer has three seams where behaviour is supplied from outside:

1. **Fitness evaluation**: a callable mapping one Genome to a fixed-size
   fitness vector. Usually a flux balance analysis over a metabolic model.

2. **Parent Selection**: choosing survivors to produce offspring from.
   The default draws parents uniformly with replacement; crowded tournament
   selection is also available.

3. **Survivor Selection**: determining which individuals of the merged
   survivors + offspring population enter the next generation. The NSGA-II
   strategy ranks by front and crowding distance.

Example usage:
    ```python
    def my_loop(
        evaluate: FitnessEvaluator,
        parent_selector: ParentSelector,
        survivor_selector: SurvivorSelector,
        ...
    ):
        parent_indices = parent_selector(pop, n_parents=50, rng=rng, **state)
        survivor_indices, state = survivor_selector(merged_pop, n_survivors=50)
    ```
"""

from typing import Protocol, runtime_checkable

import numpy as np

from knockout_pareto.genome import Genome
from knockout_pareto.population import Population


@runtime_checkable
class FitnessEvaluator(Protocol):
    """Protocol for fitness oracles.

    An evaluator maps one genome to a fitness vector of fixed length k >= 2,
    where bigger is better in every dimension. It must be a (near-)
    deterministic function of the genome, and it must return a defined, poor
    fitness for infeasible genomes rather than raise (see
    ``knockout_pareto.evaluation.guarded``).
    """

    def __call__(self, genome: Genome) -> np.ndarray:
        """Evaluate one genome.

        Args:
            genome: Gene activation mapping to evaluate.

        Returns:
            Array of shape (k,) with objective values.
        """
        ...


@runtime_checkable
class ParentSelector(Protocol):
    """Protocol for parent selection strategies.

    Parameters:
        pop: The current survivors to select parents from.
        n_parents: Number of parent indices to return. The same individual
            may be selected multiple times.
        rng: NumPy random number generator for reproducible selection.
        **kwargs: Survival state, typically 'rank' and 'crowding_distance'
            arrays aligned with pop.

    Returns:
        Array of shape (n_parents,) with values in range [0, len(pop)).
    """

    def __call__(
        self,
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        ...


@runtime_checkable
class SurvivorSelector(Protocol):
    """Protocol for survivor selection strategies.

    Parameters:
        pop: The evaluated, deduplicated population to select survivors from.
        n_survivors: Target number of survivors. Fewer are returned when the
            population is smaller than the target.
        **kwargs: Strategy-specific input data.

    Returns:
        A tuple of:
        - indices: Unique indices into pop, in order of preference.
        - state: Dictionary of arrays aligned with the selected survivors.
            For NSGA-II this is {'rank': ..., 'crowding_distance': ...}.
    """

    def __call__(
        self,
        pop: Population,
        n_survivors: int,
        **kwargs: np.ndarray,
    ) -> tuple[np.ndarray, dict[str, np.ndarray]]:
        ...
