"""Offspring creation from selected survivors."""

from collections.abc import Callable

import numpy as np

from knockout_pareto.population import Population
from knockout_pareto.protocols import ParentSelector


def create_offspring(
    pop: Population,
    n_offspring: int,
    mutate: Callable[[np.ndarray], np.ndarray],
    rng: np.random.Generator,
    select: ParentSelector,
    crossover: Callable[[np.ndarray, np.ndarray], np.ndarray] | None = None,
    **state: np.ndarray,
) -> np.ndarray:
    """Create offspring via parent selection, optional crossover, and mutation.

    Without crossover, one parent is drawn per offspring slot and mutated.
    With crossover, two parents are drawn per slot, crossed, and the child is
    mutated.

    Args:
        pop: Survivors to draw parents from.
        n_offspring: Number of offspring to create.
        mutate: Mutation function. Signature: (n_genes,) -> (n_genes,)
        rng: Random number generator for parent selection.
        select: Parent selection strategy.
        crossover: Optional crossover function.
            Signature: (n_genes,), (n_genes,) -> (n_genes,)
        **state: Survival state forwarded to the selector.

    Returns:
        Bool array of shape (n_offspring, n_genes) with unevaluated offspring.

    Example:
        >>> offspring = create_offspring(pop, 50, bit_flip_mutation(0.02), rng, uniform_selection())
        >>> offspring.shape
        (50, pop.n_genes)
    """
    if n_offspring <= 0:
        return np.empty((0, pop.n_genes), dtype=bool)

    if crossover is None:
        parent_idx = select(pop, n_offspring, rng, **state)
        children = [pop.x[i] for i in parent_idx]
    else:
        parent_idx = select(pop, n_offspring * 2, rng, **state)
        children = [crossover(pop.x[parent_idx[2 * i]], pop.x[parent_idx[2 * i + 1]]) for i in range(n_offspring)]

    return np.stack([np.asarray(mutate(child), dtype=bool) for child in children])
