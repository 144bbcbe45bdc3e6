"""Uniform parent selection with replacement."""

import numpy as np

from knockout_pareto.population import Population


def uniform_selection():
    """Create a uniform parent selector.

    Every survivor is equally likely to be drawn as a parent, and the same
    survivor may be drawn any number of times. Rank and crowding distance are
    ignored: survival already applied the selection pressure.

    Returns:
        A ParentSelector callable that selects parent indices.

    Example:
        >>> selector = uniform_selection()
        >>> parents = selector(pop, n_parents=50, rng=rng)
    """

    def selector(
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        if len(pop) == 0:
            raise ValueError("cannot select parents from an empty population")
        return rng.integers(0, len(pop), size=n_parents).astype(np.intp)

    return selector
