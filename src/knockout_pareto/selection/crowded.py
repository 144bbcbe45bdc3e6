"""Binary crowded tournament for parent selection.

An alternative to uniform parent sampling that biases reproduction towards
better fronts and, within a front, towards isolated individuals. It needs the
'rank' and 'crowding_distance' state produced by survivor selection.
"""

import numpy as np

from knockout_pareto.population import Population
from knockout_pareto.survival.nsga2 import crowded_order


def crowded_tournament(tournament_size: int = 2):
    """Create a crowded tournament parent selector.

    Each slot draws ``tournament_size`` contestants with replacement; the one
    first in crowded order (lower front, then larger crowding distance) wins.

    Args:
        tournament_size: Contestants per tournament. Default 2.

    Returns:
        A ParentSelector callable.

    Raises:
        ValueError: If tournament_size is not positive.

    Example:
        >>> selector = crowded_tournament()
        >>> parents = selector(pop, 20, rng, rank=rank, crowding_distance=cd)
    """
    if tournament_size <= 0:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def selector(
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        for key in ("rank", "crowding_distance"):
            if key not in kwargs:
                raise ValueError(f"crowded tournament selection requires '{key}' in kwargs")
        if len(pop) == 0:
            raise ValueError("cannot select parents from an empty population")

        # Position in crowded order; smaller is better
        order = crowded_order(kwargs["rank"], kwargs["crowding_distance"])
        position = np.empty(len(order), dtype=np.intp)
        position[order] = np.arange(len(order))

        contestants = rng.integers(0, len(pop), size=(n_parents, tournament_size))
        winners = np.argmin(position[contestants], axis=1)
        return contestants[np.arange(n_parents), winners].astype(np.intp)

    return selector
