"""NSGA-II survivor selection strategy.

Survivors are chosen by Pareto front first and crowding distance second, so
better fronts always win and, within the front that only partially fits, the
most isolated individuals are preferred.
"""

import numpy as np

from knockout_pareto.population import Population
from knockout_pareto.primitives import crowding_distance_by_front, non_dominated_sort


def crowded_order(rank: np.ndarray, crowding_distance: np.ndarray) -> np.ndarray:
    """Return indices sorted by ascending front, then descending crowding distance.

    The sort is stable, so individuals tied on both keys keep their input
    order and repeated calls give identical results.

    Args:
        rank: Front indices. Shape (n,).
        crowding_distance: Crowding distances. Shape (n,).

    Returns:
        Integer array of shape (n,), a permutation of range(n).

    Example:
        >>> crowded_order(np.array([2, 1, 1]), np.array([np.inf, 0.5, np.inf]))
        array([2, 1, 0])
    """
    # lexsort sorts by the last key first
    return np.lexsort((-crowding_distance, rank)).astype(np.intp)


def nsga2_survival():
    """Create NSGA-II survivor selector.

    The NSGA-II survival strategy implements elitist selection by:
    1. Computing Pareto fronts using non-dominated sorting
    2. Computing crowding distance within every front
    3. Ordering everyone by (front ascending, crowding distance descending)
    4. Keeping the first n_survivors of that order

    Fronts that fit are therefore kept in full, and the critical front is
    truncated to its most isolated members. A population smaller than
    n_survivors is kept whole.

    Returns:
        A SurvivorSelector callable that selects survivor indices and returns
        state with 'rank' and 'crowding_distance' arrays.

    Example:
        >>> selector = nsga2_survival()
        >>> survivors, state = selector(merged_pop, n_survivors=50)
        >>> rank = state['rank']
    """

    def selector(
        pop: Population,
        n_survivors: int,
        **kwargs: np.ndarray,
    ) -> tuple[np.ndarray, dict[str, np.ndarray]]:
        """Select survivors using NSGA-II crowded selection.

        Args:
            pop: Evaluated, deduplicated population to select from.
            n_survivors: Target number of survivors.
            **kwargs: Unused. NSGA-II computes all metrics internally.

        Returns:
            Tuple of (indices, state) where:
            - indices: Indices of the selected survivors, best first.
            - state: Dictionary with keys 'rank' and 'crowding_distance',
              aligned with indices. Both are computed over the whole input
              population.

        Raises:
            ValueError: If population has no objectives, is empty, or
                n_survivors is not positive.
        """
        if pop.objectives is None:
            raise ValueError("Population must have objectives computed for survivor selection")
        if len(pop) == 0:
            raise ValueError("Population must not be empty for survivor selection")
        if n_survivors <= 0:
            raise ValueError(f"n_survivors must be positive, got {n_survivors}")

        ranks = non_dominated_sort(pop.objectives)
        cd = crowding_distance_by_front(pop.objectives, ranks)

        selected = crowded_order(ranks, cd)[:n_survivors]

        return selected, {
            "rank": ranks[selected],
            "crowding_distance": cd[selected],
        }

    return selector
