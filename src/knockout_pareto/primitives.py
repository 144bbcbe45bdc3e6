"""NSGA-II primitives for Pareto-based ranking and diversity.

This module provides the core pure functions for NSGA-II:
- dominates: scalar Pareto dominance check
- dominates_matrix: vectorized pairwise dominance
- non_dominated_sort: Deb's fast non-dominated sorting algorithm
- crowding_distance: diversity metric for solutions in a Pareto front
- crowding_distance_by_front: crowding distance for every front at once

All objectives are maximized. Objectives that are naturally minimized must be
negated by the evaluator before they reach these functions.
"""

import numpy as np


def dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """Check if solution a Pareto-dominates solution b (maximization).

    A solution a dominates b if and only if:
      - a[i] >= b[i] for ALL objectives (a is at least as good everywhere)
      - a[i] > b[i] for AT LEAST ONE objective (a is strictly better somewhere)

    Identical vectors never dominate each other.

    Args:
        a: Objective values for solution a. Shape (n_obj,).
        b: Objective values for solution b. Shape (n_obj,).

    Returns:
        True if a dominates b, False otherwise.

    Examples:
        >>> dominates(np.array([2.0, 3.0]), np.array([1.0, 2.0]))
        True
        >>> dominates(np.array([1.0, 3.0]), np.array([2.0, 2.0]))
        False
    """
    return bool(np.all(a >= b) and np.any(a > b))


def dominates_matrix(objectives: np.ndarray) -> np.ndarray:
    """Compute pairwise dominance for all individuals (vectorized).

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Boolean array of shape (n, n) where result[i, j] = True iff
        individual i dominates individual j.

    Examples:
        >>> objs = np.array([[3.0, 3.0], [2.0, 2.0], [3.0, 2.0]])
        >>> dom = dominates_matrix(objs)
        >>> dom[0, 1]
        True
        >>> dom[0, 2]
        True
    """
    a = objectives[:, np.newaxis, :]  # (n, 1, n_obj)
    b = objectives[np.newaxis, :, :]  # (1, n, n_obj)

    all_geq = np.all(a >= b, axis=2)
    any_gt = np.any(a > b, axis=2)

    return all_geq & any_gt


def non_dominated_sort(objectives: np.ndarray) -> np.ndarray:
    """Assign each individual to a Pareto front using Deb's fast algorithm.

    Fronts are peeled off one at a time: the individuals not dominated by any
    other remaining individual form the next front. Time complexity is
    O(M * N^2) where M = number of objectives, N = population size, and the
    peel runs at most N times.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Integer array of shape (n,) where rank[i] is the front index for
        individual i. Front 1 is the non-dominated set; indices are
        contiguous.

    Examples:
        >>> objs = np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
        >>> non_dominated_sort(objs)
        array([3, 2, 1])
    """
    n = objectives.shape[0]

    if n == 0:
        return np.array([], dtype=np.int64)

    dom_matrix = dominates_matrix(objectives)

    # domination_count[i] = number of individuals that dominate i
    domination_count = dom_matrix.sum(axis=0)

    ranks = np.zeros(n, dtype=np.int64)

    current_rank = 1
    remaining = np.arange(n)

    while len(remaining) > 0:
        front_mask = domination_count[remaining] == 0
        front = remaining[front_mask]

        if len(front) == 0:
            # Only reachable with NaN objectives, which break the partial order
            ranks[remaining] = current_rank
            break

        ranks[front] = current_rank
        remaining = remaining[~front_mask]

        for idx in front:
            domination_count[remaining] -= dom_matrix[idx, remaining].astype(np.int64)

        current_rank += 1

    return ranks


def crowding_distance(front_objectives: np.ndarray) -> np.ndarray:
    """Compute crowding distance for individuals in a single Pareto front.

    For every objective the front is sorted (stable) by that objective. The
    lowest and highest individuals receive an infinite contribution; every
    interior individual adds the gap between its two neighbours normalized by
    the objective's range. When the range is zero the normalization is
    undefined and every member receives an infinite contribution.

    Args:
        front_objectives: Objective values for individuals in ONE front only.
            Shape (n_front, n_obj).

    Returns:
        Array of shape (n_front,) containing crowding distances.
        Higher values indicate more isolated (preferred) solutions.

    Examples:
        >>> objs = np.array([[1.0, 5.0], [2.0, 4.0], [3.0, 3.0], [5.0, 1.0]])
        >>> cd = crowding_distance(objs)
        >>> bool(np.isinf(cd[0]) and np.isinf(cd[-1]))
        True
    """
    n_front = front_objectives.shape[0]

    if n_front == 0:
        return np.array([], dtype=np.float64)

    if n_front <= 2:
        # Every member is a boundary point
        return np.full(n_front, np.inf)

    n_obj = front_objectives.shape[1]
    distances = np.zeros(n_front, dtype=np.float64)

    for m in range(n_obj):
        sorted_indices = np.argsort(front_objectives[:, m], kind="stable")
        values = front_objectives[sorted_indices, m]

        obj_range = values[-1] - values[0]
        if obj_range <= 0:
            distances[:] = np.inf
            continue

        distances[sorted_indices[0]] = np.inf
        distances[sorted_indices[-1]] = np.inf
        distances[sorted_indices[1:-1]] += (values[2:] - values[:-2]) / obj_range

    return distances


def crowding_distance_by_front(objectives: np.ndarray, ranks: np.ndarray) -> np.ndarray:
    """Compute crowding distance for all individuals across all fronts.

    Each front is handled independently; crowding distances are only
    comparable between members of the same front.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).
        ranks: Front indices for all individuals. Shape (n,).

    Returns:
        Array of shape (n,) containing crowding distances.
    """
    cd = np.zeros(len(objectives), dtype=np.float64)
    for r in np.unique(ranks):
        mask = ranks == r
        cd[mask] = crowding_distance(objectives[mask])
    return cd
