"""Base genetic operators.

This module provides the lift helpers that apply a per-genome evaluator to
every row of a population's activation matrix.
"""

from collections.abc import Callable, Sequence

import numpy as np

from knockout_pareto.genome import Genome


def lift(
    fn: Callable[[Genome], np.ndarray], genes: Sequence[str]
) -> Callable[[np.ndarray], np.ndarray]:
    """Lift a per-genome function to work on a population.

    This utility allows users to write simple per-genome evaluators while the
    framework handles batching over the activation matrix.

    Args:
        fn: Function that operates on a single genome.
            Signature: (Genome,) -> (n_out,)
        genes: Gene identifiers, one per column of the activation matrix.

    Returns:
        A function that operates on a population.
        Signature: (n, n_genes) -> (n, n_out)

    Example:
        >>> def evaluate_one(genome: Genome) -> np.ndarray:
        ...     n_on = sum(genome.values())
        ...     return np.array([n_on, len(genome) - n_on])
        >>> evaluate = lift(evaluate_one, ["g1", "g2"])
        >>> evaluate(np.array([[True, True], [True, False]]))
        array([[2, 0],
               [1, 1]])
    """
    genes = tuple(genes)

    def lifted(x: np.ndarray) -> np.ndarray:
        return np.stack([np.asarray(fn(Genome(genes, x[i]))) for i in range(x.shape[0])])

    return lifted


def lift_parallel(
    fn: Callable[[Genome], np.ndarray], genes: Sequence[str], n_workers: int
) -> Callable[[np.ndarray], np.ndarray]:
    """Lift a per-genome function to work on a population with parallel execution.

    Evaluations of one batch are independent of each other, so they can run
    in any order; the lifted function returns only after all of them finish.

    Args:
        fn: Function that operates on a single genome.
            Signature: (Genome,) -> (n_out,)
            Must be picklable for multiprocessing.
        genes: Gene identifiers, one per column of the activation matrix.
        n_workers: Number of parallel workers. Use -1 for all CPU cores.

    Returns:
        A function that operates on a population in parallel.
        Signature: (n, n_genes) -> (n, n_out)
    """
    from joblib import Parallel, delayed

    genes = tuple(genes)

    def lifted(x: np.ndarray) -> np.ndarray:
        results: list[np.ndarray] = Parallel(n_jobs=n_workers)(  # type: ignore[assignment]
            delayed(fn)(Genome(genes, x[i])) for i in range(x.shape[0])
        )
        return np.stack([np.asarray(r) for r in results])

    return lifted
