"""Helpers around the fitness oracle boundary.

- InfeasibleError: raised by evaluators when a genome admits no solution
- guarded: wrap an evaluator so infeasibility maps to a sentinel fitness
- check_objectives: validate a batch of fitness vectors before ranking
"""

import logging
from collections.abc import Callable

import numpy as np

from knockout_pareto.genome import Genome

logger = logging.getLogger(__name__)


class InfeasibleError(RuntimeError):
    """Raised when a genome's constraint problem has no feasible solution."""


def guarded(
    evaluate: Callable[[Genome], np.ndarray],
    sentinel: np.ndarray,
) -> Callable[[Genome], np.ndarray]:
    """Wrap an evaluator so that failing genomes get a sentinel fitness.

    A genome that breaks the simulated network should rank poorly instead of
    ending the run. ``InfeasibleError`` and ``ArithmeticError`` raised by the
    wrapped evaluator are mapped to ``sentinel``; anything else propagates.

    Args:
        evaluate: Evaluator following the FitnessEvaluator protocol.
        sentinel: Fitness vector returned for failing genomes. Must be finite,
            and should be no better than any feasible fitness.

    Returns:
        An evaluator with the same signature.

    Raises:
        ValueError: If sentinel is not a finite 1D array.

    Example:
        >>> safe = guarded(my_fba, sentinel=np.array([0.0, 0.0]))
        >>> result = nsga2(genes, safe)
    """
    sentinel = np.asarray(sentinel, dtype=np.float64)
    if sentinel.ndim != 1:
        raise ValueError(f"sentinel must be 1D, got shape {sentinel.shape}")
    if not np.all(np.isfinite(sentinel)):
        raise ValueError("sentinel must be finite")

    def wrapped(genome: Genome) -> np.ndarray:
        try:
            return evaluate(genome)
        except (InfeasibleError, ArithmeticError) as exc:
            logger.debug("Evaluation failed for knockouts %s: %s", list(genome.knockouts), exc)
            return sentinel.copy()

    return wrapped


def check_objectives(objectives: np.ndarray, n_obj: int | None = None) -> np.ndarray:
    """Validate a batch of fitness vectors returned by an evaluator.

    Args:
        objectives: Array of shape (n, k).
        n_obj: Expected k, or None to accept any k of at least 2.

    Returns:
        The objectives as a float64 array.

    Raises:
        ValueError: If the shape is wrong or any value is not finite.
    """
    objectives = np.asarray(objectives, dtype=np.float64)
    if objectives.ndim != 2:
        raise ValueError(f"evaluator must return 1D fitness vectors, got batch of shape {objectives.shape}")
    if n_obj is not None and objectives.shape[1] != n_obj:
        raise ValueError(f"evaluator returned {objectives.shape[1]} objectives, expected {n_obj}")
    if objectives.shape[1] < 2:
        raise ValueError(f"at least 2 objectives are required, got {objectives.shape[1]}")

    bad = np.where(~np.all(np.isfinite(objectives), axis=1))[0]
    if len(bad) > 0:
        raise ValueError(
            f"evaluator returned non-finite fitness for row {int(bad[0])}: {objectives[bad[0]]}; "
            "map failures to a finite sentinel with guarded()"
        )
    return objectives
