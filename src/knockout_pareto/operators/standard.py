"""Standard genetic operators for binary genomes.

- Bit-flip mutation: flips each gene's activation independently with a fixed
  probability
- Uniform crossover: takes each gene from either parent with equal
  probability

Both operators are implemented as factory functions that return operator
functions compatible with the nsga2() interface. They accept either raw bool
activation arrays or Genome objects and return the same type.
"""

from collections.abc import Callable
from typing import TypeVar

import numpy as np

from knockout_pareto.genome import Genome

G = TypeVar("G", np.ndarray, Genome)


def bit_flip_mutation(prob: float = 0.02, seed: int | np.random.Generator | None = None) -> Callable[[G], G]:
    """Create a bit-flip mutation operator.

    Each gene is XOR-ed with an independent Bernoulli(prob) draw, so genes
    flip independently of each other and across calls. The key set of a
    mutated genome is always that of its parent.

    Args:
        prob: Per-gene flip probability in [0, 1] (default 0.02).
        seed: Random seed or generator for reproducibility. If None, uses a
            random seed. A generator is used directly, not copied.

    Returns:
        A mutation function with signature (x) -> x' that is compatible
        with nsga2()'s mutate step.

    Raises:
        ValueError: If prob is outside [0, 1].

    Example:
        >>> mutate = bit_flip_mutation(prob=1.0, seed=42)
        >>> mutate(np.array([True, False]))
        array([False,  True])
    """
    if not 0.0 <= prob <= 1.0:
        raise ValueError(f"prob must be in [0, 1], got {prob}")

    rng = np.random.default_rng(seed)

    def mutate(x: G) -> G:
        """Flip genes of one individual."""
        if isinstance(x, Genome):
            return x.with_active(mutate(np.asarray(x.active)))

        flips = rng.random(x.shape[0]) < prob
        return np.logical_xor(x, flips)

    return mutate


def uniform_crossover(seed: int | np.random.Generator | None = None) -> Callable[[G, G], G]:
    """Create a uniform crossover operator.

    Each gene of the child is taken from the first or the second parent with
    probability 0.5. The nsga2() loop always mutates the child afterwards.
    The operator draws from its own generator, not from the one nsga2()
    builds from its seed, so seed it as well for a reproducible run.

    Args:
        seed: Random seed or generator for reproducibility. If None, uses a
            random seed. A generator is used directly, not copied.

    Returns:
        A crossover function with signature (p1, p2) -> child.

    Example:
        >>> crossover = uniform_crossover(seed=42)
        >>> child = crossover(np.ones(4, dtype=bool), np.zeros(4, dtype=bool))
        >>> child.shape
        (4,)
    """
    rng = np.random.default_rng(seed)

    def crossover(p1: G, p2: G) -> G:
        """Combine two parents into one child."""
        if isinstance(p1, Genome):
            if p1.genes != p2.genes:
                raise ValueError("parents must share the same genes")
            return p1.with_active(crossover(np.asarray(p1.active), np.asarray(p2.active)))

        take_first = rng.random(p1.shape[0]) < 0.5
        return np.where(take_first, p1, p2)

    return crossover
