"""Genetic operators for binary genomes.

This module provides:
- lift: lift a per-genome evaluator to population level
- lift_parallel: same, evaluating with parallel workers
- bit_flip_mutation: per-gene flip mutation factory
- uniform_crossover: uniform crossover factory
- create_offspring: create offspring via selection, crossover, and mutation
"""

from knockout_pareto.operators.base import lift, lift_parallel
from knockout_pareto.operators.standard import bit_flip_mutation, uniform_crossover
from knockout_pareto.operators.variation import create_offspring

__all__ = ["lift", "lift_parallel", "bit_flip_mutation", "uniform_crossover", "create_offspring"]
