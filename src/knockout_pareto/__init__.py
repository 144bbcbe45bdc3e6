"""knockout-pareto: NSGA-II search over gene knockouts.

Evolves binary genomes (which genes of a metabolic network are active) to
jointly maximize conflicting objectives, typically growth and product
secretion computed by two-stage flux balance analysis.

Example:
    >>> from knockout_pareto import OptimizerConfig, nsga2
    >>> import numpy as np
    >>> genes = ["g1", "g2", "g3", "g4"]
    >>> def evaluate(genome):
    ...     n_off = len(genome.knockouts)
    ...     return np.array([4.0 - n_off, float(n_off * genome["g1"])])
    >>> result = nsga2(genes, evaluate, OptimizerConfig(pop_size=10, n_generations=5), seed=42)
    >>> int(result.rank.min())
    1
"""

from knockout_pareto.algorithms import nsga2
from knockout_pareto.config import OptimizerConfig
from knockout_pareto.dedup import round_significant, unique_rows
from knockout_pareto.evaluation import InfeasibleError, check_objectives, guarded
from knockout_pareto.fba import FluxBalanceEvaluator
from knockout_pareto.genome import Genome
from knockout_pareto.operators import (
    bit_flip_mutation,
    create_offspring,
    lift,
    lift_parallel,
    uniform_crossover,
)
from knockout_pareto.population import IndividualView, Population
from knockout_pareto.primitives import (
    crowding_distance,
    crowding_distance_by_front,
    dominates,
    dominates_matrix,
    non_dominated_sort,
)
from knockout_pareto.protocols import FitnessEvaluator, ParentSelector, SurvivorSelector
from knockout_pareto.registry import SelectionRegistry, list_selections
from knockout_pareto.results import NSGA2Result
from knockout_pareto.selection import crowded_tournament, uniform_selection
from knockout_pareto.survival import crowded_order, nsga2_survival

__all__ = [
    # Algorithm
    "nsga2",
    "OptimizerConfig",
    # Selection strategies
    "uniform_selection",
    "crowded_tournament",
    # Survival strategies
    "nsga2_survival",
    "crowded_order",
    # Genetic operators
    "lift",
    "lift_parallel",
    "create_offspring",
    "bit_flip_mutation",
    "uniform_crossover",
    # Primitives
    "dominates",
    "dominates_matrix",
    "non_dominated_sort",
    "crowding_distance",
    "crowding_distance_by_front",
    "round_significant",
    "unique_rows",
    # Fitness evaluation
    "FitnessEvaluator",
    "FluxBalanceEvaluator",
    "InfeasibleError",
    "guarded",
    "check_objectives",
    # Registry system
    "SelectionRegistry",
    "list_selections",
    # Protocols
    "ParentSelector",
    "SurvivorSelector",
    # Data structures
    "Genome",
    "Population",
    "IndividualView",
    # Result types
    "NSGA2Result",
]
