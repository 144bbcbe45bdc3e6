"""NSGA-II loop for gene knockout optimization.

Each generation runs: Vary -> Merge -> Evaluate -> Deduplicate -> Rank ->
Select. The run starts from the wild type (every gene active) unless initial
genomes are given, and stops after a fixed number of generations.

Example:
    >>> from knockout_pareto import OptimizerConfig, nsga2
    >>>
    >>> def evaluate(genome):
    ...     n_off = len(genome.knockouts)
    ...     return np.array([10.0 - n_off, float(n_off)])
    >>>
    >>> result = nsga2(["g1", "g2", "g3"], evaluate, OptimizerConfig(pop_size=10, n_generations=5), seed=42)
    >>> front = result.pareto_genomes()
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

import numpy as np

# Import selection module to trigger strategy registration
import knockout_pareto.selection  # noqa: F401
from knockout_pareto.config import OptimizerConfig
from knockout_pareto.dedup import round_significant, unique_rows
from knockout_pareto.evaluation import check_objectives
from knockout_pareto.genome import Genome
from knockout_pareto.operators import bit_flip_mutation, create_offspring, lift, lift_parallel
from knockout_pareto.population import Population
from knockout_pareto.protocols import FitnessEvaluator, ParentSelector, SurvivorSelector
from knockout_pareto.registry import SelectionRegistry
from knockout_pareto.results import NSGA2Result
from knockout_pareto.survival import nsga2_survival

logger = logging.getLogger(__name__)


def nsga2(
    genes: Sequence[str],
    evaluate: FitnessEvaluator,
    config: OptimizerConfig | None = None,
    *,
    seed: int | None = None,
    callback: Callable[[NSGA2Result, int], bool] | None = None,
    crossover: Callable[[np.ndarray, np.ndarray], np.ndarray] | None = None,
    select: str | ParentSelector = "uniform",
    survive: SurvivorSelector | None = None,
    n_workers: int = 1,
    initial: Iterable[Genome] | None = None,
) -> NSGA2Result:
    """Run NSGA-II over gene activation genomes.

    Args:
        genes: The gene universe. Every genome of the run has exactly these
            genes, in this order.
        evaluate: Fitness oracle. Signature: (Genome,) -> (n_obj,), bigger is
            better in every objective. Must not raise for infeasible genomes
            (see evaluation.guarded).
        config: Scalar run settings. Defaults to OptimizerConfig().
        seed: Random seed for parent selection and mutation. If None, uses
            system entropy.
        callback: Optional callback called at the start of each generation.
            Signature: (result: NSGA2Result, generation: int) -> bool
            If callback returns True, optimization stops early.
        crossover: Optional crossover applied to pairs of parents before
            mutation. Without it, reproduction is mutation only. The
            crossover keeps its own randomness; seed it too (for example
            uniform_crossover(seed=42)) to make the run reproducible.
        select: Parent selection strategy. Can be:
            - String: Name of registered strategy ("uniform", "crowded")
            - ParentSelector: Direct callable following the ParentSelector protocol
        survive: Survivor selection strategy; defaults to nsga2_survival().
            Its state must contain 'rank' and 'crowding_distance'.
        n_workers: Number of parallel workers for evaluation. Use 1 for
            sequential execution (default), -1 for all CPU cores, or any
            positive integer. evaluate must be picklable for parallel runs.
        initial: Optional starting genomes instead of the wild type.

    Returns:
        NSGA2Result containing:
        - population: Final survivors with rounded objectives
        - rank: Front index per survivor (1 = Pareto front)
        - crowding_distance: Crowding distances within fronts
        - generations: Number of generations completed
        - evaluations: Total number of fitness evaluations

    Raises:
        ValueError: If genes is empty, initial genomes do not match genes,
            n_workers is invalid, or the evaluator returns malformed fitness.
        KeyError: If a string strategy name is not registered.

    Algorithm Flow:
        1. Seed the population with the wild type and evaluate it
        2. Deduplicate by rounded fitness, rank, and select survivors
        3. For each generation:
           a. Call callback with the current NSGA2Result (stop if it returns True)
           b. Draw pop_size parents and create offspring by mutation
           c. Merge survivors and offspring, dropping duplicate genomes
           d. Evaluate the new genomes and round their fitness
           e. Deduplicate by fitness, rank, and select survivors
        4. Return the final NSGA2Result
    """
    config = config if config is not None else OptimizerConfig()
    genes = tuple(genes)

    if len(genes) == 0:
        raise ValueError("genes must not be empty")
    if n_workers < 1 and n_workers != -1:
        raise ValueError(f"n_workers must be positive or -1 (all cores), got {n_workers}")

    parent_selector = SelectionRegistry.get(select) if isinstance(select, str) else select
    survivor_selector = survive if survive is not None else nsga2_survival()

    lifted_evaluate = lift_parallel(evaluate, genes, n_workers) if n_workers != 1 else lift(evaluate, genes)

    rng = np.random.default_rng(seed)
    mutate = bit_flip_mutation(config.mutation_prob, seed=rng)

    logger.info(
        "Starting NSGA-II over %d genes: pop_size=%d, n_generations=%d, mutation_prob=%g",
        len(genes),
        config.pop_size,
        config.n_generations,
        config.mutation_prob,
    )

    n_obj: int | None = None

    def evaluate_rows(x: np.ndarray) -> np.ndarray:
        nonlocal n_obj
        if x.shape[0] == 0:
            return np.empty((0, n_obj if n_obj is not None else 0), dtype=np.float64)
        objectives = check_objectives(lifted_evaluate(x), n_obj)
        n_obj = objectives.shape[1]
        return round_significant(objectives, config.sig_digits)

    def select_survivors(x: np.ndarray, objectives: np.ndarray) -> tuple[Population, dict[str, np.ndarray]]:
        # First occurrence wins, so incumbents are kept over equal offspring
        keep = unique_rows(objectives)
        candidates = Population(genes=genes, x=x[keep], objectives=objectives[keep])
        indices, state = survivor_selector(candidates, config.pop_size)
        for key in ("rank", "crowding_distance"):
            if key not in state:
                raise ValueError(f"survivor selector state must contain '{key}'")
        survivors = replace(
            candidates.take(indices),
            rank=np.asarray(state["rank"]),
            crowding_distance=np.asarray(state["crowding_distance"], dtype=np.float64),
        )
        return survivors, state

    # Initialize population
    start = _initial_matrix(genes, initial)
    start_obj = evaluate_rows(start)
    total_evaluations = len(start)
    pop, state = select_survivors(start, start_obj)

    generations_completed = 0

    for gen in range(config.n_generations):
        current_result = NSGA2Result(
            population=pop,
            rank=state["rank"],
            crowding_distance=state["crowding_distance"],
            generations=generations_completed,
            evaluations=total_evaluations,
        )

        if callback is not None and callback(current_result, gen):
            logger.info("Callback requested stop at generation %d", gen)
            break

        offspring_x = create_offspring(pop, config.pop_size, mutate, rng, parent_selector, crossover, **state)

        # Merge, dropping offspring identical to a survivor or to each other
        merged_x = np.concatenate([pop.x, offspring_x])
        keep = unique_rows(merged_x)
        new_x = merged_x[keep[keep >= len(pop)]]

        new_obj = evaluate_rows(new_x)
        total_evaluations += len(new_x)

        assert pop.objectives is not None  # Guaranteed by select_survivors
        pop, state = select_survivors(
            np.concatenate([pop.x, new_x]),
            np.concatenate([pop.objectives, new_obj]),
        )

        generations_completed += 1
        logger.debug(
            "Generation %d: %d new genomes, %d survivors, %d on front 1",
            gen,
            len(new_x),
            len(pop),
            int(np.sum(state["rank"] == 1)),
        )

    final_result = NSGA2Result(
        population=pop,
        rank=state["rank"],
        crowding_distance=state["crowding_distance"],
        generations=generations_completed,
        evaluations=total_evaluations,
    )

    logger.info(
        "Finished after %d generations and %d evaluations; Pareto front has %d genomes",
        generations_completed,
        total_evaluations,
        len(final_result.pareto_front),
    )

    return final_result


def _initial_matrix(genes: tuple[str, ...], initial: Iterable[Genome] | None) -> np.ndarray:
    """Build the deduplicated activation matrix of the starting genomes."""
    if initial is None:
        return Genome.wild_type(genes).active[np.newaxis, :].copy()

    genomes = list(initial)
    if len(genomes) == 0:
        raise ValueError("initial must contain at least one genome")
    for g in genomes:
        if g.genes != genes:
            raise ValueError("initial genomes must have exactly the run's genes, in the same order")

    x = np.stack([g.active for g in genomes])
    return x[unique_rows(x)]
