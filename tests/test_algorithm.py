"""Tests for the NSGA-II loop.

This module tests:
- nsga2: Integration tests for the main loop
- Merge and deduplication behaviour
- Callbacks: Early stopping behavior
- Property-based tests: Invariants that must hold
"""

import logging

import numpy as np
import pytest

from knockout_pareto import (
    Genome,
    NSGA2Result,
    OptimizerConfig,
    dominates,
    nsga2,
    uniform_crossover,
)

SMALL = OptimizerConfig(pop_size=20, n_generations=30, mutation_prob=0.2)


# =============================================================================
# TestNSGA2Integration
# =============================================================================


class TestNSGA2Integration:
    """Integration tests on a toy trade-off problem."""

    def test_returns_result(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=42)

        assert isinstance(result, NSGA2Result)
        assert result.generations == SMALL.n_generations
        assert result.population.genes == tuple(genes)

    def test_population_never_exceeds_target(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=42)
        assert 1 <= len(result.population) <= SMALL.pop_size

    def test_wild_type_stays_on_front(self, genes, tradeoff_evaluator) -> None:
        """The wild type is the unique maximum of the first objective."""
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=42)
        front = [genome for genome, _ in result.pareto_genomes()]
        assert Genome.wild_type(genes) in front

    def test_finds_tradeoff_points(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=42)
        front_obj = result.pareto_front.objectives

        assert len(front_obj) >= 2
        # Every front member knocks out only first-half genes
        np.testing.assert_array_equal(front_obj.sum(axis=1), np.full(len(front_obj), float(len(genes))))

    def test_deterministic_with_seed(self, genes, tradeoff_evaluator) -> None:
        a = nsga2(genes, tradeoff_evaluator, SMALL, seed=7)
        b = nsga2(genes, tradeoff_evaluator, SMALL, seed=7)

        np.testing.assert_array_equal(a.population.x, b.population.x)
        np.testing.assert_array_equal(a.objectives, b.objectives)
        np.testing.assert_array_equal(a.rank, b.rank)
        np.testing.assert_array_equal(a.crowding_distance, b.crowding_distance)

    def test_zero_generations_returns_wild_type(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, OptimizerConfig(n_generations=0))

        assert len(result.population) == 1
        assert result.population.genomes() == [Genome.wild_type(genes)]
        assert result.evaluations == 1
        assert result.generations == 0
        np.testing.assert_array_equal(result.rank, [1])

    def test_default_config(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, seed=1)
        assert result.generations == 50

    def test_initial_genomes(self, genes, tradeoff_evaluator) -> None:
        wt = Genome.wild_type(genes)
        ko = wt.with_active([False] + [True] * (len(genes) - 1))
        result = nsga2(genes, tradeoff_evaluator, OptimizerConfig(n_generations=0), initial=[wt, ko, ko])

        assert result.evaluations == 2
        assert set(result.population.genomes()) == {wt, ko}

    def test_with_crossover(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=3, crossover=uniform_crossover(seed=3))
        assert result.generations == SMALL.n_generations

    def test_crossover_run_reproducible_when_seeded(self, genes, tradeoff_evaluator) -> None:
        a = nsga2(genes, tradeoff_evaluator, SMALL, seed=3, crossover=uniform_crossover(seed=3))
        b = nsga2(genes, tradeoff_evaluator, SMALL, seed=3, crossover=uniform_crossover(seed=3))

        np.testing.assert_array_equal(a.population.x, b.population.x)
        np.testing.assert_array_equal(a.objectives, b.objectives)

    def test_with_crowded_tournament(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=3, select="crowded")
        assert Genome.wild_type(genes) in result.population.genomes()

    def test_parallel_matches_sequential(self, genes, tradeoff_evaluator) -> None:
        config = OptimizerConfig(pop_size=10, n_generations=3, mutation_prob=0.2)
        sequential = nsga2(genes, tradeoff_evaluator, config, seed=5)
        parallel = nsga2(genes, tradeoff_evaluator, config, seed=5, n_workers=2)

        np.testing.assert_array_equal(sequential.population.x, parallel.population.x)
        np.testing.assert_array_equal(sequential.objectives, parallel.objectives)

    def test_logs_run_summary(self, genes, tradeoff_evaluator, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="knockout_pareto.algorithms.nsga2"):
            nsga2(genes, tradeoff_evaluator, OptimizerConfig(pop_size=4, n_generations=2), seed=0)
        assert "Starting NSGA-II over 6 genes" in caplog.text
        assert "Finished after 2 generations" in caplog.text


# =============================================================================
# TestMergeAndDeduplication
# =============================================================================


class TestMergeAndDeduplication:
    """Tests for genome and fitness deduplication inside the loop."""

    def test_no_mutation_keeps_single_genome(self, genes, tradeoff_evaluator) -> None:
        """All offspring duplicate the wild type, so the population stays at one."""
        result = nsga2(genes, tradeoff_evaluator, OptimizerConfig(pop_size=10, n_generations=5, mutation_prob=0.0))

        assert len(result.population) == 1
        assert result.evaluations == 1
        assert result.generations == 5

    def test_identical_fitness_collapses_to_one(self, genes) -> None:
        def constant(genome: Genome) -> np.ndarray:
            return np.array([1.0, 1.0])

        result = nsga2(genes, constant, OptimizerConfig(pop_size=10, n_generations=5, mutation_prob=0.5), seed=0)
        assert len(result.population) == 1
        assert result.population.genomes() == [Genome.wild_type(genes)]

    def test_survivor_fitness_is_unique(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=42)
        assert len(np.unique(result.objectives, axis=0)) == len(result.population)

    def test_survivor_genomes_are_unique(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(genes, tradeoff_evaluator, SMALL, seed=42)
        assert len(set(result.population.genomes())) == len(result.population)

    def test_noise_is_rounded_away(self, genes) -> None:
        noise = np.random.default_rng(0)

        def noisy(genome: Genome) -> np.ndarray:
            n_on = float(np.sum(genome.active))
            return np.array([n_on + 1.0, 7.0 - n_on]) + noise.normal(0, 1e-12, size=2)

        config = OptimizerConfig(pop_size=10, n_generations=10, mutation_prob=0.3, sig_digits=6)
        result = nsga2(genes, noisy, config, seed=0)

        np.testing.assert_array_equal(result.objectives, np.round(result.objectives))
        # One representative per number of active genes at most
        assert len(result.population) <= len(genes) + 1

    def test_evaluations_counted(self, genes, counting_evaluator) -> None:
        evaluate, call_log = counting_evaluator
        result = nsga2(genes, evaluate, OptimizerConfig(pop_size=8, n_generations=4, mutation_prob=0.3), seed=2)
        assert result.evaluations == len(call_log)

    def test_survivors_not_reevaluated(self, genes, counting_evaluator) -> None:
        evaluate, call_log = counting_evaluator
        nsga2(genes, evaluate, OptimizerConfig(pop_size=8, n_generations=4, mutation_prob=0.3), seed=2)
        assert call_log.count(Genome.wild_type(genes)) == 1

    def test_evaluator_receives_full_gene_set(self, genes, counting_evaluator) -> None:
        evaluate, call_log = counting_evaluator
        nsga2(genes, evaluate, OptimizerConfig(pop_size=8, n_generations=2, mutation_prob=0.3), seed=2)
        assert all(genome.genes == tuple(genes) for genome in call_log)


# =============================================================================
# TestNSGA2Callback
# =============================================================================


class TestNSGA2Callback:
    """Tests for the generation callback."""

    def test_callback_receives_result_and_generation(self, genes, tradeoff_evaluator) -> None:
        seen: list[tuple[int, int]] = []

        def callback(result: NSGA2Result, gen: int) -> bool:
            seen.append((gen, result.generations))
            return False

        nsga2(genes, tradeoff_evaluator, OptimizerConfig(pop_size=6, n_generations=3), seed=0, callback=callback)
        assert seen == [(0, 0), (1, 1), (2, 2)]

    def test_callback_can_stop_early(self, genes, tradeoff_evaluator) -> None:
        result = nsga2(
            genes,
            tradeoff_evaluator,
            OptimizerConfig(pop_size=6, n_generations=10),
            seed=0,
            callback=lambda result, gen: gen == 2,
        )
        assert result.generations == 2

    def test_callback_not_called_with_zero_generations(self, genes, tradeoff_evaluator) -> None:
        calls: list[int] = []
        nsga2(
            genes,
            tradeoff_evaluator,
            OptimizerConfig(n_generations=0),
            callback=lambda result, gen: calls.append(gen) or False,
        )
        assert calls == []


# =============================================================================
# TestPropertyBased
# =============================================================================


class TestPropertyBased:
    """Invariants of the final population."""

    @pytest.fixture
    def result(self, genes, tradeoff_evaluator) -> NSGA2Result:
        return nsga2(genes, tradeoff_evaluator, SMALL, seed=11)

    def test_front_one_is_truly_non_dominated(self, result: NSGA2Result) -> None:
        front = result.pareto_front.objectives
        for a in result.objectives:
            for b in front:
                assert not dominates(a, b)

    def test_ranks_are_contiguous_from_one(self, result: NSGA2Result) -> None:
        ranks = np.unique(result.rank)
        np.testing.assert_array_equal(ranks, np.arange(1, ranks.max() + 1))

    def test_population_carries_rank_and_crowding(self, result: NSGA2Result) -> None:
        np.testing.assert_array_equal(result.population.rank, result.rank)
        np.testing.assert_array_equal(result.population.crowding_distance, result.crowding_distance)
        assert result.population[0].rank == result.rank[0]
        assert np.all(result.pareto_front.rank == 1)

    def test_crowding_distance_non_negative(self, result: NSGA2Result) -> None:
        assert np.all(result.crowding_distance >= 0)

    def test_objectives_correspond_to_genomes(self, result: NSGA2Result, tradeoff_evaluator) -> None:
        for genome, objectives in zip(result.population.genomes(), result.objectives):
            np.testing.assert_array_equal(tradeoff_evaluator(genome), objectives)


# =============================================================================
# TestValidation
# =============================================================================


class TestValidation:
    """Tests for argument and evaluator validation."""

    def test_rejects_empty_genes(self, tradeoff_evaluator) -> None:
        with pytest.raises(ValueError, match="genes must not be empty"):
            nsga2([], tradeoff_evaluator)

    @pytest.mark.parametrize("n_workers", [0, -2])
    def test_rejects_invalid_workers(self, genes, tradeoff_evaluator, n_workers: int) -> None:
        with pytest.raises(ValueError, match="n_workers must be positive or -1"):
            nsga2(genes, tradeoff_evaluator, n_workers=n_workers)

    def test_unknown_selection_strategy(self, genes, tradeoff_evaluator) -> None:
        with pytest.raises(KeyError, match="Selection strategy 'nope' not found"):
            nsga2(genes, tradeoff_evaluator, select="nope")

    def test_initial_with_wrong_genes(self, genes, tradeoff_evaluator) -> None:
        with pytest.raises(ValueError, match="initial genomes must have exactly the run's genes"):
            nsga2(genes, tradeoff_evaluator, initial=[Genome.wild_type(["other"])])

    def test_empty_initial(self, genes, tradeoff_evaluator) -> None:
        with pytest.raises(ValueError, match="initial must contain at least one genome"):
            nsga2(genes, tradeoff_evaluator, initial=[])

    def test_non_finite_fitness_raises(self, genes) -> None:
        def broken(genome: Genome) -> np.ndarray:
            return np.array([np.nan, 1.0])

        with pytest.raises(ValueError, match="non-finite fitness"):
            nsga2(genes, broken)

    def test_custom_survivor_must_report_state(self, genes, tradeoff_evaluator) -> None:
        def survive(pop, n_survivors, **kwargs):
            return np.arange(min(n_survivors, len(pop))), {}

        with pytest.raises(ValueError, match="must contain 'rank'"):
            nsga2(genes, tradeoff_evaluator, survive=survive)
