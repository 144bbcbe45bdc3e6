"""Tests for parent selection strategies."""

import numpy as np
import pytest

from knockout_pareto.population import Population
from knockout_pareto.registry import SelectionRegistry
from knockout_pareto.selection import crowded_tournament, uniform_selection


class TestUniformSelection:
    """Tests for uniform parent selection with replacement."""

    def test_returns_correct_shape(self, simple_population, rng):
        parents = uniform_selection()(simple_population, 12, rng)

        assert parents.shape == (12,)
        assert parents.dtype == np.intp
        assert np.all(parents >= 0)
        assert np.all(parents < len(simple_population))

    def test_draws_with_replacement(self, simple_population, rng):
        """More parents than survivors forces repeats."""
        parents = uniform_selection()(simple_population, 50, rng)
        assert len(np.unique(parents)) <= len(simple_population)
        assert len(parents) == 50

    def test_ignores_rank_and_crowding(self, simple_population):
        rank = np.array([1, 2, 3, 4, 5])
        cd = np.zeros(5)
        with_state = uniform_selection()(simple_population, 20, np.random.default_rng(7), rank=rank, crowding_distance=cd)
        without_state = uniform_selection()(simple_population, 20, np.random.default_rng(7))
        np.testing.assert_array_equal(with_state, without_state)

    def test_roughly_uniform(self, simple_population, rng):
        parents = uniform_selection()(simple_population, 5000, rng)
        counts = np.bincount(parents, minlength=5)
        assert np.all(counts > 850)
        assert np.all(counts < 1150)

    def test_single_survivor(self, rng):
        pop = Population(genes=("a",), x=np.array([[True]]), objectives=np.array([[1.0, 1.0]]))
        np.testing.assert_array_equal(uniform_selection()(pop, 4, rng), [0, 0, 0, 0])

    def test_empty_population_raises(self, rng):
        pop = Population(genes=("a",), x=np.empty((0, 1), dtype=bool))
        with pytest.raises(ValueError, match="empty population"):
            uniform_selection()(pop, 3, rng)


class TestCrowdedTournament:
    """Tests for crowded tournament selection."""

    def test_basic_selection_returns_correct_shape(self, simple_population, rng):
        selector = crowded_tournament(tournament_size=2)
        pop_size = len(simple_population)

        parents = selector(
            simple_population,
            10,
            rng,
            rank=np.ones(pop_size, dtype=np.intp),
            crowding_distance=np.ones(pop_size),
        )

        assert parents.shape == (10,)
        assert parents.dtype == np.intp
        assert np.all(parents < pop_size)

    def test_lower_front_wins_large_tournament(self, simple_population, rng):
        """With a large tournament the single front-1 individual nearly always wins."""
        rank = np.array([2, 2, 1, 2, 2])
        cd = np.ones(5)
        parents = crowded_tournament(tournament_size=20)(simple_population, 50, rng, rank=rank, crowding_distance=cd)
        assert np.mean(parents == 2) > 0.9

    def test_higher_crowding_wins_within_front(self, simple_population, rng):
        rank = np.ones(5, dtype=np.intp)
        cd = np.array([0.1, 0.2, np.inf, 0.3, 0.4])
        parents = crowded_tournament(tournament_size=20)(simple_population, 50, rng, rank=rank, crowding_distance=cd)
        assert np.mean(parents == 2) > 0.9

    def test_missing_rank_raises(self, simple_population, rng):
        with pytest.raises(ValueError, match="requires 'rank'"):
            crowded_tournament()(simple_population, 2, rng, crowding_distance=np.ones(5))

    def test_missing_crowding_raises(self, simple_population, rng):
        with pytest.raises(ValueError, match="requires 'crowding_distance'"):
            crowded_tournament()(simple_population, 2, rng, rank=np.ones(5, dtype=np.intp))

    def test_rejects_non_positive_tournament_size(self):
        with pytest.raises(ValueError, match="tournament_size must be positive"):
            crowded_tournament(tournament_size=0)


class TestBuiltinRegistration:
    """Built-in strategies are available by name."""

    def test_uniform_registered(self):
        assert "uniform" in SelectionRegistry.list()

    def test_crowded_registered_with_config(self, simple_population, rng):
        selector = SelectionRegistry.get("crowded", tournament_size=3)
        parents = selector(simple_population, 4, rng, rank=np.ones(5, dtype=np.intp), crowding_distance=np.ones(5))
        assert parents.shape == (4,)
