"""Shared test fixtures for knockout-pareto tests.

This module provides common fixtures used across test modules:
- rng: Seeded random number generator
- genes: A small gene universe
- simple_population: Population forming a single Pareto front
- Toy evaluators with known trade-offs
- toy_network: A small stoichiometric model for the FBA evaluator
"""

import numpy as np
import pytest

from knockout_pareto import Genome, Population


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for deterministic tests."""
    return np.random.default_rng(42)


@pytest.fixture
def genes() -> tuple[str, ...]:
    return ("g1", "g2", "g3", "g4", "g5", "g6")


@pytest.fixture
def simple_population() -> Population:
    """Five mutually non-dominated individuals (maximization).

    Objectives are (1,5), (2,4), (3,3), (4,2), (5,1).
    """
    x = np.array(
        [
            [True, True, True],
            [True, True, False],
            [True, False, True],
            [False, True, True],
            [False, False, True],
        ]
    )
    objectives = np.array([[1.0, 5.0], [2.0, 4.0], [3.0, 3.0], [4.0, 2.0], [5.0, 1.0]])
    return Population(genes=("a", "b", "c"), x=x, objectives=objectives)


@pytest.fixture
def tradeoff_evaluator():
    """Evaluator trading the number of active genes against knockouts of the first half.

    Objective 1 counts active genes; objective 2 counts knocked-out genes in
    the first half of the gene list. The front is every genome whose
    knockouts all lie in the first half.
    """

    def evaluate(genome: Genome) -> np.ndarray:
        active = np.asarray(genome.active)
        half = len(active) // 2
        return np.array([float(active.sum()), float((~active[:half]).sum())])

    return evaluate


@pytest.fixture
def counting_evaluator(tradeoff_evaluator):
    """Trade-off evaluator that records every genome it is called with.

    Returns a tuple of (evaluate_fn, call_log).
    """
    call_log: list[Genome] = []

    def evaluate(genome: Genome) -> np.ndarray:
        call_log.append(genome)
        return tradeoff_evaluator(genome)

    return evaluate, call_log


@pytest.fixture
def toy_network() -> dict:
    """Small metabolic network with a growth vs. byproduct trade-off.

    Metabolites: A (substrate), B (intermediate).
    Reactions:
        EX_A:    -> A          (uptake, at most 10)
        R1:    A -> B          (gene g_r1)
        R2:    B -> biomass    (BIOMASS, gene g_bio)
        R3:    B -> product    (EX_P secretion pathway, gene g_p)
        R4:    B -> waste      (gene g_w)

    With everything active, biomass takes the whole flux (10) and the
    product's maximum at optimal growth is 0. Knocking out R2's gene forces
    flux into R3 or R4.
    """
    reactions = ["EX_A", "R1", "BIOMASS", "EX_P", "R_waste"]
    stoichiometry = np.array(
        [
            # EX_A  R1  BIOMASS  EX_P  R_waste
            [1.0, -1.0, 0.0, 0.0, 0.0],  # A
            [0.0, 1.0, -1.0, -1.0, -1.0],  # B
        ]
    )
    lower = np.zeros(5)
    upper = np.array([10.0, 1000.0, 1000.0, 1000.0, 1000.0])
    gene_reactions = {
        "g_r1": ["R1"],
        "g_bio": ["BIOMASS"],
        "g_p": ["EX_P"],
        "g_w": ["R_waste"],
    }
    return {
        "stoichiometry": stoichiometry,
        "reactions": reactions,
        "lower_bounds": lower,
        "upper_bounds": upper,
        "gene_reactions": gene_reactions,
        "primary": "BIOMASS",
        "secondary": "EX_P",
    }
