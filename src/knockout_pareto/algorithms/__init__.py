"""Evolutionary algorithm implementations."""

from knockout_pareto.algorithms.nsga2 import nsga2

__all__ = ["nsga2"]
