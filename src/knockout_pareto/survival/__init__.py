"""Survival strategies for the NSGA-II loop."""

from knockout_pareto.survival.nsga2 import crowded_order, nsga2_survival

__all__ = ["crowded_order", "nsga2_survival"]
