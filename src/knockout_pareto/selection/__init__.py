"""Parent selection strategies."""

from knockout_pareto.registry import SelectionRegistry
from knockout_pareto.selection.crowded import crowded_tournament
from knockout_pareto.selection.uniform import uniform_selection

# Register built-in selection strategies
SelectionRegistry.register("crowded", crowded_tournament)
SelectionRegistry.register("uniform", uniform_selection)

__all__ = ["crowded_tournament", "uniform_selection"]
