"""Two-stage flux balance analysis fitness oracle.

FluxBalanceEvaluator scores a genome on a stoichiometric model:

1. Reactions that depend on an inactive gene are blocked (flux fixed to 0).
2. Stage 1 maximizes the primary objective flux (usually biomass).
3. Stage 2 holds the primary flux at or above ``fraction`` of its optimum and
   maximizes (or, for a pessimistic estimate, minimizes) the secondary
   objective flux (usually a product secretion).

The fitness vector is (primary optimum, secondary optimum). Genomes whose LP
is infeasible or unbounded get ``infeasible_fitness`` instead of an error.
Both LPs are solved with scipy's HiGHS backend.
"""

import logging
from collections.abc import Mapping, Sequence

import numpy as np
from scipy.optimize import linprog

from knockout_pareto.evaluation import InfeasibleError
from knockout_pareto.genome import Genome

logger = logging.getLogger(__name__)


class FluxBalanceEvaluator:
    """Fitness oracle computing (primary, secondary) fluxes by two-stage FBA.

    Args:
        stoichiometry: Stoichiometric matrix S, shape (n_metabolites, n_reactions).
            Steady state requires S @ v == 0.
        reactions: Reaction identifiers, one per column of S.
        lower_bounds: Lower flux bound per reaction.
        upper_bounds: Upper flux bound per reaction.
        gene_reactions: Mapping from gene to the reactions that require it. A
            reaction is blocked when any gene listed for it is inactive.
        primary: Reaction whose flux is optimized in stage 1.
        secondary: Reaction whose flux is optimized in stage 2.
        fraction: Share of the stage 1 optimum the primary flux must keep in
            stage 2. In (0, 1].
        secondary_sense: "max" to maximize the secondary flux in stage 2,
            "min" to minimize it (the flux guaranteed at near-optimal primary).
        infeasible_fitness: Fitness returned when either LP fails. Defaults
            to zeros.

    Raises:
        ValueError: If shapes, identifiers, or parameters are inconsistent.

    Example:
        >>> evaluator = FluxBalanceEvaluator(S, rxns, lb, ub, {"g1": ["R1"]}, "BIOMASS", "EX_ac")
        >>> result = nsga2(evaluator.genes, evaluator)
    """

    def __init__(
        self,
        stoichiometry: np.ndarray,
        reactions: Sequence[str],
        lower_bounds: np.ndarray,
        upper_bounds: np.ndarray,
        gene_reactions: Mapping[str, Sequence[str]],
        primary: str,
        secondary: str,
        fraction: float = 0.999,
        secondary_sense: str = "max",
        infeasible_fitness: np.ndarray | None = None,
    ) -> None:
        self.stoichiometry = np.asarray(stoichiometry, dtype=np.float64)
        self.reactions = tuple(reactions)
        self.lower_bounds = np.asarray(lower_bounds, dtype=np.float64)
        self.upper_bounds = np.asarray(upper_bounds, dtype=np.float64)

        n_rxn = len(self.reactions)
        if self.stoichiometry.ndim != 2 or self.stoichiometry.shape[1] != n_rxn:
            raise ValueError(f"stoichiometry must have shape (n_metabolites, {n_rxn}), got {self.stoichiometry.shape}")
        if self.lower_bounds.shape != (n_rxn,) or self.upper_bounds.shape != (n_rxn,):
            raise ValueError(f"flux bounds must have shape ({n_rxn},)")
        if np.any(self.lower_bounds > self.upper_bounds):
            raise ValueError("lower_bounds must not exceed upper_bounds")
        if not 0.0 < fraction <= 1.0:
            raise ValueError(f"fraction must be in (0, 1], got {fraction}")
        if secondary_sense not in ("max", "min"):
            raise ValueError(f"secondary_sense must be 'max' or 'min', got {secondary_sense!r}")

        index = {rxn: i for i, rxn in enumerate(self.reactions)}
        for rxn in (primary, secondary):
            if rxn not in index:
                raise ValueError(f"Unknown reaction '{rxn}'")
        self.primary = index[primary]
        self.secondary = index[secondary]
        self.fraction = fraction
        self.secondary_sense = secondary_sense

        self.gene_reactions: dict[str, np.ndarray] = {}
        for gene, rxns in gene_reactions.items():
            missing = [r for r in rxns if r not in index]
            if missing:
                raise ValueError(f"Gene '{gene}' refers to unknown reactions: {', '.join(missing)}")
            self.gene_reactions[gene] = np.array([index[r] for r in rxns], dtype=np.intp)

        if infeasible_fitness is None:
            infeasible_fitness = np.zeros(2)
        self.infeasible_fitness = np.asarray(infeasible_fitness, dtype=np.float64)
        if self.infeasible_fitness.shape != (2,):
            raise ValueError(f"infeasible_fitness must have shape (2,), got {self.infeasible_fitness.shape}")

    @property
    def genes(self) -> tuple[str, ...]:
        """The gene universe of the model, in declaration order."""
        return tuple(self.gene_reactions)

    def blocked_reactions(self, genome: Genome) -> np.ndarray:
        """Return indices of reactions disabled by the genome's knockouts."""
        blocked = [self.gene_reactions[gene] for gene in genome.knockouts if gene in self.gene_reactions]
        if not blocked:
            return np.array([], dtype=np.intp)
        return np.unique(np.concatenate(blocked))

    def __call__(self, genome: Genome) -> np.ndarray:
        lower = self.lower_bounds.copy()
        upper = self.upper_bounds.copy()
        blocked = self.blocked_reactions(genome)
        lower[blocked] = 0.0
        upper[blocked] = 0.0

        try:
            primary = self._optimize(self.primary, lower, upper, maximize=True)

            # Keep the primary flux near its optimum
            lower[self.primary] = max(lower[self.primary], primary - (1.0 - self.fraction) * abs(primary))
            secondary = self._optimize(self.secondary, lower, upper, maximize=self.secondary_sense == "max")
        except InfeasibleError as exc:
            logger.debug("FBA failed for knockouts %s: %s", list(genome.knockouts), exc)
            return self.infeasible_fitness.copy()

        return np.array([primary, secondary])

    def _optimize(self, reaction: int, lower: np.ndarray, upper: np.ndarray, maximize: bool) -> float:
        """Optimize one reaction's flux at steady state.

        Raises:
            InfeasibleError: If the LP is infeasible, unbounded, or fails.
        """
        c = np.zeros(len(self.reactions))
        c[reaction] = -1.0 if maximize else 1.0

        res = linprog(
            c,
            A_eq=self.stoichiometry,
            b_eq=np.zeros(self.stoichiometry.shape[0]),
            bounds=np.column_stack([lower, upper]),
            method="highs",
        )
        if res.status != 0:
            raise InfeasibleError(res.message)
        return float(res.x[reaction])
