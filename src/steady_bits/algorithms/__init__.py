"""Search algorithm implementations.

This module provides the steady-state GA controller and its building blocks.
"""

from steady_bits.algorithms.steady_state import (
    SearchPhase,
    evolve_step,
    find_best_solution,
    seed_population,
    steady_state_ga,
)

__all__ = ["SearchPhase", "evolve_step", "find_best_solution", "seed_population", "steady_state_ga"]
