"""Performance metrics for single-objective bitstring optimization.

Runs are compared by how close their best fitness gets to the known optimum
of a problem, and by how often they reach it.
"""

import numpy as np


def optimality_gap(best_fitness: float, optimum: float) -> float:
    """Compute the normalized distance of a result to the optimum.

    Args:
        best_fitness: Best fitness found by a run.
        optimum: Known optimal fitness of the problem (must be positive).

    Returns:
        (optimum - best_fitness) / optimum, so 0.0 means the optimum was found.

    Raises:
        ValueError: If optimum is not positive.
    """
    if optimum <= 0:
        raise ValueError(f"optimum must be positive, got {optimum}")
    return (optimum - best_fitness) / optimum


def hit_rate(best_fitnesses: list[float] | np.ndarray, optimum: float) -> float:
    """Fraction of runs whose best fitness reached the optimum.

    Args:
        best_fitnesses: Best fitness of each run.
        optimum: Known optimal fitness of the problem.

    Returns:
        Value in [0, 1].

    Raises:
        ValueError: If best_fitnesses is empty.
    """
    values = np.asarray(best_fitnesses, dtype=np.float64)
    if values.size == 0:
        raise ValueError("best_fitnesses cannot be empty")
    return float(np.mean(values >= optimum))
