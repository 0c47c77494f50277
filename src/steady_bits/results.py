"""Result type for steady-state bitstring search.

SearchResult bundles the best solution of a run with the run's bookkeeping.
It is immutable (frozen dataclass); the best solution is copied on
construction so later changes to the population cannot leak into it.
"""

from dataclasses import dataclass

import numpy as np

from steady_bits.population import Solution


@dataclass(frozen=True)
class SearchResult:
    """Results from a steady-state GA run.

    Attributes:
        solution: Copy of the best solution found.
        iterations: Number of EVOLVING iterations completed.
        evaluations: Total number of fitness evaluations performed.
        max_size: Population capacity when the run ended.
        population_size: Number of solutions when the run ended.
        growth_events: Number of times the capacity doubled.

    Example:
        >>> best = Solution(bitstring=np.array([0xFF], dtype=np.uint8), fitness=8.0)
        >>> result = SearchResult(
        ...     solution=best,
        ...     iterations=120,
        ...     evaluations=256,
        ...     max_size=32,
        ...     population_size=20,
        ...     growth_events=1,
        ... )
        >>> bitstring, fitness = result.best
        >>> fitness
        8.0
    """

    solution: Solution
    iterations: int
    evaluations: int
    max_size: int
    population_size: int
    growth_events: int

    def __post_init__(self) -> None:
        """Validate counters and copy the solution for immutability.

        Raises:
            TypeError: If solution is not a Solution.
            ValueError: If a counter is negative or population_size exceeds max_size.
        """
        if not isinstance(self.solution, Solution):
            raise TypeError(f"solution must be a Solution, got {type(self.solution).__name__}")
        for name in ("iterations", "evaluations", "growth_events"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.population_size <= 0:
            raise ValueError(f"population_size must be positive, got {self.population_size}")
        if self.population_size > self.max_size:
            raise ValueError(
                f"population_size ({self.population_size}) cannot exceed max_size ({self.max_size})"
            )

        # Copy solution for immutability (use object.__setattr__ for frozen dataclass)
        object.__setattr__(self, "solution", self.solution.copy())

    @property
    def best(self) -> tuple[np.ndarray, float]:
        """Extract the best bitstring and its fitness value.

        Returns:
            Tuple of (bitstring, fitness) for the best solution.
        """
        return (self.solution.bitstring, self.solution.fitness)
