"""Population data structures for the steady-state bitstring GA.

This module provides the core data structures of a search run:

- Solution: a packed bitstring together with its cached fitness
- Population: the evolving set of solutions, its best-fitness cache and its
  adaptive capacity

Unlike a generational population, a Population here is mutated in place for
the whole run. The best-fitness cache is maintained eagerly, so every write
to a slot goes through a method that refreshes it.
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from steady_bits.bitstring import check_bitstring, n_bytes

logger = logging.getLogger(__name__)

INITIAL_MAX_SIZE = 16


@dataclass
class Solution:
    """A candidate solution: a packed bitstring and its cached fitness.

    The bitstring keeps its length for its whole life; only its content
    changes. Whoever changes the content must re-score the solution so that
    ``fitness`` always matches the current bits.

    Attributes:
        bitstring: Packed bits, 1-D uint8 array.
        fitness: Score of the current bitstring, higher is better.

    Example:
        >>> s = Solution(bitstring=np.array([0xFF], dtype=np.uint8), fitness=8.0)
        >>> s.n_bytes
        1
    """

    bitstring: np.ndarray
    fitness: float

    def __post_init__(self) -> None:
        """Validate the bitstring and fitness.

        Raises:
            TypeError: If bitstring is not a 1-D uint8 numpy array.
            ValueError: If fitness is not finite.
        """
        check_bitstring(self.bitstring)
        self.fitness = float(self.fitness)
        if not math.isfinite(self.fitness):
            raise ValueError(f"fitness must be finite, got {self.fitness}")

    @property
    def n_bytes(self) -> int:
        """Return the byte length of the bitstring."""
        return self.bitstring.shape[0]

    def copy(self) -> "Solution":
        """Return an independent copy of this solution."""
        return Solution(bitstring=self.bitstring.copy(), fitness=self.fitness)


@dataclass
class Population:
    """The evolving set of candidate solutions of one search run.

    Indices into ``solutions`` are stable handles within one iteration; the
    order itself carries no meaning.

    Invariants:
        1. ``1 <= len(solutions) <= max_size``.
        2. ``solutions[best_fitness_index].fitness == best_fitness`` and no
           solution has a higher fitness.

    Attributes:
        solutions: Members of the population.
        num_bits: Logical bit count shared by every member.
        max_size: Capacity ceiling. Starts at ``INITIAL_MAX_SIZE`` and only
            ever doubles.
        iterations_without_improvement: Stagnation counter.
        best_fitness: Fitness of the best member (computed on construction).
        best_fitness_index: Slot of the best member (computed on construction).
        growth_events: Number of times ``max_size`` has doubled.

    Example:
        >>> solutions = [
        ...     Solution(np.array([0b0011], dtype=np.uint8), 2.0),
        ...     Solution(np.array([0b0111], dtype=np.uint8), 3.0),
        ... ]
        >>> pop = Population(solutions=solutions, num_bits=4)
        >>> pop.best_fitness_index
        1
    """

    solutions: list[Solution]
    num_bits: int
    max_size: int = INITIAL_MAX_SIZE
    iterations_without_improvement: int = 0
    best_fitness: float = field(init=False)
    best_fitness_index: int = field(init=False)
    growth_events: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Validate members and build the best-fitness cache.

        Raises:
            ValueError: If the population is empty, exceeds max_size, or its
                members do not all hold ``num_bits`` logical bits.
        """
        if self.num_bits <= 0:
            raise ValueError(f"num_bits must be positive, got {self.num_bits}")
        if self.max_size <= 0:
            raise ValueError(f"max_size must be positive, got {self.max_size}")
        if not self.solutions:
            raise ValueError("population must contain at least one solution")
        if len(self.solutions) > self.max_size:
            raise ValueError(f"population has {len(self.solutions)} solutions, exceeding max_size {self.max_size}")

        self.solutions = list(self.solutions)
        for solution in self.solutions:
            self._check_length(solution)
        self.recompute_best()

    def _check_length(self, solution: Solution) -> None:
        expected = n_bytes(self.num_bits)
        if solution.n_bytes != expected:
            raise ValueError(
                f"solution has {solution.n_bytes} bytes, expected {expected} for {self.num_bits} bits"
            )

    def __len__(self) -> int:
        """Return the number of solutions in the population."""
        return len(self.solutions)

    def __getitem__(self, idx: int) -> Solution:
        """Return the solution in slot ``idx``."""
        return self.solutions[idx]

    @property
    def is_full(self) -> bool:
        """Whether the population has reached ``max_size``."""
        return len(self.solutions) >= self.max_size

    @property
    def best(self) -> Solution:
        """Return the best-known solution."""
        return self.solutions[self.best_fitness_index]

    def draw_pair(self, rng: np.random.Generator) -> tuple[int, int]:
        """Draw two distinct uniform random slots.

        The second slot is resampled until it differs from the first.

        Raises:
            ValueError: If the population has fewer than two members.
        """
        n = len(self.solutions)
        if n < 2:
            raise ValueError(f"need at least 2 solutions to draw a pair, got {n}")
        spot1 = int(rng.integers(n))
        spot2 = int(rng.integers(n))
        while spot1 == spot2:
            spot2 = int(rng.integers(n))
        return spot1, spot2

    def consider(self, index: int) -> bool:
        """Promote slot ``index`` into the best cache if it beats the current best.

        Returns:
            True if the cache now points at ``index`` because of this call.
        """
        fitness = self.solutions[index].fitness
        if fitness > self.best_fitness:
            self.best_fitness = fitness
            self.best_fitness_index = index
            return True
        return False

    def append(self, solution: Solution) -> int:
        """Add a new member and return its slot.

        Raises:
            ValueError: If the population is full or the bitstring length differs.
        """
        if self.is_full:
            raise ValueError(f"population is full (max_size={self.max_size})")
        self._check_length(solution)
        self.solutions.append(solution)
        index = len(self.solutions) - 1
        self.consider(index)
        return index

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.solutions):
            raise IndexError(f"slot {index} is out of range for population of size {len(self.solutions)}")

    def replace(self, index: int, solution: Solution) -> None:
        """Overwrite slot ``index`` and refresh the best cache.

        Raises:
            IndexError: If index is outside ``[0, len(population))``.
            ValueError: If the bitstring length differs.
        """
        self._check_index(index)
        self._check_length(solution)
        self.solutions[index] = solution
        self._refresh(index)

    def rescore(self, index: int, fitness: float) -> None:
        """Record a new fitness for a slot whose bitstring changed in place.

        Raises:
            IndexError: If index is outside ``[0, len(population))``.
            ValueError: If fitness is not finite.
        """
        self._check_index(index)
        fitness = float(fitness)
        if not math.isfinite(fitness):
            raise ValueError(f"fitness must be finite, got {fitness}")
        self.solutions[index].fitness = fitness
        self._refresh(index)

    def _refresh(self, index: int) -> None:
        # The best slot losing fitness means another slot may now be the best.
        if index == self.best_fitness_index and self.solutions[index].fitness < self.best_fitness:
            self.recompute_best()
        else:
            self.consider(index)

    def recompute_best(self) -> None:
        """Rebuild the best-fitness cache by scanning every member.

        Ties resolve to the lowest slot.
        """
        fitness = np.array([s.fitness for s in self.solutions])
        self.best_fitness_index = int(np.argmax(fitness))
        self.best_fitness = float(fitness[self.best_fitness_index])

    def grow(self) -> None:
        """Double ``max_size`` and reset the stagnation counter."""
        old_size = self.max_size
        self.max_size *= 2
        self.iterations_without_improvement = 0
        self.growth_events += 1
        logger.debug(
            "population stagnated at %d members, growing max_size %d -> %d",
            len(self.solutions),
            old_size,
            self.max_size,
        )

    def check_invariants(self) -> None:
        """Assert the population invariants.

        A failure indicates a logic defect, not a recoverable condition.

        Raises:
            AssertionError: If an invariant does not hold.
        """
        assert 0 < len(self.solutions) <= self.max_size, (
            f"population size {len(self.solutions)} outside [1, {self.max_size}]"
        )
        assert 0 <= self.best_fitness_index < len(self.solutions), (
            f"best_fitness_index {self.best_fitness_index} out of range"
        )
        assert self.solutions[self.best_fitness_index].fitness == self.best_fitness, (
            f"best_fitness {self.best_fitness} does not match slot {self.best_fitness_index} "
            f"(fitness {self.solutions[self.best_fitness_index].fitness})"
        )
        top = max(s.fitness for s in self.solutions)
        assert top <= self.best_fitness, f"a solution has fitness {top} above best_fitness {self.best_fitness}"
