"""Steady-state genetic algorithm over fixed-length bitstrings.

The search runs as a small state machine:

- SEEDING: create ``initial_max_size`` random solutions and score them
- EVOLVING: repeat single steps of select / mutate / breed / replace, growing
  the population capacity whenever the best fitness stagnates
- DONE: return the best solution found

Each EVOLVING step draws two distinct members, mutates one of them with a
strength that depends on how similar the pair is, breeds a child from the
pair and lets the child replace a parent only if it strictly improves on it.
Once the best fitness has not improved for more than ``3 * len(population)``
steps the capacity doubles, which lets the population grow again through
unconditional appends. The run ends when the stagnation counter reaches
``max_iterations_without_improvement``; growth resets that counter too, so
growth postpones termination.

Example:
    >>> from steady_bits import find_best_solution
    >>> import numpy as np
    >>>
    >>> def onemax(bitstring):
    ...     return float(np.unpackbits(bitstring).sum())
    >>>
    >>> best = find_best_solution(8, onemax, max_iterations_without_improvement=50, seed=1)
    >>> best.bitstring.shape
    (1,)
"""

import logging
from collections.abc import Callable
from enum import Enum

import numpy as np

from steady_bits.bitstring import random_bitstring
from steady_bits.fitness import as_fitness, evaluate
from steady_bits.operators.mutation import mutate
from steady_bits.population import INITIAL_MAX_SIZE, Population, Solution
from steady_bits.protocols import FitnessFunction, RankedFitness
from steady_bits.results import SearchResult
from steady_bits.survival.replacement import breed_and_replace

logger = logging.getLogger(__name__)

GROWTH_PATIENCE = 3
"""Stagnation budget per member before the population capacity doubles."""

EVALUATIONS_PER_STEP = 2
"""Fitness calls per EVOLVING step: one for the mutant, one for the child."""


class SearchPhase(Enum):
    """Phases of a search run."""

    SEEDING = "seeding"
    EVOLVING = "evolving"
    DONE = "done"


def seed_population(
    num_bits: int,
    fitness: FitnessFunction | RankedFitness,
    rng: np.random.Generator,
    size: int = INITIAL_MAX_SIZE,
) -> Population:
    """Create the initial population of random, scored solutions.

    Args:
        num_bits: Logical bit count of every solution.
        fitness: Scorer, callable or exposing ``rank``.
        rng: NumPy random number generator.
        size: Number of solutions, also used as the initial ``max_size``.

    Returns:
        A full Population with a zero stagnation counter.
    """
    fitness = as_fitness(fitness)
    solutions = []
    for _ in range(size):
        bitstring = random_bitstring(num_bits, rng)
        solutions.append(Solution(bitstring=bitstring, fitness=evaluate(fitness, bitstring)))
    return Population(solutions=solutions, num_bits=num_bits, max_size=size)


def evolve_step(population: Population, fitness: FitnessFunction | RankedFitness, rng: np.random.Generator) -> bool:
    """Run one EVOLVING iteration on ``population`` in place.

    Args:
        population: Population with at least two members.
        fitness: Scorer, callable or exposing ``rank``.
        rng: NumPy random number generator.

    Returns:
        True if the best fitness improved during this iteration.
    """
    spot1, spot2 = population.draw_pair(rng)
    previous_best = population.best_fitness

    mutate(population, spot1, spot2, fitness, rng)
    breed_and_replace(population, spot1, spot2, fitness, rng)

    improved = population.best_fitness > previous_best
    if improved:
        population.iterations_without_improvement = 0
    else:
        population.iterations_without_improvement += 1

    if population.iterations_without_improvement > GROWTH_PATIENCE * len(population):
        population.grow()
    return improved


def _snapshot(population: Population, iterations: int, evaluations: int) -> SearchResult:
    return SearchResult(
        solution=population.best,
        iterations=iterations,
        evaluations=evaluations,
        max_size=population.max_size,
        population_size=len(population),
        growth_events=population.growth_events,
    )


def steady_state_ga(
    num_bits: int,
    fitness: FitnessFunction | RankedFitness,
    max_iterations_without_improvement: int,
    seed: int | None = None,
    callback: Callable[[SearchResult, int], bool] | None = None,
    initial_max_size: int = INITIAL_MAX_SIZE,
    check_invariants: bool = False,
) -> SearchResult:
    """Search for the bitstring maximizing ``fitness``.

    Args:
        num_bits: Logical length of the bitstrings searched over.
        fitness: Scorer, either a callable ``bitstring -> float`` or an object
            with a ``rank(bitstring) -> float`` method. Higher is better. It
            receives packed uint8 bitstrings (see ``steady_bits.bitstring``).
        max_iterations_without_improvement: Stagnation threshold that ends
            the run.
        seed: Random seed for reproducibility. If None, uses system entropy.
        callback: Optional callback called after every EVOLVING iteration.
            Signature: (result: SearchResult, iteration: int) -> bool
            If callback returns True, the search stops early.
        initial_max_size: Size of the seeded population and its initial capacity.
        check_invariants: Assert the population invariants after every
            iteration. Slow; meant for debugging and tests.

    Returns:
        SearchResult with a copy of the best solution and run statistics.

    Raises:
        ValueError: If num_bits or max_iterations_without_improvement is not
            positive, if initial_max_size is below 2, or if fitness returns a
            non-finite value.
        TypeError: If fitness is not a usable scorer.
        AssertionError: If check_invariants is set and an invariant breaks.

    Example with early stopping:
        >>> import numpy as np
        >>> def onemax(bitstring):
        ...     return float(np.unpackbits(bitstring).sum())
        >>>
        >>> def stop_at_optimum(result: SearchResult, iteration: int) -> bool:
        ...     return result.solution.fitness >= 64
        >>>
        >>> result = steady_state_ga(64, onemax, 500, seed=7, callback=stop_at_optimum)
    """
    if num_bits <= 0:
        raise ValueError(f"num_bits must be positive, got {num_bits}")
    if max_iterations_without_improvement <= 0:
        raise ValueError(
            f"max_iterations_without_improvement must be positive, got {max_iterations_without_improvement}"
        )
    if initial_max_size < 2:
        raise ValueError(f"initial_max_size must be at least 2, got {initial_max_size}")

    fitness = as_fitness(fitness)
    rng = np.random.default_rng(seed)

    phase = SearchPhase.SEEDING
    logger.info(
        "starting steady-state search: num_bits=%d, max_iterations_without_improvement=%d, seed=%s",
        num_bits,
        max_iterations_without_improvement,
        seed,
    )
    population = seed_population(num_bits, fitness, rng, size=initial_max_size)
    evaluations = initial_max_size
    iterations = 0

    phase = SearchPhase.EVOLVING
    while phase is SearchPhase.EVOLVING:
        evolve_step(population, fitness, rng)
        iterations += 1
        evaluations += EVALUATIONS_PER_STEP

        if check_invariants:
            population.check_invariants()

        stop = callback is not None and callback(_snapshot(population, iterations, evaluations), iterations)
        if stop or population.iterations_without_improvement >= max_iterations_without_improvement:
            phase = SearchPhase.DONE

    result = _snapshot(population, iterations, evaluations)
    logger.info(
        "search finished: best_fitness=%s after %d iterations, %d evaluations, %d growth events",
        result.solution.fitness,
        iterations,
        evaluations,
        result.growth_events,
    )
    return result


def find_best_solution(
    num_bits: int,
    fitness: FitnessFunction | RankedFitness,
    max_iterations_without_improvement: int,
    seed: int | None = None,
) -> Solution:
    """Run a steady-state search and return only the best solution.

    See ``steady_state_ga`` for the arguments and raised errors.
    """
    return steady_state_ga(num_bits, fitness, max_iterations_without_improvement, seed=seed).solution
