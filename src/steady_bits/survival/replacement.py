"""Steady-state breeding with strictly-improving replacement."""

import numpy as np

from steady_bits.fitness import evaluate
from steady_bits.operators.crossover import single_point_crossover
from steady_bits.population import Population, Solution
from steady_bits.protocols import FitnessFunction, RankedFitness


def breed_and_replace(
    population: Population,
    spot1: int,
    spot2: int,
    fitness: FitnessFunction | RankedFitness,
    rng: np.random.Generator,
) -> int | None:
    """Breed a child from two slots and decide where it lives.

    While the population is below ``max_size`` the child is appended
    unconditionally. At capacity the child only ever replaces a parent it
    strictly beats:

    - beats both parents: replaces the weaker one (``spot2`` on ties)
    - beats one parent: replaces that parent
    - beats neither: the population is left unchanged

    Every write refreshes the best-fitness cache, and since a replacement
    only ever raises a slot's fitness the cached best cannot go stale.

    Args:
        population: Population owning both slots, modified in place.
        spot1: First parent slot; supplies the bits below the crossover point.
        spot2: Second parent slot; supplies the remaining bits.
        fitness: Scorer, callable or exposing ``rank``.
        rng: NumPy random number generator.

    Returns:
        The slot the child was written to, or None if it was discarded.
    """
    parent1 = population[spot1]
    parent2 = population[spot2]
    bitstring = single_point_crossover(parent1.bitstring, parent2.bitstring, rng, population.num_bits)
    child = Solution(bitstring=bitstring, fitness=evaluate(fitness, bitstring))

    if not population.is_full:
        return population.append(child)

    beats_first = child.fitness > parent1.fitness
    beats_second = child.fitness > parent2.fitness
    if beats_first and beats_second:
        slot = spot1 if parent1.fitness < parent2.fitness else spot2
    elif beats_first:
        slot = spot1
    elif beats_second:
        slot = spot2
    else:
        return None

    population.replace(slot, child)
    return slot
