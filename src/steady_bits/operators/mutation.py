"""Diversity-aware mutation for the steady-state GA.

Mutation strength depends on how similar the two selected parents are. The
strength curve is bowl-shaped over the parents' agreement fraction: zero when
they agree on half their bits and one when they are identical or exact
complements. Near-identical or maximally different parents get pushed hard to
keep exploring; at intermediate diversity mutation stays gentle and leaves
the work to crossover.
"""

import math

import numpy as np

from steady_bits.bitstring import flip_random_bits, hamming_agreement, logical_bits
from steady_bits.fitness import evaluate
from steady_bits.population import Population
from steady_bits.protocols import FitnessFunction, RankedFitness

MUTATION_RATE_CAP = 0.1
"""Largest fraction of the logical bits a single mutation flips."""


def compute_mutation_strength(parent_a: np.ndarray, parent_b: np.ndarray, n_bits: int | None = None) -> float:
    """Compute the mutation strength for a pair of parents.

    With ``s`` the fraction of agreeing bits, the strength is
    ``(2 * (s - 0.5)) ** 2``.

    Args:
        parent_a: First packed bitstring.
        parent_b: Second packed bitstring, same length.
        n_bits: Logical bit count; defaults to the full byte range.

    Returns:
        Strength in ``[0, 1]``.

    Raises:
        ValueError: If the parents differ in length.

    Examples:
        >>> a = np.array([0b1111], dtype=np.uint8)
        >>> compute_mutation_strength(a, a, n_bits=4)
        1.0
        >>> compute_mutation_strength(a, np.array([0b0011], dtype=np.uint8), n_bits=4)
        0.0
    """
    n_bits = logical_bits(parent_a, n_bits)
    agreement = hamming_agreement(parent_a, parent_b, n_bits) / n_bits
    centered = 2.0 * (agreement - 0.5)
    return centered * centered


def mutation_bit_count(strength: float, n_bits: int) -> int:
    """Number of flips for a given strength: at most 10% of bits, at least one."""
    return max(1, math.floor(strength * MUTATION_RATE_CAP * n_bits))


def mutate(
    population: Population,
    spot1: int,
    spot2: int,
    fitness: FitnessFunction | RankedFitness,
    rng: np.random.Generator,
) -> int:
    """Mutate one of two selected parents in place and re-score it.

    The target is ``spot1`` unless ``spot1`` holds the best-known solution,
    in which case ``spot2`` is mutated instead so the best is never degraded.

    Args:
        population: Population owning both slots.
        spot1: First selected slot.
        spot2: Second selected slot, distinct from ``spot1``.
        fitness: Scorer, callable or exposing ``rank``.
        rng: NumPy random number generator.

    Returns:
        The slot that was mutated.

    Raises:
        ValueError: If spot1 equals spot2.
    """
    if spot1 == spot2:
        raise ValueError(f"mutation needs two distinct slots, got {spot1} twice")

    target = spot2 if spot1 == population.best_fitness_index else spot1
    strength = compute_mutation_strength(
        population[spot1].bitstring,
        population[spot2].bitstring,
        population.num_bits,
    )
    bitstring = population[target].bitstring
    flip_random_bits(bitstring, mutation_bit_count(strength, population.num_bits), rng, n_bits=population.num_bits)
    population.rescore(target, evaluate(fitness, bitstring))
    return target
