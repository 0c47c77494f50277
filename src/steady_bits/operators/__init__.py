"""Genetic operators for packed bitstrings.

This module provides:
- crossover_at: deterministic single-point recombination at a given bit
- single_point_crossover: recombination at a uniformly drawn bit
- compute_mutation_strength: diversity-dependent mutation strength
- mutation_bit_count: number of flips for a given strength
- mutate: strength-scaled mutation of one selected parent
"""

from steady_bits.operators.crossover import crossover_at, single_point_crossover
from steady_bits.operators.mutation import (
    MUTATION_RATE_CAP,
    compute_mutation_strength,
    mutate,
    mutation_bit_count,
)

__all__ = [
    "crossover_at",
    "single_point_crossover",
    "compute_mutation_strength",
    "mutation_bit_count",
    "mutate",
    "MUTATION_RATE_CAP",
]
