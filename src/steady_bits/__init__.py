"""steady-bits: Steady-State Genetic Algorithm over Bitstrings.

A numpy implementation of an elitist steady-state GA that searches fixed-length
bitstrings for one maximizing a caller-supplied fitness function. Mutation
strength adapts to the diversity of the selected parents, and the population
grows whenever the search stagnates.

Example:
    >>> from steady_bits import find_best_solution
    >>> import numpy as np
    >>> def onemax(bitstring): return float(np.unpackbits(bitstring).sum())
    >>> best = find_best_solution(16, onemax, max_iterations_without_improvement=50, seed=42)
    >>> best.bitstring.shape
    (2,)

Example (run statistics and early stopping):
    >>> from steady_bits import steady_state_ga
    >>> def stop(result, iteration): return iteration >= 10
    >>> result = steady_state_ga(16, onemax, 50, seed=42, callback=stop)
    >>> result.iterations <= 10
    True
"""

from steady_bits.algorithms import (
    SearchPhase,
    evolve_step,
    find_best_solution,
    seed_population,
    steady_state_ga,
)
from steady_bits.bitstring import (
    flip_bit,
    flip_random_bits,
    get_bit,
    hamming_agreement,
    n_bytes,
    pack_bits,
    random_bitstring,
    unpack_bits,
)
from steady_bits.fitness import as_fitness, evaluate
from steady_bits.operators import (
    compute_mutation_strength,
    crossover_at,
    mutate,
    mutation_bit_count,
    single_point_crossover,
)
from steady_bits.population import INITIAL_MAX_SIZE, Population, Solution
from steady_bits.protocols import FitnessFunction, RankedFitness
from steady_bits.results import SearchResult
from steady_bits.survival import breed_and_replace

__all__ = [
    # Algorithms
    "steady_state_ga",
    "find_best_solution",
    "seed_population",
    "evolve_step",
    "SearchPhase",
    # Genetic operators
    "single_point_crossover",
    "crossover_at",
    "compute_mutation_strength",
    "mutation_bit_count",
    "mutate",
    "breed_and_replace",
    # Bitstring primitives
    "flip_bit",
    "get_bit",
    "flip_random_bits",
    "hamming_agreement",
    "random_bitstring",
    "n_bytes",
    "pack_bits",
    "unpack_bits",
    # Fitness capability
    "FitnessFunction",
    "RankedFitness",
    "as_fitness",
    "evaluate",
    # Data structures
    "Population",
    "Solution",
    "INITIAL_MAX_SIZE",
    # Result types
    "SearchResult",
]
