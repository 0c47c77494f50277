"""Shared test fixtures for steady-bits tests.

This module provides common fixtures used across test modules:
- rng: Seeded random number generator
- onemax: Fitness counting set bits
- ranked_onemax: The same fitness exposed through rank()
- counting_fitness: OneMax that records every call
- full_population / growing_population: small hand-built populations
"""

import numpy as np
import pytest

from steady_bits import Population, Solution


def popcount(bitstring: np.ndarray) -> float:
    """Number of set bits in a packed bitstring."""
    return float(np.unpackbits(bitstring).sum())


def make_solution(value: int, n_bytes: int = 1) -> Solution:
    """Build a OneMax-scored solution from an integer (little-endian bytes)."""
    bitstring = np.frombuffer(value.to_bytes(n_bytes, "little"), dtype=np.uint8).copy()
    return Solution(bitstring=bitstring, fitness=popcount(bitstring))


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for deterministic tests."""
    return np.random.default_rng(42)


@pytest.fixture
def onemax():
    """Fitness that counts set bits (maximum = number of bits)."""
    return popcount


class RankedOneMax:
    """OneMax exposed only through rank(); instances are not callable."""

    def rank(self, bitstring: np.ndarray) -> float:
        return popcount(bitstring)


@pytest.fixture
def ranked_onemax() -> RankedOneMax:
    """OneMax scorer in the rank(bitstring) shape."""
    return RankedOneMax()


@pytest.fixture
def counting_fitness():
    """OneMax fitness that tracks all calls for verification.

    Returns a tuple of (fitness_fn, call_log).
    """
    call_log: list[np.ndarray] = []

    def fitness(bitstring: np.ndarray) -> float:
        call_log.append(bitstring.copy())
        return popcount(bitstring)

    return fitness, call_log


@pytest.fixture
def full_population() -> Population:
    """A population of 4 one-byte solutions at capacity.

    Fitness values are 1, 4, 2 and 6; the best sits in slot 3.
    """
    solutions = [
        make_solution(0b0000_0001),
        make_solution(0b0000_1111),
        make_solution(0b0000_0011),
        make_solution(0b0011_1111),
    ]
    return Population(solutions=solutions, num_bits=8, max_size=4)


@pytest.fixture
def growing_population() -> Population:
    """A population of 3 one-byte solutions with room for 5 more."""
    solutions = [make_solution(0b0000_0001), make_solution(0b0000_0111), make_solution(0b0001_1111)]
    return Population(solutions=solutions, num_bits=8, max_size=8)
