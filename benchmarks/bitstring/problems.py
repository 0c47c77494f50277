"""Pseudo-boolean test problems for bitstring GA benchmarking.

All problems take a packed uint8 bitstring (bit i lives in byte i // 8 at
position i % 8) and return a fitness to maximize. Padding bits beyond
``N_BITS`` are ignored.

References:
    Ackley, D. H. (1987). A connectionist machine for genetic hillclimbing.
    Deb, K., & Goldberg, D. E. (1993). Analyzing deception in trap functions.
    Mitchell, M., Forrest, S., & Holland, J. H. (1992). The royal road for
    genetic algorithms: Fitness landscapes and GA performance.
"""

from collections.abc import Callable

import numpy as np

# Problem configuration
N_BITS: int = 64
TRAP_BLOCK: int = 4
ROYAL_ROAD_BLOCK: int = 8


def _bits(bitstring: np.ndarray) -> np.ndarray:
    return np.unpackbits(bitstring, bitorder="little")[:N_BITS]


def onemax(bitstring: np.ndarray) -> float:
    """OneMax: number of set bits.

    Unimodal; every single-bit improvement leads to the optimum.
    """
    return float(_bits(bitstring).sum())


def leading_ones(bitstring: np.ndarray) -> float:
    """LeadingOnes: length of the run of set bits starting at bit 0."""
    bits = _bits(bitstring)
    zeros = np.flatnonzero(bits == 0)
    return float(zeros[0] if zeros.size else N_BITS)


def trap4(bitstring: np.ndarray) -> float:
    """Concatenated deceptive traps of 4 bits.

    A block with u set bits scores 4 if u == 4 and 3 - u otherwise, so the
    gradient inside each block points away from the optimum.
    """
    u = _bits(bitstring).reshape(-1, TRAP_BLOCK).sum(axis=1)
    return float(np.where(u == TRAP_BLOCK, TRAP_BLOCK, TRAP_BLOCK - 1 - u).sum())


def royal_road(bitstring: np.ndarray) -> float:
    """Royal Road R1: 8 points for every fully set block of 8 bits."""
    blocks = _bits(bitstring).reshape(-1, ROYAL_ROAD_BLOCK).all(axis=1)
    return float(ROYAL_ROAD_BLOCK * blocks.sum())


# Problem registry for easy iteration
PROBLEMS: dict[str, Callable[[np.ndarray], float]] = {
    "onemax": onemax,
    "leading_ones": leading_ones,
    "trap4": trap4,
    "royal_road": royal_road,
}

# Known optimum of every problem at N_BITS
OPTIMA: dict[str, float] = {
    "onemax": float(N_BITS),
    "leading_ones": float(N_BITS),
    "trap4": float(N_BITS),
    "royal_road": float(N_BITS),
}
