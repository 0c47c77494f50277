"""Single-point crossover for packed bitstrings.

The crossover point is a logical bit index, so recombination is exact at bit
granularity: whole bytes are copied on either side of the crossover byte and
a mask splits the crossover byte itself.
"""

import numpy as np

from steady_bits.bitstring import BITS_PER_BYTE, logical_bits


def crossover_at(parent1: np.ndarray, parent2: np.ndarray, point: int) -> np.ndarray:
    """Recombine two parents at logical bit ``point``.

    Child bit ``i`` equals ``parent1`` bit ``i`` for ``i < point`` and
    ``parent2`` bit ``i`` for ``i >= point``.

    Args:
        parent1: Packed bitstring supplying the bits below the point.
        parent2: Packed bitstring supplying the bits from the point on.
        point: Crossover point in ``[0, len(parent1) * 8)``.

    Returns:
        A new bitstring with the parents' byte length.

    Raises:
        ValueError: If the parents differ in length or point is out of range.

    Examples:
        >>> p1 = np.array([0x00, 0x00], dtype=np.uint8)
        >>> p2 = np.array([0xFF, 0xFF], dtype=np.uint8)
        >>> crossover_at(p1, p2, 3)
        array([248, 255], dtype=uint8)
    """
    if parent1.shape != parent2.shape:
        raise ValueError(f"parents must have equal length, got {parent1.shape[0]} and {parent2.shape[0]} bytes")
    total = parent1.shape[0] * BITS_PER_BYTE
    if point < 0 or point >= total:
        raise ValueError(f"crossover point must be in [0, {total}), got {point}")

    split = point // BITS_PER_BYTE
    child = np.empty_like(parent1)
    child[:split] = parent1[:split]
    child[split + 1 :] = parent2[split + 1 :]

    # Low-order bits of the crossover byte come from parent1.
    mask = np.uint8((1 << (point % BITS_PER_BYTE)) - 1)
    child[split] = (parent1[split] & mask) | (parent2[split] & ~mask)
    return child


def single_point_crossover(
    parent1: np.ndarray,
    parent2: np.ndarray,
    rng: np.random.Generator,
    n_bits: int | None = None,
) -> np.ndarray:
    """Recombine two parents at a uniformly drawn crossover point.

    Args:
        parent1: Packed bitstring supplying the bits below the point.
        parent2: Packed bitstring supplying the remaining bits.
        rng: NumPy random number generator.
        n_bits: Logical bit count. The point is drawn from ``[0, n_bits)``;
            defaults to the full byte range.

    Returns:
        A new bitstring with the parents' byte length. Parents are not modified.

    Raises:
        ValueError: If the parents differ in length.
    """
    if parent1.shape != parent2.shape:
        raise ValueError(f"parents must have equal length, got {parent1.shape[0]} and {parent2.shape[0]} bytes")
    point = int(rng.integers(logical_bits(parent1, n_bits)))
    return crossover_at(parent1, parent2, point)
