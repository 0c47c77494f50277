"""Bitstring primitives for byte-packed candidate solutions.

A bitstring is a 1-D ``uint8`` numpy array. Logical bit ``i`` lives in byte
``i // 8`` at position ``i % 8`` (little-endian within each byte), so a
bitstring of ``num_bits`` logical bits occupies ``ceil(num_bits / 8)`` bytes.

This module provides:
- flip_bit / get_bit: single-bit access
- flip_random_bits: uniform random bit flipping
- hamming_agreement: number of positions where two bitstrings agree
- random_bitstring: random initialization of a packed bitstring
- pack_bits / unpack_bits: conversion to and from arrays of 0/1 values
"""

import numpy as np

BITS_PER_BYTE = 8


def n_bytes(num_bits: int) -> int:
    """Return the number of bytes needed to hold ``num_bits`` logical bits.

    Raises:
        ValueError: If num_bits is not positive.

    Examples:
        >>> n_bytes(8)
        1
        >>> n_bytes(9)
        2
    """
    if num_bits <= 0:
        raise ValueError(f"num_bits must be positive, got {num_bits}")
    return (num_bits + BITS_PER_BYTE - 1) // BITS_PER_BYTE


def check_bitstring(bitstring: np.ndarray, name: str = "bitstring") -> None:
    """Validate that ``bitstring`` is a non-empty 1-D uint8 numpy array.

    Raises:
        TypeError: If bitstring is not a numpy array of dtype uint8.
        ValueError: If bitstring is not 1-D or is empty.
    """
    if not isinstance(bitstring, np.ndarray):
        raise TypeError(f"{name} must be a numpy array, got {type(bitstring).__name__}")
    if bitstring.dtype != np.uint8:
        raise TypeError(f"{name} must have dtype uint8, got {bitstring.dtype}")
    if bitstring.ndim != 1:
        raise ValueError(f"{name} must be 1D, got shape {bitstring.shape}")
    if bitstring.shape[0] == 0:
        raise ValueError(f"{name} must contain at least one byte")


def logical_bits(bitstring: np.ndarray, n_bits: int | None) -> int:
    """Resolve an optional logical bit count against the byte length of ``bitstring``."""
    total = bitstring.shape[0] * BITS_PER_BYTE
    if n_bits is None:
        return total
    if n_bits <= 0 or n_bits > total:
        raise ValueError(f"n_bits must be in [1, {total}] for a {bitstring.shape[0]}-byte bitstring, got {n_bits}")
    return n_bits


def _logical_mask(length: int, n_bits: int) -> np.ndarray:
    """Byte masks selecting the first ``n_bits`` logical bits of ``length`` bytes."""
    mask = np.full(length, 0xFF, dtype=np.uint8)
    mask[n_bytes(n_bits) :] = 0
    tail = n_bits % BITS_PER_BYTE
    if tail:
        mask[n_bits // BITS_PER_BYTE] = (1 << tail) - 1
    return mask


def flip_bit(bitstring: np.ndarray, position: int) -> None:
    """Toggle the bit at logical index ``position`` in place.

    Args:
        bitstring: Packed bitstring, modified in place.
        position: 0-based logical bit index.

    Raises:
        IndexError: If position is outside ``[0, len(bitstring) * 8)``.

    Examples:
        >>> b = np.zeros(2, dtype=np.uint8)
        >>> flip_bit(b, 9)
        >>> b
        array([0, 2], dtype=uint8)
    """
    total = bitstring.shape[0] * BITS_PER_BYTE
    if position < 0 or position >= total:
        raise IndexError(f"bit position {position} is out of bounds for bitstring with {total} bits")
    bitstring[position // BITS_PER_BYTE] ^= np.uint8(1 << (position % BITS_PER_BYTE))


def get_bit(bitstring: np.ndarray, position: int) -> bool:
    """Return the bit at logical index ``position``.

    Raises:
        IndexError: If position is outside ``[0, len(bitstring) * 8)``.
    """
    total = bitstring.shape[0] * BITS_PER_BYTE
    if position < 0 or position >= total:
        raise IndexError(f"bit position {position} is out of bounds for bitstring with {total} bits")
    return bool((bitstring[position // BITS_PER_BYTE] >> (position % BITS_PER_BYTE)) & 1)


def flip_random_bits(
    bitstring: np.ndarray,
    count: int,
    rng: np.random.Generator,
    n_bits: int | None = None,
) -> None:
    """Flip ``count`` uniformly chosen bits in place.

    Positions are drawn independently, so the same bit may be drawn more
    than once and fewer than ``count`` bits may end up changed.

    Args:
        bitstring: Packed bitstring, modified in place.
        count: Number of flips to perform.
        rng: NumPy random number generator.
        n_bits: Logical bit count. Positions are drawn from ``[0, n_bits)``;
            defaults to the full byte range.

    Raises:
        ValueError: If count is negative or n_bits is out of range.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    n_bits = logical_bits(bitstring, n_bits)
    for position in rng.integers(0, n_bits, size=count):
        flip_bit(bitstring, int(position))


def hamming_agreement(a: np.ndarray, b: np.ndarray, n_bits: int | None = None) -> int:
    """Count the bit positions at which two bitstrings agree.

    This is the complement of the Hamming distance, computed as the
    population count of the byte-wise XNOR summed over all bytes.

    Args:
        a: First packed bitstring.
        b: Second packed bitstring, same length as ``a``.
        n_bits: Logical bit count. Padding bits beyond it are not counted.

    Returns:
        Number of agreeing positions, in ``[0, n_bits]``.

    Raises:
        ValueError: If the bitstrings differ in length.

    Examples:
        >>> hamming_agreement(np.array([0b1111], dtype=np.uint8), np.array([0b0101], dtype=np.uint8))
        6
    """
    if a.shape != b.shape:
        raise ValueError(f"bitstrings must have equal length, got {a.shape[0]} and {b.shape[0]} bytes")
    n_bits = logical_bits(a, n_bits)
    same = np.bitwise_not(np.bitwise_xor(a, b)) & _logical_mask(a.shape[0], n_bits)
    return int(np.unpackbits(same).sum())


def random_bitstring(num_bits: int, rng: np.random.Generator) -> np.ndarray:
    """Create a random bitstring of ``num_bits`` logical bits.

    The bytes start at zero and receive ``3 * num_bits`` random flips over
    the logical range, which leaves each bit close to uniformly distributed.
    Padding bits in the last byte remain zero.
    """
    bitstring = np.zeros(n_bytes(num_bits), dtype=np.uint8)
    flip_random_bits(bitstring, 3 * num_bits, rng, n_bits=num_bits)
    return bitstring


def pack_bits(bits: np.ndarray) -> np.ndarray:
    """Pack an array of 0/1 values into a bitstring (little-endian per byte).

    Examples:
        >>> pack_bits(np.array([1, 0, 0, 0, 0, 0, 0, 0, 1]))
        array([1, 1], dtype=uint8)
    """
    bits = np.asarray(bits)
    if bits.ndim != 1 or bits.shape[0] == 0:
        raise ValueError(f"bits must be a non-empty 1D array, got shape {bits.shape}")
    return np.packbits(bits.astype(bool), bitorder="little")


def unpack_bits(bitstring: np.ndarray, n_bits: int | None = None) -> np.ndarray:
    """Unpack a bitstring into an array of 0/1 values of length ``n_bits``."""
    n_bits = logical_bits(bitstring, n_bits)
    return np.unpackbits(bitstring, bitorder="little")[:n_bits]
