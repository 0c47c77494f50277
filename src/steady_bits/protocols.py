"""Protocol definitions for the fitness capability.

The search never defines fitness itself; it only calls a scorer supplied by
the caller. Two shapes are accepted:

1. **FitnessFunction**: any callable ``bitstring -> float``. Plain functions,
   lambdas and ``functools.partial`` objects all qualify.

2. **RankedFitness**: any object exposing ``rank(bitstring) -> float``, for
   scorers that carry their own configuration.

Higher scores are better. A scorer must be deterministic for the same
bitstring, since the population caches each solution's fitness and only
re-scores after a content change.

Example usage:
    ```python
    def onemax(bitstring: np.ndarray) -> float:
        return float(np.unpackbits(bitstring).sum())

    class Target:
        def __init__(self, target: np.ndarray) -> None:
            self.target = target

        def rank(self, bitstring: np.ndarray) -> float:
            return float(hamming_agreement(bitstring, self.target))

    find_best_solution(16, onemax, 50)
    find_best_solution(16, Target(goal), 50)
    ```
"""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class FitnessFunction(Protocol):
    """Protocol for callable scorers.

    Parameters:
        bitstring: Packed bitstring to score, passed as a read-only view.

    Returns:
        A finite real score, higher is better.
    """

    def __call__(self, bitstring: np.ndarray) -> float:
        """Score a packed bitstring."""
        ...


@runtime_checkable
class RankedFitness(Protocol):
    """Protocol for scorer objects exposing a ``rank`` method."""

    def rank(self, bitstring: np.ndarray) -> float:
        """Score a packed bitstring."""
        ...
