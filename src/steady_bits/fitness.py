"""Resolution and validated evaluation of caller-supplied fitness scorers."""

import math
from numbers import Real

import numpy as np

from steady_bits.protocols import FitnessFunction, RankedFitness


def as_fitness(fitness: FitnessFunction | RankedFitness) -> FitnessFunction:
    """Return a callable scorer for either accepted fitness shape.

    Objects with a ``rank`` method are preferred over their ``__call__``.

    Raises:
        TypeError: If fitness is neither callable nor exposes ``rank``.
    """
    rank = getattr(fitness, "rank", None)
    if callable(rank):
        return rank
    if callable(fitness):
        return fitness
    raise TypeError(f"fitness must be callable or define rank(bitstring), got {type(fitness).__name__}")


def evaluate(fitness: FitnessFunction | RankedFitness, bitstring: np.ndarray) -> float:
    """Score ``bitstring`` and validate the result.

    The scorer receives a read-only view, so an impure scorer fails loudly
    instead of corrupting a cached solution.

    Args:
        fitness: Scorer, callable or exposing ``rank`` (see ``as_fitness``).
        bitstring: Packed bitstring to score.

    Returns:
        The score as a Python float.

    Raises:
        TypeError: If fitness is not a usable scorer or returns something that
            is not a real number.
        ValueError: If the score is NaN or infinite.
    """
    view = bitstring.view()
    view.flags.writeable = False
    score = as_fitness(fitness)(view)
    if isinstance(score, np.ndarray) and score.size == 1:
        score = score.item()
    if not isinstance(score, (Real, np.integer, np.floating)) or isinstance(score, (bool, np.bool_)):
        raise TypeError(f"fitness must return a real number, got {type(score).__name__}")
    score = float(score)
    if not math.isfinite(score):
        raise ValueError(f"fitness must be finite, got {score}")
    return score
