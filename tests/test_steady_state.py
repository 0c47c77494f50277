"""Tests for the steady-state search controller."""

import doctest
import logging

import numpy as np
import pytest

from steady_bits import (
    INITIAL_MAX_SIZE,
    Population,
    SearchResult,
    Solution,
    evolve_step,
    find_best_solution,
    seed_population,
    steady_state_ga,
)
from steady_bits.algorithms import steady_state
from steady_bits.algorithms.steady_state import EVALUATIONS_PER_STEP, GROWTH_PATIENCE


def flat(bitstring: np.ndarray) -> float:
    """Fitness that never improves, so every step counts as stagnation."""
    return 1.0


class Matches:
    """Scorer object counting bits that agree with a target."""

    def __init__(self, target: np.ndarray) -> None:
        self.target = target

    def rank(self, bitstring: np.ndarray) -> float:
        return float(np.unpackbits(~(bitstring ^ self.target)).sum())


# =============================================================================
# seed_population
# =============================================================================


class TestSeedPopulation:
    """Tests for seed_population."""

    def test_default_size(self, onemax, rng: np.random.Generator) -> None:
        """The seeded population is full at INITIAL_MAX_SIZE."""
        pop = seed_population(20, onemax, rng)
        assert len(pop) == pop.max_size == INITIAL_MAX_SIZE
        assert pop.iterations_without_improvement == 0
        assert all(s.n_bytes == 3 for s in pop.solutions)

    def test_members_are_scored(self, onemax, rng: np.random.Generator) -> None:
        """Every member carries its fitness and the cache is consistent."""
        pop = seed_population(16, onemax, rng, size=6)
        for solution in pop.solutions:
            assert solution.fitness == onemax(solution.bitstring)
        pop.check_invariants()

    def test_padding_bits_clear(self, rng: np.random.Generator) -> None:
        """Bits beyond num_bits are never set."""
        pop = seed_population(5, flat, rng, size=8)
        for solution in pop.solutions:
            assert solution.bitstring[0] & 0b1110_0000 == 0

    def test_evaluates_once_per_member(self, counting_fitness, rng: np.random.Generator) -> None:
        """Seeding scores each member exactly once."""
        fitness, call_log = counting_fitness
        seed_population(8, fitness, rng, size=5)
        assert len(call_log) == 5


# =============================================================================
# evolve_step
# =============================================================================


class TestEvolveStep:
    """Tests for a single EVOLVING iteration."""

    def test_counts_stagnation(self, rng: np.random.Generator) -> None:
        """A step without improvement increments the counter."""
        pop = seed_population(8, flat, rng, size=4)
        assert not evolve_step(pop, flat, rng)
        assert pop.iterations_without_improvement == 1

    def test_resets_on_improvement(self, onemax, rng: np.random.Generator) -> None:
        """Improving the best resets the counter."""
        solutions = [
            Solution(bitstring=np.array([0b0000_0001], dtype=np.uint8), fitness=1.0),
            Solution(bitstring=np.array([0b0000_0010], dtype=np.uint8), fitness=1.0),
        ]
        pop = Population(solutions=solutions, num_bits=8, max_size=2, iterations_without_improvement=4)

        improved = False
        for _ in range(50):
            if evolve_step(pop, onemax, rng):
                improved = True
                break
        assert improved
        assert pop.iterations_without_improvement == 0

    def test_grows_after_patience_exhausted(self, rng: np.random.Generator) -> None:
        """Exceeding GROWTH_PATIENCE * size doubles the capacity."""
        pop = seed_population(8, flat, rng, size=2)
        for _ in range(GROWTH_PATIENCE * 2):
            evolve_step(pop, flat, rng)
        assert pop.max_size == 2

        evolve_step(pop, flat, rng)

        assert pop.max_size == 4
        assert pop.growth_events == 1
        assert pop.iterations_without_improvement == 0

    def test_appends_after_growth(self, rng: np.random.Generator) -> None:
        """Once capacity is free, children are appended."""
        pop = seed_population(8, flat, rng, size=2)
        pop.grow()
        evolve_step(pop, flat, rng)
        assert len(pop) == 3

    def test_accepts_rank_scorer(self, ranked_onemax, full_population: Population, rng: np.random.Generator) -> None:
        """Scorers exposing only rank() drive a whole step."""
        evolve_step(full_population, ranked_onemax, rng)

        for solution in full_population.solutions:
            assert solution.fitness == float(np.unpackbits(solution.bitstring).sum())
        full_population.check_invariants()

    def test_evaluates_twice(self, counting_fitness, full_population: Population, rng: np.random.Generator) -> None:
        """One evaluation for the mutant and one for the child."""
        fitness, call_log = counting_fitness
        evolve_step(full_population, fitness, rng)
        assert len(call_log) == EVALUATIONS_PER_STEP


# =============================================================================
# steady_state_ga: validation
# =============================================================================


class TestSteadyStateValidation:
    """Tests for argument validation."""

    @pytest.mark.parametrize("num_bits", [0, -8])
    def test_rejects_non_positive_num_bits(self, onemax, num_bits: int) -> None:
        """num_bits must be positive."""
        with pytest.raises(ValueError, match="num_bits must be positive"):
            steady_state_ga(num_bits, onemax, 10)

    def test_rejects_non_positive_threshold(self, onemax) -> None:
        """The stagnation threshold must be positive."""
        with pytest.raises(ValueError, match="max_iterations_without_improvement must be positive"):
            steady_state_ga(8, onemax, 0)

    def test_rejects_tiny_initial_population(self, onemax) -> None:
        """Pairs need at least two members."""
        with pytest.raises(ValueError, match="initial_max_size must be at least 2"):
            steady_state_ga(8, onemax, 10, initial_max_size=1)

    def test_rejects_unusable_fitness(self) -> None:
        """Fitness must be callable or rank-capable."""
        with pytest.raises(TypeError, match="fitness must be callable"):
            steady_state_ga(8, "onemax", 10)

    def test_propagates_non_finite_fitness(self) -> None:
        """A NaN score aborts the run."""
        with pytest.raises(ValueError, match="fitness must be finite"):
            steady_state_ga(8, lambda b: float("nan"), 10, seed=0)


# =============================================================================
# steady_state_ga: search behavior
# =============================================================================


class TestSteadyStateSearch:
    """Tests for end-to-end search runs."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_onemax_reaches_optimum(self, onemax, seed: int) -> None:
        """Eight-bit OneMax converges to all ones."""
        result = steady_state_ga(8, onemax, 50, seed=seed)
        np.testing.assert_array_equal(result.solution.bitstring, [0xFF])
        assert result.solution.fitness == 8.0

    def test_ranked_fitness_object(self) -> None:
        """Objects exposing rank() drive the search."""
        target = np.array([0b1010_0110], dtype=np.uint8)
        best = find_best_solution(8, Matches(target), 50, seed=3)
        np.testing.assert_array_equal(best.bitstring, target)
        assert best.fitness == 8.0

    def test_same_seed_same_result(self, onemax) -> None:
        """Runs are reproducible for a fixed seed."""
        a = steady_state_ga(24, onemax, 40, seed=11)
        b = steady_state_ga(24, onemax, 40, seed=11)
        np.testing.assert_array_equal(a.solution.bitstring, b.solution.bitstring)
        assert a.iterations == b.iterations
        assert a.max_size == b.max_size

    def test_stagnating_run_trace(self) -> None:
        """With flat fitness the run grows twice and then stops.

        Capacity 2 grows after 7 stagnant steps, capacity 4 after 13 more;
        at size 8 the threshold of 20 is reached before the next growth.
        """
        result = steady_state_ga(8, flat, 20, seed=0, initial_max_size=2)

        assert result.iterations == 40
        assert result.evaluations == 2 + 40 * EVALUATIONS_PER_STEP
        assert result.growth_events == 2
        assert result.max_size == 8
        assert result.population_size == 8

    def test_returns_search_result(self, onemax) -> None:
        """The result reports the best solution with consistent statistics."""
        result = steady_state_ga(16, onemax, 30, seed=5)
        assert isinstance(result, SearchResult)
        assert result.solution.fitness == onemax(result.solution.bitstring)
        assert result.evaluations == INITIAL_MAX_SIZE + EVALUATIONS_PER_STEP * result.iterations
        assert 1 <= result.population_size <= result.max_size

    def test_find_best_solution_matches_full_run(self, onemax) -> None:
        """find_best_solution is the best of steady_state_ga."""
        best = find_best_solution(16, onemax, 30, seed=9)
        result = steady_state_ga(16, onemax, 30, seed=9)
        assert isinstance(best, Solution)
        np.testing.assert_array_equal(best.bitstring, result.solution.bitstring)

    def test_padding_stays_clear(self, onemax) -> None:
        """Non-multiple-of-8 lengths never set padding bits."""
        result = steady_state_ga(13, onemax, 30, seed=2, check_invariants=True)
        assert result.solution.n_bytes == 2
        assert result.solution.bitstring[1] & 0b1110_0000 == 0
        assert result.solution.fitness <= 13


# =============================================================================
# steady_state_ga: callback and invariants
# =============================================================================


class TestSteadyStateCallback:
    """Tests for per-iteration callbacks."""

    def test_early_stop(self, onemax) -> None:
        """Returning True ends the run after that iteration."""
        result = steady_state_ga(32, onemax, 1000, seed=0, callback=lambda r, i: i >= 5)
        assert result.iterations == 5
        assert result.evaluations == INITIAL_MAX_SIZE + 5 * EVALUATIONS_PER_STEP

    def test_receives_snapshots(self, onemax) -> None:
        """Snapshots show monotone best fitness and doubling capacity."""
        snapshots: list[SearchResult] = []
        iterations: list[int] = []

        def record(result: SearchResult, iteration: int) -> bool:
            snapshots.append(result)
            iterations.append(iteration)
            return False

        final = steady_state_ga(24, onemax, 60, seed=4, callback=record)

        assert iterations == list(range(1, final.iterations + 1))
        fitness = [s.solution.fitness for s in snapshots]
        assert fitness == sorted(fitness)
        sizes = [s.max_size for s in snapshots]
        assert all(b in (a, 2 * a) for a, b in zip(sizes, sizes[1:], strict=False))

    def test_snapshot_is_detached(self, onemax) -> None:
        """Mutating a snapshot does not affect the run."""

        def vandalize(result: SearchResult, iteration: int) -> bool:
            result.solution.bitstring[:] = 0
            return iteration >= 20

        result = steady_state_ga(16, onemax, 100, seed=1, callback=vandalize)
        assert result.solution.fitness == onemax(result.solution.bitstring)

    def test_check_invariants_runs_clean(self, onemax) -> None:
        """Invariant checking passes for a whole run."""
        steady_state_ga(20, onemax, 40, seed=6, check_invariants=True)


# =============================================================================
# Logging
# =============================================================================


class TestSteadyStateLogging:
    """Tests for run-level log records."""

    def test_logs_start_and_finish(self, onemax, caplog: pytest.LogCaptureFixture) -> None:
        """A run logs one INFO record when it starts and one when it ends."""
        with caplog.at_level(logging.INFO, logger="steady_bits"):
            steady_state_ga(8, onemax, 20, seed=0)

        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert messages[0].startswith("starting steady-state search")
        assert messages[-1].startswith("search finished")

    def test_logs_growth_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        """Capacity growth is logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="steady_bits"):
            steady_state_ga(8, flat, 20, seed=0, initial_max_size=2)

        growth = [r for r in caplog.records if r.levelno == logging.DEBUG and "max_size" in r.getMessage()]
        assert len(growth) == 2


# =============================================================================
# Documentation examples
# =============================================================================


class TestDocExamples:
    """Tests that the documented examples run."""

    def test_module_examples_pass(self) -> None:
        """Every example in the controller module executes cleanly."""
        outcome = doctest.testmod(steady_state)
        assert outcome.attempted > 0
        assert outcome.failed == 0
