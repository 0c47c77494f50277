"""Benchmark runner comparing steady-bits, Pymoo, and DEAP on bitstring problems.

For every problem and seed, steady_state_ga runs until it stagnates. Its
evaluation count then becomes the budget for Pymoo's GA and DEAP's eaSimple,
so all three libraries spend the same number of fitness calls.

Usage:
    uv run python benchmarks/bitstring/run_benchmark.py
"""

import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
from pymoo.algorithms.soo.nonconvex.ga import GA
from pymoo.core.problem import Problem as PymooProblem
from pymoo.operators.crossover.pntx import SinglePointCrossover
from pymoo.operators.mutation.bitflip import BitflipMutation
from pymoo.operators.sampling.rnd import BinaryRandomSampling
from pymoo.optimize import minimize
from pymoo.termination import get_termination

from benchmarks.bitstring.problems import N_BITS, OPTIMA, PROBLEMS
from benchmarks.metrics import hit_rate, optimality_gap

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# Experiment parameters
MAX_ITERATIONS_WITHOUT_IMPROVEMENT = 2000
POP_SIZE = 50
CROSSOVER_PROB = 0.9
MUTATION_PROB = 1.0 / N_BITS
N_RUNS = 10
SEEDS = list(range(N_RUNS))
LIBRARIES = ["steady-bits", "pymoo", "deap"]


def _pack(bits: np.ndarray) -> np.ndarray:
    return np.packbits(np.asarray(bits, dtype=np.uint8), bitorder="little")


def run_steady_bits(problem_fn: callable, seed: int) -> tuple[float, int, float]:
    """Run the steady-state GA until it stagnates.

    Args:
        problem_fn: Fitness function over packed bitstrings.
        seed: Random seed for reproducibility.

    Returns:
        Tuple of (best_fitness, evaluations, elapsed_time_seconds).
    """
    from steady_bits import steady_state_ga

    start_time = time.perf_counter()
    result = steady_state_ga(N_BITS, problem_fn, MAX_ITERATIONS_WITHOUT_IMPROVEMENT, seed=seed)
    elapsed = time.perf_counter() - start_time

    return result.solution.fitness, result.evaluations, elapsed


class PymooBitstringProblem(PymooProblem):
    """Wrapper to maximize a packed-bitstring fitness with Pymoo."""

    def __init__(self, problem_fn: callable) -> None:
        super().__init__(n_var=N_BITS, n_obj=1, xl=0, xu=1, vtype=bool)
        self._problem_fn = problem_fn

    def _evaluate(self, x: np.ndarray, out: dict, *args, **kwargs) -> None:
        # Pymoo minimizes
        out["F"] = np.array([-self._problem_fn(_pack(xi)) for xi in x])


def run_pymoo(problem_fn: callable, seed: int, budget: int) -> tuple[float, float]:
    """Run a generational GA using Pymoo.

    Args:
        problem_fn: Fitness function over packed bitstrings.
        seed: Random seed for reproducibility.
        budget: Number of fitness evaluations.

    Returns:
        Tuple of (best_fitness, elapsed_time_seconds).
    """
    algorithm = GA(
        pop_size=POP_SIZE,
        sampling=BinaryRandomSampling(),
        crossover=SinglePointCrossover(prob=CROSSOVER_PROB),
        mutation=BitflipMutation(prob=1.0, prob_var=MUTATION_PROB),
        eliminate_duplicates=False,
    )

    start_time = time.perf_counter()
    result = minimize(
        PymooBitstringProblem(problem_fn),
        algorithm,
        get_termination("n_eval", budget),
        seed=seed,
        verbose=False,
    )
    elapsed = time.perf_counter() - start_time

    return float(-np.min(result.F)), elapsed


def _setup_deap() -> None:
    """Set up DEAP creator classes (handles cleanup for multiple runs)."""
    from deap import base, creator

    if hasattr(creator, "FitnessMax"):
        del creator.FitnessMax
    if hasattr(creator, "Individual"):
        del creator.Individual

    creator.create("FitnessMax", base.Fitness, weights=(1.0,))
    creator.create("Individual", list, fitness=creator.FitnessMax)


def run_deap(problem_fn: callable, seed: int, budget: int) -> tuple[float, float]:
    """Run eaSimple using DEAP.

    eaSimple only re-evaluates changed individuals, so the generation count
    derived from the budget is an upper bound on the evaluations spent.

    Args:
        problem_fn: Fitness function over packed bitstrings.
        seed: Random seed for reproducibility.
        budget: Number of fitness evaluations.

    Returns:
        Tuple of (best_fitness, elapsed_time_seconds).
    """
    import random

    from deap import algorithms, base, creator, tools

    _setup_deap()

    toolbox = base.Toolbox()
    toolbox.register("attr_bool", random.randint, 0, 1)
    toolbox.register("individual", tools.initRepeat, creator.Individual, toolbox.attr_bool, n=N_BITS)
    toolbox.register("population", tools.initRepeat, list, toolbox.individual)

    def evaluate(individual: list) -> tuple[float]:
        return (problem_fn(_pack(individual)),)

    toolbox.register("evaluate", evaluate)
    toolbox.register("mate", tools.cxOnePoint)
    toolbox.register("mutate", tools.mutFlipBit, indpb=MUTATION_PROB)
    toolbox.register("select", tools.selTournament, tournsize=3)

    random.seed(seed)
    np.random.seed(seed)

    n_generations = max(1, (budget - POP_SIZE) // POP_SIZE)
    hall_of_fame = tools.HallOfFame(1)

    start_time = time.perf_counter()
    pop = toolbox.population(n=POP_SIZE)
    algorithms.eaSimple(
        pop,
        toolbox,
        cxpb=CROSSOVER_PROB,
        mutpb=1.0,
        ngen=n_generations,
        halloffame=hall_of_fame,
        verbose=False,
    )
    elapsed = time.perf_counter() - start_time

    return float(hall_of_fame[0].fitness.values[0]), elapsed


def run_benchmark() -> dict:
    """Run the full benchmark suite.

    Returns:
        Dictionary containing metadata and results.
    """
    timestamp = datetime.now(UTC).isoformat()

    metadata = {
        "timestamp": timestamp,
        "parameters": {
            "n_bits": N_BITS,
            "max_iterations_without_improvement": MAX_ITERATIONS_WITHOUT_IMPROVEMENT,
            "pop_size": POP_SIZE,
            "crossover_prob": CROSSOVER_PROB,
            "mutation_prob": MUTATION_PROB,
            "n_runs": N_RUNS,
            "seeds": SEEDS,
        },
    }

    results = []
    total_runs = len(PROBLEMS) * N_RUNS
    current_run = 0

    for problem_name, problem_fn in PROBLEMS.items():
        optimum = OPTIMA[problem_name]
        for seed in SEEDS:
            current_run += 1
            logger.info(f"Running [{current_run}/{total_runs}]: {problem_name} (seed={seed})")

            best, budget, elapsed = run_steady_bits(problem_fn, seed)
            runs = [("steady-bits", best, elapsed)]
            runs.append(("pymoo", *run_pymoo(problem_fn, seed, budget)))
            runs.append(("deap", *run_deap(problem_fn, seed, budget)))

            for library_name, best_fitness, elapsed in runs:
                results.append(
                    {
                        "library": library_name,
                        "problem": problem_name,
                        "seed": seed,
                        "evaluations": budget,
                        "best_fitness": best_fitness,
                        "gap": optimality_gap(best_fitness, optimum),
                        "time_seconds": elapsed,
                    }
                )
                logger.info(f"  {library_name}: best={best_fitness:.1f}/{optimum:.0f}, Time: {elapsed:.2f}s")

    return {"metadata": metadata, "results": results}


def print_summary(results: dict) -> None:
    """Print a summary table of the benchmark results.

    Args:
        results: The benchmark results dictionary.
    """
    from collections import defaultdict

    data = defaultdict(lambda: defaultdict(list))
    for r in results["results"]:
        data[r["problem"]][r["library"]].append(r["best_fitness"])

    print("\n" + "=" * 80)
    print("BENCHMARK SUMMARY")
    print("=" * 80)
    print(f"\nParameters: n_bits={N_BITS}, stagnation={MAX_ITERATIONS_WITHOUT_IMPROVEMENT}, runs={N_RUNS}")
    print()

    header = f"{'Problem':<14}"
    for lib in LIBRARIES:
        header += f"{lib:>22}"
    print(header)
    print("-" * 80)

    for problem in PROBLEMS:
        row = f"{problem:<14}"
        for lib in LIBRARIES:
            values = data[problem][lib]
            if values:
                row += f"{np.mean(values):>10.2f} (hit {hit_rate(values, OPTIMA[problem]):.0%})".rjust(22)
            else:
                row += f"{'N/A':>22}"
        print(row)

    print("-" * 80)
    print()


def main() -> None:
    """Main entry point for the benchmark."""
    logger.info("Starting bitstring benchmark suite")
    logger.info(f"Parameters: n_bits={N_BITS}, pop_size={POP_SIZE}, runs={N_RUNS}")

    results = run_benchmark()

    output_path = Path(__file__).parent / "results" / "benchmark_results.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)

    logger.info(f"Results saved to {output_path}")

    print_summary(results)


if __name__ == "__main__":
    main()
