import argparse
import json
import logging
import random
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

from tsp_memetic.data import load_instance, random_symmetric_matrix
from tsp_memetic.evolution import EvolutionConfig, EvolutionLoop, EvolutionResult
from tsp_memetic.matrix import DistanceMatrix


MUTATION_PROBABILITY = 0.1

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def prompt_int(label: str, reader: Optional[Callable[[str], str]] = None) -> int:
    reader = reader or input
    while True:
        raw = reader(f"Enter the {label}: ")
        try:
            return int(raw.strip())
        except ValueError:
            print(f"'{raw.strip()}' is not a whole number, try again.")


def print_matrix(matrix: DistanceMatrix) -> None:
    for row in matrix.rows:
        print(list(row))


def print_costs(title: str, costs: List[int]) -> None:
    print(f"\n{title}:")
    for cost in costs:
        print(f"Distance: {cost}")


def report(result: EvolutionResult) -> None:
    print_costs("Initial Population", result.initial_costs)
    print_costs("Final Population", result.final_costs)
    print("\nBest Route:")
    print(f"Distance: {result.length}")
    print(f"Route: {result.tour}")
    if result.best_ever_length < result.length:
        print(f"(best seen during the run: {result.best_ever_length} via {result.best_ever})")
    if result.optimum is not None:
        print(f"Known optimum: {result.optimum:g} (gap {result.gap:.2%})")


def _progress(every: int):
    def callback(loop: EvolutionLoop) -> None:
        if every and loop.generation % every == 0:
            stats = loop.population.statistics()
            logger.info(
                "gen %d: best=%d mean=%.1f worst=%d best_ever=%d",
                loop.generation, stats["best"], stats["mean"], stats["worst"], loop.best_ever.cost,
            )
    return callback


def _evolve(matrix: DistanceMatrix, args, optimum: Optional[float] = None) -> EvolutionResult:
    cfg = EvolutionConfig(
        population_size=args.population_size,
        iterations=args.iterations,
        mutation_probability=args.mutation_probability,
        random_seed=args.seed,
    )
    t0 = time.perf_counter()
    result = EvolutionLoop(cfg, matrix).run(callback=_progress(args.log_every), optimum=optimum)
    logger.info("search took %.2fs", time.perf_counter() - t0)
    return result


def _emit(result: EvolutionResult, args) -> None:
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        report(result)


def run(args) -> None:
    # Anything not given on the command line is asked for interactively.
    for attr, label in [
        ("cities", "number of cities"),
        ("min_distance", "minimum distance between cities"),
        ("max_distance", "maximum distance between cities"),
        ("population_size", "population size"),
        ("iterations", "number of iterations"),
    ]:
        if getattr(args, attr) is None:
            setattr(args, attr, prompt_int(label))

    matrix_rng = random.Random(args.seed)
    matrix = random_symmetric_matrix(args.cities, args.min_distance, args.max_distance, matrix_rng)
    if not args.json:
        print("Generated Distance Matrix:")
        print_matrix(matrix)
    _emit(_evolve(matrix, args), args)


def solve(args) -> None:
    path = Path(args.instance)
    logger.info("loading %s", path)
    instance = load_instance(path)
    _emit(_evolve(instance.matrix, args, optimum=instance.optimum), args)


def _add_search_args(parser: argparse.ArgumentParser, prompt: bool) -> None:
    parser.add_argument("--population-size", type=int, default=None if prompt else 50)
    parser.add_argument("--iterations", type=int, default=None if prompt else 100)
    parser.add_argument("--mutation-probability", type=float, default=MUTATION_PROBABILITY)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-every", type=int, default=0, help="Log population stats every N generations")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Memetic solver for the symmetric TSP")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Solve a random instance (prompts for missing parameters)")
    run_parser.add_argument("--cities", type=int, default=None)
    run_parser.add_argument("--min-distance", type=int, default=None)
    run_parser.add_argument("--max-distance", type=int, default=None)
    _add_search_args(run_parser, prompt=True)
    run_parser.set_defaults(func=run)

    solve_parser = subparsers.add_parser("solve", help="Solve a TSPLIB instance")
    solve_parser.add_argument("instance")
    _add_search_args(solve_parser, prompt=False)
    solve_parser.set_defaults(func=solve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        args.func(args)
    except ValueError as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":
    sys.exit(main())
