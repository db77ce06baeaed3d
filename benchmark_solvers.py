import sys
import os
import time
import csv
import argparse
import concurrent.futures
from typing import Dict, Any, List

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from loopy_solver.generators.grid_loader import load_from_game_id
from loopy_solver.solvers.solver import SolveResult, Solver
from loopy_solver.solvers.solver_errors import GameIDError

DEFAULT_GAME_IDS = [
    "3x5t0:a2a301b23c2a",
    "3x4t2:145d31c",
    "5x4t5:5c413a2b2b2a32d52b321c2a1a2e2133e2421a4a1a2e2d12b23a1a432b5a",
]


def run_single_game(game_id: str, max_guesses: int) -> Dict[str, Any]:
    """
    Loads and solves one game ID, timing the solve.
    """
    result = {
        "game_id": game_id,
        "solved": False,
        "consistent": True,
        "passes": 0,
        "guesses": 0,
        "time": 0.0,
        "error": "",
    }

    try:
        grid = load_from_game_id(game_id)
    except GameIDError as e:
        result["error"] = str(e)
        return result

    start_time = time.time()
    solver = Solver(grid, max_number_of_guesses=max_guesses)
    outcome = solver.solve()

    result["time"] = time.time() - start_time
    result["solved"] = outcome == SolveResult.SOLVED
    result["consistent"] = solver.is_consistent
    result["passes"] = solver.metrics.passes
    result["guesses"] = solver.metrics.guesses_used
    return result


def read_game_ids(path: str) -> List[str]:
    with open(path) as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


def main():
    parser = argparse.ArgumentParser(description="Benchmark the Loopy solver over game IDs")
    parser.add_argument("game_ids", nargs="*", help="Game IDs to solve")
    parser.add_argument("--file", type=str, default=None, help="File with one game ID per line")
    parser.add_argument("--max-guesses", type=int, default=10, help="Speculative guess budget")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes")
    parser.add_argument("--output", type=str, default="benchmark_results.csv", help="Output CSV file")

    args = parser.parse_args()

    game_ids = list(args.game_ids)
    if args.file:
        game_ids.extend(read_game_ids(args.file))
    if not game_ids:
        game_ids = DEFAULT_GAME_IDS

    print(f"Starting Benchmark: {len(game_ids)} games, max {args.max_guesses} guesses")

    results = []
    with concurrent.futures.ProcessPoolExecutor(max_workers=args.workers) as executor:
        futures = [executor.submit(run_single_game, g, args.max_guesses) for g in game_ids]
        for i, future in enumerate(concurrent.futures.as_completed(futures)):
            print(f"Finished Game {i+1}/{len(game_ids)}...", end="\r")
            results.append(future.result())

    print(f"\nBenchmark Complete!")

    # Save to CSV
    keys = results[0].keys()
    with open(args.output, "w", newline="") as f:
        dict_writer = csv.DictWriter(f, fieldnames=keys)
        dict_writer.writeheader()
        dict_writer.writerows(results)

    print(f"Results saved to {args.output}")

    # Print Summary Table
    print("\nSummary Statistics:")
    print(f"{'Game ID':<40} | {'Status':<10} | {'Time (s)':<10} | {'Guesses':<8}")
    print("-" * 76)

    for r in sorted(results, key=lambda r: r["game_id"]):
        status = "error" if r["error"] else ("solved" if r["solved"] else "unsolved")
        print(f"{r['game_id'][:40]:<40} | {status:<10} | {r['time']:>10.4f} | {r['guesses']:>8}")

    solved_count = sum(1 for r in results if r["solved"])
    success_rate = (solved_count / len(results)) * 100
    avg_time = sum(r["time"] for r in results) / len(results)
    print("-" * 76)
    print(f"Success Rate: {success_rate:.1f}%  Avg Time: {avg_time:.4f}s")


if __name__ == "__main__":
    main()
