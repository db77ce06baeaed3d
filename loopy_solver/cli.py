"""
Command line entry point: ``loopy-solve GAME_ID``.

Exit codes: 0 solved, 1 unsolved, 2 malformed or unsupported game ID.
"""

from __future__ import annotations

import argparse
import logging
import sys

from loopy_solver.edge import EdgeState
from loopy_solver.generators.grid_loader import load_from_game_id
from loopy_solver.logger_config import configure_logging
from loopy_solver.solvers.solver import SolveResult, Solver
from loopy_solver.solvers.solver_errors import GameIDError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="loopy-solve", description="Solve a Loopy puzzle game ID")
    parser.add_argument("game_id", help="Game ID, e.g. 10x10t0:a2a301b23c2a")
    parser.add_argument("--max-guesses", type=int, default=None, help="Speculative guess budget")
    parser.add_argument(
        "--max-post-solve-guesses", type=int, default=None,
        help="Guess budget for the post-solve rules",
    )
    parser.add_argument("--verbose", action="store_true", help="Log solver progress")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    try:
        grid = load_from_game_id(args.game_id)
    except GameIDError as exc:
        print(f"Invalid game ID: {exc}", file=sys.stderr)
        return 2

    solver = Solver(
        grid,
        max_number_of_guesses=args.max_guesses,
        max_post_solve_guesses=args.max_post_solve_guesses,
    )
    result = solver.solve()
    metrics = solver.metrics

    print(f"Status: {result.value}")
    print(f"Passes: {metrics.passes}")
    print(f"Guesses used: {metrics.guesses_used}")
    print(f"Elapsed: {metrics.elapsed:.4f}s")

    marked = solver.grid.edges_with_state(EdgeState.MARKED)
    edges = ", ".join(f"{solver.grid.edge_vertices(e)}" for e in marked)
    print(f"Marked edges ({len(marked)}): {edges}")

    return 0 if result == SolveResult.SOLVED else 1


if __name__ == "__main__":
    sys.exit(main())
