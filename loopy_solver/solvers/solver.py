"""
Loopy Solver
============
Drives the deduction rules over a grid until it is solved or stuck, then
falls back to bounded speculative guessing.

Flow per pass:
1. Apply every rule in order, stopping early on a detected contradiction
2. No change: mark a guessed edge in a child solver and keep its outcome
3. Still no change (top level only): run the post-solve rules
4. Still no change: give up
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from loopy_solver import validators
from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.merge_sort import merge_sort
from loopy_solver.solvers.solver_errors import (
    resolve_max_guesses,
    resolve_max_post_solve_guesses,
)
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate
from loopy_solver.solvers.solver_step_metadata import SolverStepMetadata
from loopy_solver.solvers.steps.bifurcation import BifurcationSolverStep
from loopy_solver.solvers.steps.common_edges_between_guesses import (
    CommonEdgesBetweenGuessesSolverStep,
)
from loopy_solver.solvers.steps.corner import CornerSolverStep
from loopy_solver.solvers.steps.corner_entry import CornerEntrySolverStep
from loopy_solver.solvers.steps.dead_end_removal import DeadEndRemovalSolverStep
from loopy_solver.solvers.steps.exact_edge_count import ExactEdgeCountSolverStep
from loopy_solver.solvers.steps.inside_outside import InsideOutsideSolverStep
from loopy_solver.solvers.steps.invalid_loop_closing_detection import (
    InvalidLoopClosingDetectionSolverStep,
)
from loopy_solver.solvers.steps.neighboring_semi_complete_faces import (
    NeighboringSemiCompleteFacesSolverStep,
)
from loopy_solver.solvers.steps.neighboring_short_faces import NeighboringShortFacesSolverStep
from loopy_solver.solvers.steps.permutation import PermutationSolverStep
from loopy_solver.solvers.steps.single_path import SinglePathSolverStep
from loopy_solver.solvers.steps.sole_path_edge_extender import SolePathEdgeExtenderSolverStep
from loopy_solver.solvers.steps.two_edges_per_vertex import TwoEdgesPerVertexSolverStep
from loopy_solver.solvers.steps.vertex_propagation import VertexPropagationSolverStep
from loopy_solver.solvers.steps.zero import ZeroSolverStep

logger = logging.getLogger(__name__)


class SolveResult(enum.Enum):
    SOLVED = "solved"
    UNSOLVED = "unsolved"


@dataclass
class SolverMetrics:
    """Counters collected over a call to ``Solver.solve``."""
    passes: int = 0                   # rule passes over the grid
    guesses_used: int = 0             # speculative guesses, children included
    post_solve_guesses_used: int = 0  # no-guess subsolver runs by post-solve rules
    elapsed: float = 0.0              # wall-clock seconds


class _SolverDelegate(SolverStepDelegate):
    """Wires rule callbacks to a solver's metadata and one of its budgets."""

    def __init__(self, solver: "Solver", metadata: Dict[type, SolverStepMetadata], budget: str):
        super().__init__(metadata)
        self._solver = solver
        self._budget = budget

    def can_perform_guess(self, step: SolverStep) -> bool:
        return getattr(self._solver, self._budget) > 0

    def did_perform_guess(self, step: SolverStep):
        setattr(self._solver, self._budget, getattr(self._solver, self._budget) - 1)

    def with_subsolver(self, grid: LoopyGrid, fn: Callable[["Solver"], Any]) -> Any:
        return fn(Solver(grid.copy(), is_subsolver=True))


class Solver:
    """
    Solver for a Loopy grid.

    Parameters
    ----------
    grid : LoopyGrid
        Puzzle to solve. It is copied; the caller's grid is never modified.
    max_number_of_guesses : int, optional
        Speculative guess budget (``LOOPY_MAX_GUESSES``, default 10).
    max_post_solve_guesses : int, optional
        Budget for the guessing post-solve rules
        (``LOOPY_MAX_POST_SOLVE_GUESSES``, default 10).
    is_subsolver : bool
        Child solvers skip the post-solve rules.
    """

    def __init__(
        self,
        grid: LoopyGrid,
        max_number_of_guesses: Optional[int] = None,
        max_post_solve_guesses: Optional[int] = None,
        is_subsolver: bool = False,
    ):
        self._grid = grid.copy()
        self._max_number_of_guesses = resolve_max_guesses(max_number_of_guesses)
        self.guesses_available = self._max_number_of_guesses
        self.max_post_solve_guesses = resolve_max_post_solve_guesses(max_post_solve_guesses)
        self.post_solve_guesses_available = self.max_post_solve_guesses
        self.is_subsolver = is_subsolver
        self.metrics = SolverMetrics()

        self._diagnosed_inconsistent = False
        self._metadata: Dict[type, SolverStepMetadata] = {}
        self._steps: List[SolverStep] = [
            ZeroSolverStep(),
            DeadEndRemovalSolverStep(),
            CornerSolverStep(),
            ExactEdgeCountSolverStep(),
            TwoEdgesPerVertexSolverStep(),
            SolePathEdgeExtenderSolverStep(),
            CornerEntrySolverStep(),
            SinglePathSolverStep(),
            BifurcationSolverStep(),
            NeighboringSemiCompleteFacesSolverStep(),
            NeighboringShortFacesSolverStep(),
            VertexPropagationSolverStep(),
            PermutationSolverStep(),
            InvalidLoopClosingDetectionSolverStep(),
        ]
        self._post_solve_steps: List[SolverStep] = [
            InsideOutsideSolverStep(),
            CommonEdgesBetweenGuessesSolverStep(),
        ]

    # ── Properties ─────────────────────────────────────────────

    @property
    def grid(self) -> LoopyGrid:
        return self._grid

    @property
    def max_number_of_guesses(self) -> int:
        return self._max_number_of_guesses

    @max_number_of_guesses.setter
    def max_number_of_guesses(self, value: int):
        self._max_number_of_guesses = value
        self.guesses_available = value

    @property
    def is_solved(self) -> bool:
        return validators.is_solved(self._grid)

    @property
    def is_consistent(self) -> bool:
        if self._diagnosed_inconsistent:
            return False
        return validators.is_consistent(self._grid)

    # ── Solving ────────────────────────────────────────────────

    def solve(self) -> SolveResult:
        start = time.perf_counter()

        while not self.is_solved and self.is_consistent:
            old_grid = self._grid
            self._grid = self._apply_steps(self._steps, self._grid, "guesses_available")
            self.metrics.passes += 1

            if self._grid == old_grid:
                self._speculate()

                if self._grid == old_grid and not self.is_subsolver:
                    self._grid = self._apply_steps(
                        self._post_solve_steps, self._grid, "post_solve_guesses_available"
                    )

                if self._grid == old_grid:
                    break

        self.metrics.guesses_used = self._max_number_of_guesses - self.guesses_available
        self.metrics.post_solve_guesses_used = (
            self.max_post_solve_guesses - self.post_solve_guesses_available
        )
        self.metrics.elapsed = time.perf_counter() - start

        if self.is_solved:
            grid = self._grid.copy()
            grid.set_edges(EdgeState.DISABLED, grid.edges_with_state(EdgeState.NORMAL))
            self._grid = grid
            if not self.is_subsolver:
                logger.info(
                    "Solved in %d passes (%d guesses, %.3fs)",
                    self.metrics.passes, self.metrics.guesses_used, self.metrics.elapsed,
                )
            return SolveResult.SOLVED

        if not self.is_subsolver:
            logger.info(
                "Unsolved after %d passes (consistent=%s)", self.metrics.passes, self.is_consistent
            )
        return SolveResult.UNSOLVED

    def _apply_steps(self, steps: List[SolverStep], grid: LoopyGrid, budget: str) -> LoopyGrid:
        delegate = _SolverDelegate(self, self._metadata, budget)

        for step in list(steps):
            if delegate.is_inconsistent or not validators.hints_consistent(grid):
                break
            grid = step.apply(grid, delegate)
            if step.is_ephemeral:
                steps.remove(step)

        if delegate.is_inconsistent:
            logger.debug("Inconsistent state reported during rule pass")
            self._diagnosed_inconsistent = True
        return grid

    # ── Speculation ────────────────────────────────────────────

    def _speculate(self):
        if self.guesses_available <= 0:
            return

        plays = self._collect_speculative_plays()[:self.guesses_available]
        for edge in plays:
            if self.guesses_available <= 0:
                break
            self.guesses_available -= 1
            if self._do_speculative_play(edge):
                return

    def _do_speculative_play(self, edge: int) -> bool:
        child = Solver(
            self._grid,
            max_number_of_guesses=self.guesses_available,
            is_subsolver=True,
        )
        child._grid.set_edge_state(edge, EdgeState.MARKED)
        logger.debug("Guessing edge %d (%d guesses left)", edge, self.guesses_available)

        result = child.solve()
        self.guesses_available -= child.max_number_of_guesses - child.guesses_available

        if result == SolveResult.SOLVED:
            self._grid = child.grid
            self._metadata = child._metadata
            return True

        if not child.is_consistent:
            grid = self._grid.copy()
            grid.set_edge_state(edge, EdgeState.DISABLED)
            self._grid = grid
            return True

        return False

    def _collect_speculative_plays(self) -> List[int]:
        grid = self._grid
        entries = []

        for vertex in range(grid.vertex_count):
            edges = [e for e in grid.edges_sharing(vertex) if grid.edge_state(e).is_enabled]
            if sum(1 for e in edges if grid.edge_state(e) == EdgeState.MARKED) != 1:
                continue

            faces = grid.faces_sharing_vertex(vertex)
            priority = (
                sum(1 for f in faces if grid.hint_for_face(f) is not None)
                + sum(1 for f in faces if grid.is_face_semicomplete(f))
            )
            normal = [e for e in edges if grid.edge_state(e) == EdgeState.NORMAL]
            entries.append((priority, normal))

        plays: List[int] = []
        for _, normal in merge_sort(entries, key=lambda entry: entry[0], reverse=True):
            plays.extend(normal)

        faces = merge_sort(
            list(grid.face_ids), key=lambda f: grid.is_face_semicomplete(f), reverse=True
        )
        for face in faces:
            hint = grid.hint_for_face(face)
            if hint is None or grid.edge_count(EdgeState.MARKED, face) + 1 != hint:
                continue
            plays.extend(
                e for e in grid.edges_for_face(face) if grid.edge_state(e) == EdgeState.NORMAL
            )

        return list(dict.fromkeys(plays))
