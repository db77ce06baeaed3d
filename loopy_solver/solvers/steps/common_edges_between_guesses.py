"""
Common edges between guesses.

Tries each way a loose line end (or a face one edge short of its hint) can
continue, running a no-guess subsolver on each alternative. Edge states
every surviving alternative agrees on are committed; alternatives that
turn out inconsistent have their edge disabled.

In the following board the line can go either left or below the centre
``1``; both outcomes share a marked vertical edge and a disabled
horizontal edge::

    .___.___.___.        .___.___.___.        .___.___.___.
    !___!___!___!        !___!___!___!        !___!___!___!
    !___!___!___!        ║₌₌₌║   !___!        .   ║   !___!
    . 1 !_1_.___! either . 1 .₌1₌.___!   or   . 1 ║ 1 .___!
    .___║___!___!        .___║___!___!        .___║___!___!
    !___!___!___!        !___!___!___!        !___!___!___!
"""

from __future__ import annotations

import logging
from typing import List, Optional

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate

logger = logging.getLogger(__name__)


class CommonEdgesBetweenGuessesSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        if not delegate.can_perform_guess(self):
            return grid

        grid = grid.copy()
        for candidate in self._collect(grid):
            result = self._apply_to_candidate(grid, candidate, delegate)
            if result is not None:
                return result
        return grid

    def _apply_to_candidate(
        self, grid: LoopyGrid, candidate: List[int], delegate: SolverStepDelegate
    ) -> Optional[LoopyGrid]:
        """Returns the updated grid when the candidate changed anything."""
        metadata = delegate.metadata_for_step(CommonEdgesBetweenGuessesSolverStep)
        results: List[LoopyGrid] = []
        bad_edges: List[int] = []
        # Agreement only counts when every alternative was explored
        explored_all = True

        for edge in candidate:
            if not delegate.can_perform_guess(self):
                explored_all = False
                break

            test_grid = grid.copy()
            test_grid.set_edge_state(edge, EdgeState.MARKED)
            if metadata.is_grid_state_stored(test_grid):
                explored_all = False
                continue
            metadata.store_grid_state(test_grid)

            def attempt(solver):
                solver.max_number_of_guesses = 0
                solver.solve()
                return solver.is_solved, solver.is_consistent, solver.grid

            solved, consistent, outcome = delegate.with_subsolver(test_grid, attempt)
            delegate.did_perform_guess(self)

            if solved:
                logger.debug("Guessing edge %d solved the grid", edge)
                return outcome
            if not consistent:
                bad_edges.append(edge)
            else:
                results.append(outcome)

        modified = False
        if results and explored_all:
            first = results[0]
            for edge in grid.edge_ids:
                state = first.edge_state(edge)
                if state == EdgeState.NORMAL or grid.edge_state(edge) == state:
                    continue
                if all(other.edge_state(edge) == state for other in results[1:]):
                    grid.set_edge_state(edge, state)
                    modified = True

        for edge in bad_edges:
            grid.set_edge_state(edge, EdgeState.DISABLED)
            modified = True

        return grid if modified else None

    def _collect(self, grid: LoopyGrid) -> List[List[int]]:
        candidates = []
        for vertex in range(grid.vertex_count):
            candidate = self._candidate_for_vertex(grid, vertex)
            if candidate:
                candidates.append(candidate)
        for face in grid.face_ids:
            candidate = self._candidate_for_face(grid, face)
            if candidate:
                candidates.append(candidate)
        return candidates

    @staticmethod
    def _candidate_for_face(grid: LoopyGrid, face: int) -> Optional[List[int]]:
        hint = grid.hint_for_face(face)
        if hint is None or grid.is_face_solved(face):
            return None
        if grid.edge_count(EdgeState.MARKED, face) != hint - 1:
            return None
        return [e for e in grid.edges_for_face(face) if grid.edge_state(e) == EdgeState.NORMAL]

    @staticmethod
    def _candidate_for_vertex(grid: LoopyGrid, vertex: int) -> Optional[List[int]]:
        """Normal edges of a loose line end heading into a face one edge short."""
        edges = grid.edges_sharing(vertex)
        if sum(1 for e in edges if grid.edge_state(e) == EdgeState.MARKED) != 1:
            return None

        normal = [e for e in edges if grid.edge_state(e) == EdgeState.NORMAL]
        if not normal:
            return None

        common = set(grid.faces_sharing_vertex(vertex))
        for edge in normal:
            common &= set(grid.faces_sharing_edge(edge))
        if len(common) != 1:
            return None

        face = common.pop()
        hint = grid.hint_for_face(face)
        if hint is None or grid.edge_count(EdgeState.MARKED, face) != hint - 1:
            return None
        return normal
