from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import linear_path_graph_edges
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.merge_sort import merge_sort
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class SinglePathSolverStep(SolverStep):
    """
    Marks an isolated run of a face's edges when the face cannot reach its
    hint without it.

    On the following grid the ``3`` must use its left, bottom and right
    edges::

        •───•───•───•
        │   │ 2 │   │
        •───•───•───•
        ║   │ 3 │   ║
        •   •───•   •
        ║ 2       2 ║
        •═══•═══•═══•

    A run is all-or-nothing: every interior vertex of it has no other
    enabled edge, so marking one of its edges forces the rest.

    Only the longest run is considered, and only when it fits within the
    hint; the remainder counts enabled edges, so disabled edges never make
    up the difference.
    """

    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(type(self))
        grid = grid.copy()

        for face in grid.face_ids:
            hint = grid.hint_for_face(face)
            if hint is None or grid.is_face_solved(face):
                continue
            if metadata.matches_stored_face_state(face, grid):
                continue

            self._apply_to_face(grid, face, hint)
            metadata.store_face_state(face, grid)

        return grid

    @staticmethod
    def _apply_to_face(grid: LoopyGrid, face: int, hint: int):
        runs = [
            [e for e in run if grid.face_contains_edge(face, e)]
            for run in linear_path_graph_edges(grid.ignoring_disabled_edges(), face)
        ]
        if not runs:
            return

        runs = merge_sort(runs, key=len, reverse=True)
        longest = runs[0]
        if len(longest) > hint:
            return

        others = grid.enabled_edge_count(face) - len(longest)
        if others < hint:
            grid.set_edges(EdgeState.MARKED, longest)
