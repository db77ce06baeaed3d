"""
Bifurcation.

A hinted face one marked edge short of its hint, with exactly two normal
edges left that meet at a vertex: whichever of the two the loop takes, it
leaves the face through that vertex. When the vertex has a single edge
besides those two, that edge is marked::

        •───•       •───•
       /     \\          \\
      •       •═══•       •
       \\           \\    /
        •───•   4   •   •
       /     \\     //    \\
      •       •───•       •
       \\    */     \\     /
        •───•       •───•
"""

from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class BifurcationSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        grid = grid.copy()
        for face in grid.face_ids:
            self._apply_to_face(grid, face)
        return grid

    @staticmethod
    def _apply_to_face(grid: LoopyGrid, face: int):
        hint = grid.hint_for_face(face)
        if hint is None or grid.is_face_solved(face):
            return

        edges = grid.edges_for_face(face)
        marked = grid.edge_count(EdgeState.MARKED, face)
        normal = [e for e in edges if grid.edge_state(e) == EdgeState.NORMAL]
        if len(normal) != 2 or marked + len(normal) != hint + 1:
            return

        vertex = grid.shared_vertex_of_edges(normal[0], normal[1])
        if vertex is None:
            return

        exits = [
            e for e in grid.edges_sharing(vertex)
            if e not in normal and grid.edge_state(e).is_enabled
        ]
        if len(exits) == 1:
            grid.set_edges(EdgeState.MARKED, exits)
