from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class ExactEdgeCountSolverStep(SolverStep):
    """
    Marks every enabled edge of a face whose enabled count equals its hint,
    and disables the leftover normal edges of faces that already have all
    the marked edges their hint asks for.
    """

    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        result = grid.copy()

        for face in grid.face_ids:
            hint = grid.hint_for_face(face)
            if hint is None:
                continue

            edges = grid.edges_for_face(face)
            states = [grid.edge_state(e) for e in edges]
            if EdgeState.NORMAL not in states:
                continue

            enabled = [e for e, s in zip(edges, states) if s.is_enabled]
            if len(enabled) == hint:
                result.set_edges(EdgeState.MARKED, enabled)
                continue

            marked = sum(1 for s in states if s == EdgeState.MARKED)
            if marked == hint:
                normal = [e for e, s in zip(edges, states) if s == EdgeState.NORMAL]
                result.set_edges(EdgeState.DISABLED, normal)

        return result
