from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class ZeroSolverStep(SolverStep):
    """Disables every edge of zero-hinted faces."""

    is_ephemeral = True

    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(ZeroSolverStep)
        if metadata.is_flag_marked():
            return grid
        metadata.mark_flag()

        grid = grid.copy()
        for face in grid.face_ids:
            if grid.hint_for_face(face) == 0:
                grid.set_edges_for_face(EdgeState.DISABLED, face)

        return grid
