"""
Dead-end removal.

A vertex with a single enabled edge can never carry the loop, so that edge
is disabled. Disabling it may leave its other endpoint stranded as well, so
the sweep repeats until nothing changes.

A marked edge is never disabled: a marked line stranded at such a vertex is
reported as an inconsistent state instead.
"""

from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class DeadEndRemovalSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        grid = grid.copy()
        while self._sweep(grid, delegate):
            pass
        return grid

    def _sweep(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> bool:
        did_work = False

        for vertex in range(grid.vertex_count):
            enabled = [
                e for e in grid.edges_sharing(vertex)
                if grid.edge_state(e) != EdgeState.DISABLED
            ]
            if len(enabled) != 1:
                continue

            if grid.edge_state(enabled[0]) == EdgeState.MARKED:
                delegate.report_inconsistent_state(self)
                continue

            grid.set_edge_state(enabled[0], EdgeState.DISABLED)
            did_work = True

        return did_work
