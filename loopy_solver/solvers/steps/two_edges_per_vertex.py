from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class TwoEdgesPerVertexSolverStep(SolverStep):
    """
    Disables the remaining edges of vertices that already carry two marked
    edges, since a third one would make the line branch.
    """

    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(type(self))
        grid = grid.copy()

        degrees = grid.marked_degree_per_vertex()
        for vertex in map(int, (degrees == 2).nonzero()[0]):
            if metadata.matches_stored_vertex_state(vertex, grid):
                continue

            to_disable = [
                e for e in grid.edges_sharing(vertex)
                if grid.edge_state(e) != EdgeState.MARKED
            ]
            grid.set_edges(EdgeState.DISABLED, to_disable)

            metadata.store_vertex_state(vertex, grid)

        return grid
