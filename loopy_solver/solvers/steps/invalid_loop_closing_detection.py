"""
Invalid loop closing.

A normal edge joining the two loose ends of one marked line would close
that line into a loop. When other marked edges exist outside that line,
the loop would be premature, so the edge is disabled::

    •═══•───•═══•═══•
    ║ 2 │   X     3 ║
    •───•───•═══•═══•
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import single_path_edges
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class _Entry(NamedTuple):
    edge: int
    first: int
    second: int


class InvalidLoopClosingDetectionSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(InvalidLoopClosingDetectionSolverStep)
        if metadata.is_grid_state_stored(grid):
            return grid
        metadata.store_grid_state(grid)

        grid = grid.copy()
        all_marked = set(grid.edges_with_state(EdgeState.MARKED))

        def is_marked(e):
            return grid.edge_state(e) == EdgeState.MARKED

        for entry in self._collect(grid):
            path = single_path_edges(grid, entry.first, include_test=is_marked)
            if entry.second not in path:
                continue
            if set(path) == all_marked:
                continue
            grid.set_edge_state(entry.edge, EdgeState.DISABLED)

        return grid

    @staticmethod
    def _collect(grid: LoopyGrid) -> List[_Entry]:
        entries = []
        for edge in grid.edge_ids:
            if grid.edge_state(edge) != EdgeState.NORMAL:
                continue
            start, end = grid.edge_vertices(edge)
            first = _only_marked(grid, start)
            if first is None:
                continue
            second = _only_marked(grid, end)
            if second is None:
                continue
            entries.append(_Entry(edge, first, second))
        return entries


def _only_marked(grid: LoopyGrid, vertex: int) -> Optional[int]:
    marked = [e for e in grid.edges_sharing(vertex) if grid.edge_state(e) == EdgeState.MARKED]
    return marked[0] if len(marked) == 1 else None
