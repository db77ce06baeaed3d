"""
Sole path extension.

A marked line that reaches a vertex with exactly one undecided edge left
must continue through it::

    ........
    !__.__._ -
       '

becomes::

    .__.__._
    !__.__._ -
       '
"""

from __future__ import annotations

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class SolePathEdgeExtenderSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        grid = grid.copy()

        stack = [v for v in range(grid.vertex_count) if self._is_sole_path(grid, v)]
        visited = set()

        while stack:
            vertex = stack.pop()
            if vertex in visited:
                continue
            visited.add(vertex)

            if not self._is_sole_path(grid, vertex):
                continue

            edges = grid.edges_sharing(vertex)
            normal = [e for e in edges if grid.edge_state(e) == EdgeState.NORMAL]
            grid.set_edges(EdgeState.MARKED, normal)

            for edge in edges:
                for end in grid.edge_vertices(edge):
                    if grid.marked_edges_for_vertex(end) == 1:
                        stack.append(end)

        return grid

    @staticmethod
    def _is_sole_path(grid: LoopyGrid, vertex: int) -> bool:
        marked = 0
        normal = 0
        for edge in grid.edges_sharing(vertex):
            state = grid.edge_state(edge)
            if state == EdgeState.MARKED:
                marked += 1
            elif state == EdgeState.NORMAL:
                normal += 1
        return marked == 1 and normal == 1
