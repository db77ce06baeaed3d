"""
Neighboring semi-complete faces.

Two semi-complete faces (``hint == edge_count - 1``) next to each other
leave the loop very little room:

- sharing an edge: the shared edge and every edge of either face not
  touching it are marked, and the other edges at the shared edge's
  endpoints are disabled;
- sharing a single vertex: every edge of either face not touching that
  vertex is marked.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class _FacePair(NamedTuple):
    first: int
    second: int
    edge: Optional[int]
    vertex: Optional[int]


class NeighboringSemiCompleteFacesSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        grid = grid.copy()
        for pair in self._collect(grid):
            if pair.edge is not None:
                self._apply_to_shared_edge(grid, pair)
            else:
                self._apply_to_shared_vertex(grid, pair)
        return grid

    @staticmethod
    def _collect(grid: LoopyGrid) -> List[_FacePair]:
        faces = [
            f for f in grid.face_ids
            if grid.is_face_semicomplete(f) and not grid.is_face_solved(f)
        ]
        pairs = []
        for i, first in enumerate(faces):
            for second in faces[i + 1:]:
                edge = grid.shared_edge(first, second)
                if edge is not None:
                    pairs.append(_FacePair(first, second, edge, None))
                    continue
                vertices = grid.shared_vertices(first, second)
                if len(vertices) == 1:
                    pairs.append(_FacePair(first, second, None, vertices[0]))
        return pairs

    @staticmethod
    def _apply_to_shared_edge(grid: LoopyGrid, pair: _FacePair):
        shared = pair.edge
        grid.set_edge_state(shared, EdgeState.MARKED)

        for face in (pair.first, pair.second):
            opposite = [
                e for e in grid.edges_for_face(face)
                if not grid.edges_share_vertex(e, shared)
            ]
            grid.set_edges(EdgeState.MARKED, opposite)

        start, end = grid.edge_vertices(shared)
        others = [
            e for e in grid.edges_sharing(start) + grid.edges_sharing(end)
            if not grid.face_contains_edge(pair.first, e)
            and not grid.face_contains_edge(pair.second, e)
        ]
        grid.set_edges(EdgeState.DISABLED, others)

    @staticmethod
    def _apply_to_shared_vertex(grid: LoopyGrid, pair: _FacePair):
        for face in (pair.first, pair.second):
            away = [
                e for e in grid.edges_for_face(face)
                if not grid.edge_touches_vertex(e, pair.vertex)
            ]
            grid.set_edges(EdgeState.MARKED, away)
