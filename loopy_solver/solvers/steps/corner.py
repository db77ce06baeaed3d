"""
Corner faces.

Handles hinted faces whose edges split into a single run along the outside
of the face (typically a face in a corner of the grid):

1. A run longer than the hint can never be marked: disable it. The face
   is left alone for the rest of the pass, so a run disabled here is never
   re-marked by the cases below.
2. When the edges outside the run cannot reach the hint on their own, the
   run must be part of the loop: mark it.
3. When the run and the remaining edges both have exactly ``hint`` edges,
   the loop either takes the whole run or the whole remainder. Edges
   leaving the two join vertices away from the face are common to both
   outcomes and are marked when they are the only way out.

   3.1. If the inner path would go past a semi-complete face that does not
   touch either join vertex, that face would pull the line around itself,
   so the inner path is impossible and the outer run is marked.

Example for case 3, a ``2`` in a corner::

    !___!__          ║___!__
    | 2 |       ->   | 2 |
    └---┴--          └---┴══
"""

from __future__ import annotations

from typing import List

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import (
    is_loop,
    is_unique_segment,
    linear_path_graph_edges,
)
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class CornerSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(type(self))
        grid = grid.copy()

        for face in grid.face_ids:
            if grid.hint_for_face(face) is None:
                continue
            if metadata.matches_stored_face_state(face, grid):
                continue
            self._apply_to_face(grid, face)
            metadata.store_face_state(face, grid)

        return grid

    def _apply_to_face(self, grid: LoopyGrid, face: int):
        hint = grid.hint_for_face(face)
        edges = grid.edges_for_face(face)

        if all(grid.edge_state(e) != EdgeState.NORMAL for e in edges):
            return

        view = grid.ignoring_disabled_edges()
        runs = [
            [e for e in run if grid.face_contains_edge(face, e)]
            for run in linear_path_graph_edges(view, face)
        ]

        # 1.
        too_long = [run for run in runs if len(run) > hint]
        for run in too_long:
            grid.set_edges(EdgeState.DISABLED, run)
        if too_long:
            return

        long_runs = [run for run in runs if len(run) > 1]
        if len(long_runs) != 1:
            return

        outer = long_runs[0]
        if not is_unique_segment(grid, outer) or is_loop(grid, outer):
            return

        # 2.
        if len(edges) - len(outer) < hint:
            grid.set_edges(EdgeState.MARKED, outer)
            return

        # 3.
        if len(edges) != 2 * len(outer) or len(outer) != hint:
            return

        chain = _chain_order(grid, outer)
        view = grid.ignoring_disabled_edges()
        for end in (chain[0], chain[-1]):
            leaving = [e for e in view.edges_connected(end) if not grid.face_contains_edge(face, e)]
            if len(leaving) == 1:
                grid.set_edges(EdgeState.MARKED, leaving)

        # 3.1
        inner = [e for e in edges if e not in outer]
        inner_vertices = {v for e in inner for v in grid.edge_vertices(e)}
        outer_vertices = {v for e in outer for v in grid.edge_vertices(e)}
        join_vertices = inner_vertices & outer_vertices

        for vertex in set(grid.vertices_for_face(face)) - join_vertices:
            candidates = [
                f for f in grid.faces_sharing_vertex(vertex)
                if not any(v in join_vertices for v in grid.vertices_for_face(f))
            ]
            if any(grid.is_face_semicomplete(f) for f in candidates):
                grid.set_edges(EdgeState.DISABLED, inner)
                grid.set_edges(EdgeState.MARKED, outer)
                return


def _chain_order(grid: LoopyGrid, edges: List[int]) -> List[int]:
    """Order the edges of an open chain from one end to the other."""
    if len(edges) <= 1:
        return list(edges)

    def neighbours(edge):
        return [e for e in edges if e != edge and grid.edges_share_vertex(e, edge)]

    start = next((e for e in edges if len(neighbours(e)) == 1), edges[0])
    ordered = [start]
    while len(ordered) < len(edges):
        following = [e for e in neighbours(ordered[-1]) if e not in ordered]
        if not following:
            break
        ordered.append(following[0])
    return ordered
