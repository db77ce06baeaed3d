"""
Corner entry.

Deals with loose line ends touching a face at one of its corners, where the
line has no choice but to continue along the face's edges.

On the following grid the line coming down into the top-right corner of
the ``1`` has to take one of its edges, so the left, bottom and right edges
cannot be marked::

    .___.___.
    !___!___║
    !___!_1_!

A semi-complete face touched by a loose end from outside takes the line
over entirely, marking its edges away from the entry vertex.

Two more analyses run per hinted face:

- entry points: when every solution of a neighbor touching the face only at
  a corner sends the line through that corner, the face's own solutions
  are restricted to the ones picking the line up there;
- forking paths: of the two ways a loose end can continue along a face, a
  way that would leave the face without enough enabled edges for its hint
  forces the other one.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import (
    common_edges,
    permute_solutions_as_edges,
    single_path_edges,
)
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate
from loopy_solver.solvers.solver_step_metadata import SolverStepMetadata


class CornerEntrySolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(type(self))
        grid = grid.copy()

        for vertex in range(grid.vertex_count):
            if metadata.matches_stored_vertex_state(vertex, grid):
                continue
            self._apply_to_vertex(grid, vertex, metadata)
            metadata.store_vertex_state(vertex, grid)

        for face in grid.face_ids:
            hint = grid.hint_for_face(face)
            if hint is None:
                continue
            self._analyze_vertex_entry_points(grid, face)
            self._analyze_forking_paths(grid, face, hint)

        return grid

    # ── Loose ends ─────────────────────────────────────────────

    def _apply_to_vertex(self, grid: LoopyGrid, vertex: int, metadata: SolverStepMetadata):
        edges = grid.edges_sharing(vertex)
        marked = _only_marked(grid, edges)
        if marked is None:
            return

        semicomplete = next(
            (f for f in grid.faces_sharing_vertex(vertex) if grid.is_face_semicomplete(f)),
            None,
        )
        if semicomplete is not None:
            if grid.is_face_solved(semicomplete) or grid.face_contains_edge(semicomplete, marked):
                return

            opposite = [
                e for e in grid.edges_for_face(semicomplete)
                if not grid.edge_touches_vertex(e, vertex)
            ]
            grid.set_edges(EdgeState.MARKED, opposite)

            others = [
                e for e in edges
                if e != marked and not grid.face_contains_edge(semicomplete, e)
            ]
            grid.set_edges(EdgeState.DISABLED, others)
            return

        normal = [e for e in edges if grid.edge_state(e) == EdgeState.NORMAL]
        if not normal:
            return

        common = set(grid.faces_sharing_edge(normal[0]))
        for edge in normal[1:]:
            common &= set(grid.faces_sharing_edge(edge))
        if len(common) != 1:
            return

        face = common.pop()
        if metadata.matches_stored_face_state(face, grid):
            return
        self._apply_to_face(grid, face, vertex)
        metadata.store_face_state(face, grid)

    @staticmethod
    def _apply_to_face(grid: LoopyGrid, face: int, vertex: int):
        hint = grid.hint_for_face(face)
        if hint is None or grid.is_face_solved(face):
            return

        all_edges = grid.edges_for_face(face)
        normal = [
            e for e in all_edges
            if grid.edge_touches_vertex(e, vertex) and grid.edge_state(e) == EdgeState.NORMAL
        ]
        if not normal:
            return

        least = None
        for edge in normal:
            path = [e for e in single_path_edges(grid, edge) if grid.face_contains_edge(face, e)]
            least = len(path) if least is None else min(least, len(path))
            if len(path) > hint:
                grid.set_edges(EdgeState.DISABLED, path)

        if least >= hint:
            away = [e for e in all_edges if not grid.edge_touches_vertex(e, vertex)]
            grid.set_edges(EdgeState.DISABLED, away)

    # ── Entry points ───────────────────────────────────────────

    def _analyze_vertex_entry_points(self, grid: LoopyGrid, face: int):
        if grid.is_face_solved(face):
            return

        face_edges = set(grid.edges_for_face(face))
        for vertex in grid.vertices_for_face(face):
            edges = set(grid.edges_sharing(vertex))
            ours = face_edges & edges

            for other in grid.faces_sharing_vertex(vertex):
                if other == face or grid.faces_share_edge(face, other):
                    continue

                theirs = set(grid.edges_sharing_vertex_in_face(other, vertex))
                if edges - theirs != ours or edges - ours != theirs:
                    continue

                if _is_vertex_spilling(grid, vertex, other):
                    self._redirect_entry_vertex(grid, vertex, face)

    @staticmethod
    def _redirect_entry_vertex(grid: LoopyGrid, vertex: int, face: int):
        solutions = [
            s for s in permute_solutions_as_edges(grid, face)
            if sum(1 for e in s if grid.edge_touches_vertex(e, vertex)) == 1
        ]
        if not solutions:
            return

        in_all, in_none = common_edges(solutions, grid.edges_for_face(face))
        grid.set_edges(EdgeState.DISABLED, in_none)
        grid.set_edges(EdgeState.MARKED, in_all)

    # ── Forking paths ──────────────────────────────────────────

    @staticmethod
    def _analyze_forking_paths(grid: LoopyGrid, face: int, hint: int):
        if grid.is_face_solved(face):
            return

        face_edges = set(grid.edges_for_face(face))
        enabled = grid.enabled_edge_count(face)

        for vertex in grid.vertices_for_face(face):
            edges = grid.edges_sharing(vertex)
            entry = _only_marked(grid, edges)
            if entry is None or entry in face_edges:
                continue
            if sum(1 for e in edges if e not in face_edges) != 1:
                continue

            paths: List[Tuple[int, int]] = []
            for edge in edges:
                if edge == entry:
                    continue
                path = single_path_edges(grid, edge)
                paths.append((edge, sum(1 for e in set(path) if e in face_edges)))

            if any(enabled - count < hint for _, count in paths):
                for edge, count in paths:
                    if enabled - count >= hint:
                        grid.set_edge_state(edge, EdgeState.DISABLED)


def _only_marked(grid: LoopyGrid, edges: List[int]) -> Optional[int]:
    marked = [e for e in edges if grid.edge_state(e) == EdgeState.MARKED]
    return marked[0] if len(marked) == 1 else None


def _is_vertex_spilling(grid: LoopyGrid, vertex: int, start: int) -> bool:
    """
    True when every solution of ``start`` marks exactly one of its two edges
    at ``vertex``, so the line has to cross over through that vertex.
    """
    start_edges = grid.edges_sharing_vertex_in_face(start, vertex)
    if len(start_edges) != 2:
        return False

    solutions = permute_solutions_as_edges(grid, start)
    if not solutions:
        return False

    return all(sum(1 for e in start_edges if e in s) == 1 for s in solutions)
