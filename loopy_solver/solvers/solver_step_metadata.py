"""
Solver Step Metadata
====================
Per-step memo of grid shapes a step has already processed.

Stored states are compared by value (including edge states), so a step can
skip a vertex, face or whole grid whose surroundings are unchanged since it
last looked at them.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, Optional, Tuple

from loopy_solver.edge import Edge
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_errors import resolve_grid_cache_size


class SolverStepMetadata:
    def __init__(self, grid_cache_size: Optional[int] = None):
        self.values: Dict[str, Any] = {}
        self._vertex_states: Dict[int, Tuple[Edge, ...]] = {}
        self._face_states: Dict[int, Tuple[Edge, ...]] = {}
        self._marked_faces: set = set()
        self._flag = False
        # Bounded by insertion order; oldest snapshots are evicted first
        self._grids: "OrderedDict[bytes, None]" = OrderedDict()
        self._grid_cache_size = resolve_grid_cache_size(grid_cache_size)

    # ── Vertices ───────────────────────────────────────────────

    def store_vertex_state(self, vertex: int, grid: LoopyGrid):
        self._vertex_states[vertex] = _vertex_edges(vertex, grid)

    def matches_stored_vertex_state(self, vertex: int, grid: LoopyGrid) -> bool:
        stored = self._vertex_states.get(vertex)
        return stored is not None and stored == _vertex_edges(vertex, grid)

    # ── Faces ──────────────────────────────────────────────────

    def store_face_state(self, face: int, grid: LoopyGrid):
        self._face_states[face] = _face_edges(face, grid)

    def matches_stored_face_state(self, face: int, grid: LoopyGrid) -> bool:
        stored = self._face_states.get(face)
        return stored is not None and stored == _face_edges(face, grid)

    def mark_face(self, face: int):
        self._marked_faces.add(face)

    def is_face_marked(self, face: int) -> bool:
        return face in self._marked_faces

    # ── Grids ──────────────────────────────────────────────────

    def store_grid_state(self, grid: LoopyGrid):
        key = grid.state_snapshot()
        self._grids[key] = None
        self._grids.move_to_end(key)
        while len(self._grids) > self._grid_cache_size:
            self._grids.popitem(last=False)

    def is_grid_state_stored(self, grid: LoopyGrid) -> bool:
        return grid.state_snapshot() in self._grids

    @property
    def stored_grid_count(self) -> int:
        return len(self._grids)

    # ── Global flag ────────────────────────────────────────────

    def mark_flag(self):
        """Record that a once-per-solver action was already taken."""
        self._flag = True

    def is_flag_marked(self) -> bool:
        return self._flag


def _vertex_edges(vertex: int, grid: LoopyGrid) -> Tuple[Edge, ...]:
    return tuple(grid.edge_with_id(e) for e in grid.edges_sharing(vertex))


def _face_edges(face: int, grid: LoopyGrid) -> Tuple[Edge, ...]:
    return tuple(grid.edge_with_id(e) for e in grid.edges_for_face(face))
