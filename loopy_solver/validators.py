"""
Grid Validators
===============
Global predicates over a LoopyGrid.

- hints_consistent: the cheap per-face gate checked after every rule
- is_consistent: full contradiction check (vertex degrees, hints, premature loops)
- is_solved: win condition (hints satisfied, one closed loop)

Loop structure is checked with a disjoint-set union over the marked edges.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid


def hints_consistent(grid: LoopyGrid) -> bool:
    """Every hinted face has ``marked <= hint <= marked + normal``."""
    for face in grid.face_ids:
        hint = grid.hint_for_face(face)
        if hint is None:
            continue
        marked = grid.edge_count(EdgeState.MARKED, face)
        if marked > hint:
            return False
        if grid.enabled_edge_count(face) < hint:
            return False
    return True


def is_consistent(grid: LoopyGrid) -> bool:
    """
    A grid is consistent when all of the following hold:

    1. No vertex has more than two marked edges.
    2. Every hinted face has at most ``hint`` marked edges.
    3. Every hinted face has at least ``hint`` enabled edges.
    4. If the marked edges contain a closed loop, that loop holds every
       marked edge on the grid.
    """
    degrees = grid.marked_degree_per_vertex()
    if degrees.size and int(degrees.max()) > 2:
        return False

    if not hints_consistent(grid):
        return False

    components = _marked_components(grid, degrees)
    if len(components) > 1 and any(closed for _, closed in components):
        return False

    return True


def is_solved(grid: LoopyGrid) -> bool:
    """
    Check the win condition.

    1. Every hinted face has exactly ``hint`` marked edges.
    2. The marked edges form a single connected loop with degree 2 at
       every vertex they touch.
    """
    for face in grid.face_ids:
        hint = grid.hint_for_face(face)
        if hint is not None and grid.edge_count(EdgeState.MARKED, face) != hint:
            return False

    degrees = grid.marked_degree_per_vertex()
    active = degrees[degrees > 0]
    if active.size == 0 or np.any(active != 2):
        return False

    components = _marked_components(grid, degrees)
    return len(components) == 1 and components[0][1]


def _marked_components(grid: LoopyGrid, degrees) -> List[Tuple[int, bool]]:
    """
    Returns ``(vertex_count, is_closed)`` for each connected component of
    marked edges. A component is closed when every vertex in it has degree 2.
    """
    marked = grid.edges_with_state(EdgeState.MARKED)
    if not marked:
        return []

    dsu = _DSU()
    vertices = set()
    for edge in marked:
        u, v = grid.edge_vertices(edge)
        vertices.add(u)
        vertices.add(v)
        dsu.union(u, v)

    size: Dict[int, int] = {}
    closed: Dict[int, bool] = {}
    for node in vertices:
        root = dsu.find(node)
        size[root] = size.get(root, 0) + 1
        closed[root] = closed.get(root, True) and int(degrees[node]) == 2

    return [(size[root], closed[root]) for root in size]


class _DSU:
    def __init__(self):
        self.parent = {}
        self.rank = {}

    def find(self, x):
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0
            return x
        while self.parent[x] != x:
            self.parent[x] = self.parent[self.parent[x]]
            x = self.parent[x]
        return x

    def union(self, a, b):
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
