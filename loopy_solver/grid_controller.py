"""
Grid Controller
===============
Convenience editor for setting up grid states by face-local edge indices.
"""

from __future__ import annotations

from typing import Iterable

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid


class LoopyGridController:
    """Edits a private copy of a grid; read the result back from ``grid``."""

    def __init__(self, grid: LoopyGrid):
        self.grid = grid.copy()

    def set_all_edges(self, state: EdgeState):
        self.grid.set_edges(state, self.grid.edge_ids)

    def set_edge(self, state: EdgeState, face: int, edge_index: int):
        """Set the state of one edge of ``face``, by local index."""
        self.grid.set_edge_state(self.grid.edges_for_face(face)[edge_index], state)

    def set_edges(self, state: EdgeState, face: int, edge_indices: Iterable[int] = None):
        """Set several edges of ``face`` by local index (all of them when omitted)."""
        edges = self.grid.edges_for_face(face)
        if edge_indices is None:
            edge_indices = range(len(edges))
        for index in edge_indices:
            self.grid.set_edge_state(edges[index], state)

    def edge_states_for_face(self, face: int):
        return [self.grid.edge_state(e) for e in self.grid.edges_for_face(face)]
