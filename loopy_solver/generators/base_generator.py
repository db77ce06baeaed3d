"""
Base Grid Generator
===================
Shared hint bookkeeping for the lattice generators, including decoding of
the hint field of a game ID.
"""

from __future__ import annotations

from typing import Dict, Optional

from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_errors import GameIDError


class BaseGridGenerator:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.hints: Dict[int, int] = {}

    @property
    def face_count(self) -> int:
        return len(self._build().face_ids)

    def set_hint(self, face: int, hint: Optional[int]):
        if hint is None:
            self.hints.pop(face, None)
        else:
            self.hints[face] = hint

    def load_hints(self, field: str):
        """
        Decode a hint field over the generated faces, in face order.

        - ``0``-``9``: hints 0 to 9
        - ``A``-``Z``: hints 10 to 35
        - ``a``-``z``: a run of 1 to 26 faces without hints
        """
        self.hints = {}
        empties = 0
        position = 0

        for face in range(self.face_count):
            if empties > 0:
                empties -= 1
                continue

            if position >= len(field):
                raise GameIDError(
                    f"Hint field ends after {position} characters",
                    game_id=field,
                    position=position,
                )

            char = field[position]
            if "0" <= char <= "9":
                self.hints[face] = ord(char) - ord("0")
            elif "A" <= char <= "Z":
                self.hints[face] = ord(char) - ord("A") + 10
            elif "a" <= char <= "z":
                empties = ord(char) - ord("a")
            else:
                raise GameIDError(
                    f"Invalid hint character {char!r}", game_id=field, position=position
                )
            position += 1

    def generate(self) -> LoopyGrid:
        grid = self._build()
        for face, hint in self.hints.items():
            grid.set_hint(face, hint)
        return grid

    def _build(self) -> LoopyGrid:
        """Build the bare lattice, without hints."""
        raise NotImplementedError
