"""
Game ID Loader
==============
Builds a grid from a puzzle game ID of the form ``WxHtT:field``, e.g.
``10x10t0:a2a301b23c2a``.

Supported grid types: 0 (square), 2 (honeycomb), 5 (great hexagon).
"""

from __future__ import annotations

import logging
import re

from loopy_solver.generators.base_generator import BaseGridGenerator
from loopy_solver.generators.great_hexagon_generator import GreatHexagonGridGenerator
from loopy_solver.generators.honeycomb_generator import HoneycombGridGenerator
from loopy_solver.generators.square_generator import SquareGridGenerator
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_errors import GameIDError, UnsupportedGridTypeError

logger = logging.getLogger(__name__)

GAME_ID_PATTERN = re.compile(r"(\d+)x(\d+)t(\d+):(.+)")

GRID_TYPES = {
    0: SquareGridGenerator,
    2: HoneycombGridGenerator,
    5: GreatHexagonGridGenerator,
}


def make_generator(game_id: str) -> BaseGridGenerator:
    """Parse ``game_id`` into a generator with its hints loaded."""
    match = GAME_ID_PATTERN.fullmatch(game_id.strip())
    if match is None:
        raise GameIDError(f"Malformed game ID {game_id!r}", game_id=game_id)

    width, height, grid_type = (int(g) for g in match.groups()[:3])
    field = match.group(4)

    generator_cls = GRID_TYPES.get(grid_type)
    if generator_cls is None:
        raise UnsupportedGridTypeError(grid_type, game_id=game_id)

    generator = generator_cls(width, height)
    try:
        generator.load_hints(field)
    except GameIDError as exc:
        raise GameIDError(str(exc), game_id=game_id, position=exc.position) from exc

    logger.debug("Loaded %dx%d grid of type %d", width, height, grid_type)
    return generator


def load_from_game_id(game_id: str) -> LoopyGrid:
    return make_generator(game_id).generate()
