"""
Solver errors and limits.
"""

from __future__ import annotations

import os
from typing import Optional

DEFAULT_MAX_GUESSES = 10
DEFAULT_MAX_POST_SOLVE_GUESSES = 10
DEFAULT_PERMUTATION_WORKERS = 4
DEFAULT_GRID_CACHE_SIZE = 256


class GameIDError(ValueError):
    """
    Raised when a game ID string cannot be parsed into a grid.
    """

    def __init__(
        self,
        message: str,
        *,
        game_id: str | None = None,
        position: int | None = None,
    ) -> None:
        super().__init__(message)
        self.game_id = game_id
        self.position = position


class UnsupportedGridTypeError(GameIDError):
    """
    Raised for a well-formed game ID whose grid type has no generator.
    """

    def __init__(self, grid_type: int, *, game_id: str | None = None) -> None:
        super().__init__(f"Unsupported grid type t{grid_type}", game_id=game_id)
        self.grid_type = grid_type


def _resolve_int(explicit: Optional[int], env_name: str, default: int, minimum: int) -> int:
    """
    Priority:
    1) explicit value
    2) env <env_name>
    3) default

    Values below *minimum* or that fail to parse fall back to the default.
    """
    raw = explicit
    if raw is None:
        raw = os.getenv(env_name)
    if raw is None:
        return default

    try:
        value = int(raw)
        if value >= minimum:
            return value
    except (TypeError, ValueError):
        pass
    return default


def resolve_max_guesses(explicit: Optional[int] = None) -> int:
    return _resolve_int(explicit, "LOOPY_MAX_GUESSES", DEFAULT_MAX_GUESSES, 0)


def resolve_max_post_solve_guesses(explicit: Optional[int] = None) -> int:
    return _resolve_int(
        explicit, "LOOPY_MAX_POST_SOLVE_GUESSES", DEFAULT_MAX_POST_SOLVE_GUESSES, 0
    )


def resolve_permutation_workers(explicit: Optional[int] = None) -> int:
    return _resolve_int(explicit, "LOOPY_PERMUTATION_WORKERS", DEFAULT_PERMUTATION_WORKERS, 1)


def resolve_grid_cache_size(explicit: Optional[int] = None) -> int:
    return _resolve_int(explicit, "LOOPY_GRID_CACHE_SIZE", DEFAULT_GRID_CACHE_SIZE, 1)
