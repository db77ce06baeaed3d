"""
Solver Step Protocol
====================
Base classes shared by every deduction rule and by the solver driving them.

- SolverStep: ``apply(grid, delegate) -> grid``; never mutates its input
- SolverStepDelegate: services a rule may call back into while applying
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Type

from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step_metadata import SolverStepMetadata


class SolverStep:
    """
    A discrete deduction over a grid.

    Ephemeral steps only need to run once per solver; the solver drops them
    from its active list after their first application.
    """

    is_ephemeral = False

    def apply(self, grid: LoopyGrid, delegate: "SolverStepDelegate") -> LoopyGrid:
        raise NotImplementedError

    def __repr__(self):
        return type(self).__name__


class SolverStepDelegate:
    """
    Callbacks a step can use while it runs.

    The default implementation keeps its own metadata and refuses guesses;
    the solver provides a subclass wired to its guess budget.
    """

    def __init__(self, metadata: Dict[type, SolverStepMetadata] | None = None):
        self.metadata = metadata if metadata is not None else {}
        self.is_inconsistent = False

    def metadata_for_step(self, step_cls: Type[SolverStep]) -> SolverStepMetadata:
        metadata = self.metadata.get(step_cls)
        if metadata is None:
            metadata = SolverStepMetadata()
            self.metadata[step_cls] = metadata
        return metadata

    def can_perform_guess(self, step: SolverStep) -> bool:
        return False

    def did_perform_guess(self, step: SolverStep):
        pass

    def with_subsolver(self, grid: LoopyGrid, fn: Callable[[Any], Any]) -> Any:
        raise NotImplementedError

    def report_inconsistent_state(self, step: SolverStep):
        self.is_inconsistent = True
