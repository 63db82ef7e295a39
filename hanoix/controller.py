"""
Selection controller - turns two rod taps into one engine move.

Input front-ends (pointer, touch, keyboard, console) report which rod the
player picked. The first pick of a non-empty rod selects it; the next pick of
another rod asks the engine to move the top disk there.
"""

import logging
from enum import Enum, auto
from typing import Optional

from hanoix.engine import PuzzleEngine

logger = logging.getLogger(__name__)


class SelectionResult(Enum):
    """Outcome of a single rod pick."""

    SELECTED = auto()
    CLEARED = auto()
    IGNORED = auto()
    MOVED = auto()
    REJECTED = auto()


class SelectionController:
    """
    Holds the selected rod between picks and owns the current engine.

    Args:
        num_disks: Disk count of the first game.
        num_rods: Rod count of the first game.
    """

    def __init__(self, num_disks: int = 3, num_rods: int = 3):
        self._engine = PuzzleEngine(num_disks, num_rods)
        self._selected_rod: Optional[int] = None

    @property
    def engine(self) -> PuzzleEngine:
        return self._engine

    @property
    def selected_rod(self) -> Optional[int]:
        return self._selected_rod

    def select(self, rod_index: int) -> SelectionResult:
        """
        Register a pick of rod_index.

        Raises:
            IndexError: If rod_index is not a rod of the current game.
        """
        top_disk = self._engine.get_top_disk(rod_index)

        if self._selected_rod is None:
            if top_disk is None:
                return SelectionResult.IGNORED
            self._selected_rod = rod_index
            return SelectionResult.SELECTED

        if self._selected_rod == rod_index:
            self._selected_rod = None
            return SelectionResult.CLEARED

        from_rod, self._selected_rod = self._selected_rod, None
        if self._engine.move(from_rod, rod_index):
            if self._engine.is_game_completed():
                logger.info("Puzzle completed in %d moves", self._engine.moves_count)
            return SelectionResult.MOVED
        return SelectionResult.REJECTED

    def reset(self, num_disks: Optional[int] = None, num_rods: Optional[int] = None) -> PuzzleEngine:
        """Replace the engine with a fresh game, keeping the old counts unless given."""
        if num_disks is None:
            num_disks = self._engine.get_disks_count()
        if num_rods is None:
            num_rods = self._engine.get_rods_count()
        self._engine = PuzzleEngine(num_disks, num_rods)
        self._selected_rod = None
        logger.info("Reset game: %d disks, %d rods", num_disks, num_rods)
        return self._engine
