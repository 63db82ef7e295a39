"""
Puzzle engine - the mutable, single-owner game state for interactive play.

The engine wraps one :class:`~hanoix.puzzles.hanoi.TowerOfHanoi` and holds the
current immutable state plus the move counter. ``move`` is the only operation
that changes anything; every other method is a query. Illegal moves are an
ordinary outcome and are reported by returning ``False``.

The engine is not thread-safe: a single caller owns it and issues moves.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from hanoix.puzzles.hanoi import TowerOfHanoi

logger = logging.getLogger(__name__)


class PuzzleEngine:
    """
    Generalised Tower of Hanoi game.

    All ``num_disks`` disks start on rod 0, largest at the bottom. The game is
    complete when the last rod holds every disk. Completion does not lock the
    engine: moves remain possible afterwards.

    Args:
        num_disks: Number of disks (at least 1).
        num_rods: Number of rods (at least 1).

    Raises:
        ValueError: If either count is below 1 or ``num_rods`` is too large
            for the rod tensor.
    """

    def __init__(self, num_disks: int = 3, num_rods: int = 3):
        self._puzzle = TowerOfHanoi(num_disks=num_disks, num_rods=num_rods)
        self._solve_config = self._puzzle.get_solve_config()
        self._state = self._puzzle.get_initial_state(self._solve_config)
        self._moves_count = 0
        logger.debug("Created engine with %d disks on %d rods", num_disks, num_rods)

    @property
    def puzzle(self) -> TowerOfHanoi:
        """The functional puzzle defining the rules."""
        return self._puzzle

    @property
    def solve_config(self) -> TowerOfHanoi.SolveConfig:
        return self._solve_config

    @property
    def state(self) -> TowerOfHanoi.State:
        """Current immutable state."""
        return self._state

    @property
    def moves_count(self) -> int:
        """Number of successful moves so far."""
        return self._moves_count

    def get_state(self) -> List[List[int]]:
        """
        Get the rods as bottom-to-top disk lists.

        Returns:
            A fresh list of fresh lists; changing it never affects the engine.
        """
        return self._puzzle.state_to_rods(self._state)

    def get_top_disk(self, rod_index: int) -> Optional[int]:
        """
        Get the disk on top of a rod.

        Args:
            rod_index: Rod to inspect.

        Returns:
            Size of the top disk, or None if the rod is empty.

        Raises:
            IndexError: If rod_index is not in [0, num_rods).
        """
        self._check_rod(rod_index)
        assignment = np.asarray(self._state.rods)
        on_rod = np.flatnonzero(assignment == rod_index)
        if on_rod.size == 0:
            return None
        return int(on_rod[0]) + 1

    def is_valid_move(self, from_rod: int, to_rod: int) -> bool:
        """
        Check whether the top disk of from_rod may be placed on to_rod.

        A move is valid when both rods exist, from_rod is not empty, and
        to_rod is empty or its top disk is larger. Moving a rod onto itself
        is never valid.
        """
        action = self._puzzle.pair_to_action(from_rod, to_rod)
        if action is None:
            return False
        _, cost = self._puzzle.get_actions(self._solve_config, self._state, action)
        return bool(np.isfinite(cost))

    def move(self, from_rod: int, to_rod: int) -> bool:
        """
        Move the top disk of from_rod onto to_rod.

        Returns:
            True if the disk was moved and the move counted, False if the move
            is invalid (the state is left untouched).
        """
        action = self._puzzle.pair_to_action(from_rod, to_rod)
        if action is None:
            logger.debug("Rejected move %s -> %s: not a rod pair", from_rod, to_rod)
            return False

        next_state, cost = self._puzzle.get_actions(self._solve_config, self._state, action)
        if not np.isfinite(cost):
            logger.debug("Rejected move %s -> %s: illegal placement", from_rod, to_rod)
            return False

        self._state = next_state
        self._moves_count += 1
        logger.debug("Moved %s -> %s (move %d)", from_rod, to_rod, self._moves_count)
        return True

    def is_game_completed(self) -> bool:
        """True when the last rod holds all the disks."""
        return bool(self._puzzle.is_solved(self._solve_config, self._state))

    def get_possible_moves(self) -> List[Tuple[int, int]]:
        """
        List every valid move in the current state.

        Returns:
            (from_rod, to_rod) pairs ordered by from_rod, then to_rod.
        """
        if self._puzzle.action_size == 0:
            return []
        mask = np.asarray(self._puzzle.get_action_mask(self._solve_config, self._state))
        return [self._puzzle.action_to_pair(int(action)) for action in np.flatnonzero(mask)]

    def get_disks_count(self) -> int:
        return self._puzzle.num_disks

    def get_rods_count(self) -> int:
        return self._puzzle.num_rods

    def _check_rod(self, rod_index: int) -> None:
        if not 0 <= rod_index < self._puzzle.num_rods:
            raise IndexError(
                f"Rod index {rod_index} is out of range for {self._puzzle.num_rods} rods"
            )

    def __str__(self) -> str:
        return self._puzzle.get_string_parser()(self._state)

    def __repr__(self) -> str:
        return (
            f"PuzzleEngine(num_disks={self.get_disks_count()}, "
            f"num_rods={self.get_rods_count()}, moves_count={self._moves_count})"
        )
