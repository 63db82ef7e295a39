from collections.abc import Callable, Sequence
from typing import Optional

import chex
import jax.numpy as jnp
import numpy as np
from termcolor import colored

from hanoix.core.puzzle_base import Puzzle
from hanoix.core.puzzle_state import FieldDescriptor, PuzzleState, state_dataclass

TYPE = jnp.uint8
MAX_RODS = int(jnp.iinfo(TYPE).max) + 1


class TowerOfHanoi(Puzzle):
    """Generalised Tower of Hanoi with ``num_disks`` disks and ``num_rods`` rods.

    The state stores, for every disk, the index of the rod it sits on:
    ``state.rods[d - 1]`` is the rod holding disk ``d``. Each disk is on
    exactly one rod, and the disks of a rod are stacked largest first, so the
    top of a rod is the smallest disk assigned to it.

    Every ordered pair of distinct rods ``(from_rod, to_rod)`` is an action,
    numbered row-major: ``from_rod`` ascending, then ``to_rod`` ascending.
    All disks start on rod 0; the goal rod is always the last one.

    Args:
        num_disks: Number of disks, sized ``1..num_disks``.
        num_rods: Number of rods.
    """

    num_disks: int
    num_rods: int

    def define_state_class(self) -> PuzzleState:
        str_parser = self.get_string_parser()
        num_disks = self.num_disks

        @state_dataclass
        class State:
            rods: FieldDescriptor.tensor(dtype=TYPE, shape=(num_disks,))

            def __str__(self, **kwargs):
                return str_parser(self, **kwargs)

        return State

    def __init__(self, num_disks: int = 3, num_rods: int = 3, **kwargs):
        if num_disks < 1:
            raise ValueError(f"num_disks must be at least 1, got {num_disks}")
        if num_rods < 1:
            raise ValueError(f"num_rods must be at least 1, got {num_rods}")
        if num_rods > MAX_RODS:
            raise ValueError(f"num_rods must be at most {MAX_RODS}, got {num_rods}")
        self.num_disks = int(num_disks)
        self.num_rods = int(num_rods)
        self._action_pairs = np.array(
            [
                (from_rod, to_rod)
                for from_rod in range(self.num_rods)
                for to_rod in range(self.num_rods)
                if from_rod != to_rod
            ],
            dtype=np.int32,
        ).reshape(-1, 2)
        self.action_size = len(self._action_pairs)
        super().__init__(**kwargs)

    @property
    def goal_rod(self) -> int:
        return self.num_rods - 1

    def action_to_pair(self, action: int) -> tuple[int, int]:
        """Return the ``(from_rod, to_rod)`` pair moved by ``action``."""
        if not 0 <= action < self.action_size:
            raise ValueError(
                f"Action {action} is out of bounds for action space size {self.action_size}."
            )
        from_rod, to_rod = self._action_pairs[action]
        return int(from_rod), int(to_rod)

    def pair_to_action(self, from_rod: int, to_rod: int) -> Optional[int]:
        """Return the action index of a rod pair, or None if the pair is not an action."""
        in_range = 0 <= from_rod < self.num_rods and 0 <= to_rod < self.num_rods
        if not in_range or from_rod == to_rod:
            return None
        return from_rod * (self.num_rods - 1) + (to_rod if to_rod < from_rod else to_rod - 1)

    def get_string_parser(self) -> Callable:
        goal_rod = self.num_rods - 1

        def parser(state: "TowerOfHanoi.State", **kwargs):
            lines = []
            for index, rod in enumerate(self.state_to_rods(state)):
                label = f"rod {index}"
                if index == goal_rod:
                    label = colored(label, "light_green")
                lines.append(f"{label}: {' '.join(map(str, rod))}".rstrip())
            return "\n".join(lines)

        return parser

    def get_solve_config(self) -> Puzzle.SolveConfig:
        target = jnp.full((self.num_disks,), self.goal_rod, dtype=TYPE)
        return self.SolveConfig(TargetState=self.State(rods=target))

    def get_initial_state(self, solve_config: Puzzle.SolveConfig) -> "TowerOfHanoi.State":
        return self.State(rods=jnp.zeros((self.num_disks,), dtype=TYPE))

    def top_disks(self, state: "TowerOfHanoi.State") -> chex.Array:
        """Top disk of every rod, shape ``(num_rods,)``; ``num_disks + 1`` marks an empty rod."""
        sizes = jnp.arange(1, self.num_disks + 1, dtype=jnp.int32)
        on_rod = state.rods[jnp.newaxis, :] == jnp.arange(self.num_rods)[:, jnp.newaxis]
        return jnp.min(jnp.where(on_rod, sizes[jnp.newaxis, :], self.num_disks + 1), axis=1)

    def get_actions(
        self,
        solve_config: Puzzle.SolveConfig,
        state: "TowerOfHanoi.State",
        action: chex.Array,
        filled: bool = True,
    ) -> tuple["TowerOfHanoi.State", chex.Array]:
        """
        Move the top disk of `from_rod` onto `to_rod`.
        Legal when `from_rod` is not empty and its top disk is smaller than the top of
        `to_rod` (an empty rod counts as larger than every disk).
        """
        pairs = jnp.asarray(self._action_pairs)
        from_rod = pairs[action, 0]
        to_rod = pairs[action, 1]

        tops = self.top_disks(state)
        top_from = tops[from_rod]
        top_to = tops[to_rod]
        valid = jnp.logical_and(top_from <= self.num_disks, top_from < top_to)
        valid = jnp.logical_and(valid, filled)

        disk_index = jnp.clip(top_from - 1, 0, self.num_disks - 1)
        moved = state.rods.at[disk_index].set(to_rod.astype(TYPE))
        next_rods = jnp.where(valid, moved, state.rods)
        cost = jnp.where(valid, 1.0, jnp.inf)
        return self.State(rods=next_rods), cost

    def is_solved(self, solve_config: Puzzle.SolveConfig, state: "TowerOfHanoi.State") -> bool:
        return jnp.sum(state.rods == self.goal_rod) == self.num_disks

    def action_to_string(self, action: int) -> str:
        from_rod, to_rod = self.action_to_pair(action)
        return colored(f"{from_rod}→{to_rod}", "light_yellow")

    @property
    def inverse_action_map(self) -> jnp.ndarray | None:
        """
        Moving a disk from `a` to `b` is undone by moving it from `b` to `a`.
        """
        inverse = [self.pair_to_action(int(to_rod), int(from_rod)) for from_rod, to_rod in self._action_pairs]
        return jnp.array(inverse, dtype=jnp.int32)

    def state_to_rods(self, state: "TowerOfHanoi.State") -> list[list[int]]:
        """Materialise a state as bottom-to-top disk lists, one per rod."""
        assignment = np.asarray(state.rods)
        rods = [[] for _ in range(self.num_rods)]
        for disk in range(self.num_disks, 0, -1):
            rods[int(assignment[disk - 1])].append(disk)
        return rods

    def rods_to_state(self, rods: Sequence[Sequence[int]]) -> "TowerOfHanoi.State":
        """Build a state from bottom-to-top disk lists, one per rod.

        Raises:
            ValueError: If the rod count is wrong, a disk is missing or repeated,
                or a rod is not strictly decreasing from bottom to top.
        """
        if len(rods) != self.num_rods:
            raise ValueError(f"Expected {self.num_rods} rods, got {len(rods)}")
        assignment = np.full((self.num_disks,), -1, dtype=np.int32)
        for index, rod in enumerate(rods):
            for below, above in zip(rod, rod[1:]):
                if above >= below:
                    raise ValueError(
                        f"Rod {index} is not strictly decreasing bottom to top: {list(rod)}"
                    )
            for disk in rod:
                if not 1 <= disk <= self.num_disks:
                    raise ValueError(f"Disk {disk} is outside 1..{self.num_disks}")
                if assignment[disk - 1] != -1:
                    raise ValueError(f"Disk {disk} appears more than once")
                assignment[disk - 1] = index
        missing = [int(d) + 1 for d in np.flatnonzero(assignment == -1)]
        if missing:
            raise ValueError(f"Disks missing from rods: {missing}")
        return self.State(rods=jnp.asarray(assignment, dtype=TYPE))
