"""
hanoix: Generalised Tower of Hanoi with JAX

A Tower of Hanoi game with any number of disks and rods. The rules are a pure,
jittable puzzle environment; the engine wraps them in the mutable game object
used by interactive front-ends.
"""

# Core framework
from hanoix.core import FieldDescriptor, Puzzle, PuzzleState, state_dataclass

# Game
from hanoix.controller import SelectionController, SelectionResult
from hanoix.engine import PuzzleEngine
from hanoix.puzzles import TowerOfHanoi

__version__ = "0.1.0"

__all__ = [
    # Core framework
    "Puzzle",
    "PuzzleState",
    "FieldDescriptor",
    "state_dataclass",
    # Puzzle implementations
    "TowerOfHanoi",
    # Game
    "PuzzleEngine",
    "SelectionController",
    "SelectionResult",
]
