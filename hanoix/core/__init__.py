"""
Core puzzle framework components.

This module provides the base class and state dataclasses for puzzle environments.
"""

from hanoix.core.puzzle_base import Puzzle
from hanoix.core.puzzle_state import FieldDescriptor, PuzzleState, state_dataclass

__all__ = [
    "Puzzle",
    "PuzzleState",
    "FieldDescriptor",
    "state_dataclass",
]
