"""
Puzzle implementations for hanoix.

Puzzle classes inherit from the base Puzzle class and expose jittable,
vectorisable transition functions.
"""

from hanoix.puzzles.hanoi import TowerOfHanoi

__all__ = [
    "TowerOfHanoi",
]
