"""
Battle Royale Solver Package

A backtracking path search for shrinking-zone loot maps.
"""

from .grid import GameMap, MapInvalid, parse_map, load_map
from .solver import ZoneSolver, Solution, solve_map
from .output import SolutionFormatter

__version__ = "1.0.0"
__all__ = [
    'GameMap',
    'MapInvalid',
    'parse_map',
    'load_map',
    'ZoneSolver',
    'Solution',
    'solve_map',
    'SolutionFormatter'
]
