"""
Core data structures for battle royale map representation and loading
"""
import os
from typing import List, Optional, Tuple

import numpy as np


Position = Tuple[int, int]

START_SYMBOLS = ('p', 'P')
VISITED_SYMBOL = 'v'
FINISH_SYMBOL = 'F'
LOOT_SYMBOLS = frozenset('0123456789')


class MapInvalid(Exception):
    """Raised for a map file that is missing, empty or malformed"""


class GameMap:
    """Square map of one-character cells with an optional start position"""

    def __init__(self, cells: np.ndarray, start: Optional[Position] = None):
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise ValueError(f"map must be square, got shape {cells.shape}")
        self.cells = cells
        self.start = start

    @classmethod
    def from_rows(cls, rows: List[str]) -> "GameMap":
        """Build a map from rows of symbols, validated the same way as a map file"""
        return parse_map("\n".join(rows))

    @property
    def size(self) -> int:
        return self.cells.shape[0]

    def copy_cells(self) -> np.ndarray:
        """Get a detached copy of the current cell contents"""
        return self.cells.copy()

    def is_loot(self, row: int, col: int) -> bool:
        return self.cells[row, col] in LOOT_SYMBOLS

    def loot_value(self, row: int, col: int) -> int:
        """Loot held by a cell (0 for non-loot cells)"""
        symbol = self.cells[row, col]
        return int(symbol) if symbol in LOOT_SYMBOLS else 0

    def loot_cells(self) -> List[Position]:
        """All positions currently holding a loot digit, row-major"""
        return [(r, c) for r in range(self.size) for c in range(self.size)
                if self.is_loot(r, c)]

    def total_loot(self) -> int:
        """Sum of every loot digit on the map"""
        return sum(self.loot_value(r, c) for r, c in self.loot_cells())

    def render(self) -> str:
        return render_cells(self.cells)

    def __repr__(self):
        return f"GameMap(size={self.size}, start={self.start}, loot_cells={len(self.loot_cells())})"


def render_cells(cells: np.ndarray) -> str:
    """Space-separated symbols, one map row per line"""
    return "\n".join(" ".join(row) for row in cells)


def parse_map(text: str) -> GameMap:
    """
    Parse a textual map description.

    The number of non-whitespace characters on the first line fixes the side
    length N. The first N lines each supply N symbols once whitespace is
    removed; anything past that is ignored.
    """
    lines = text.splitlines()
    if not lines:
        raise MapInvalid("map is empty")

    size = len(''.join(lines[0].split()))
    if size == 0:
        raise MapInvalid("first line of map is empty")

    if len(lines) < size:
        raise MapInvalid(f"map has {len(lines)} line(s), expected {size}")

    cells = np.full((size, size), '.', dtype='<U1')
    start = None

    for r in range(size):
        row = ''.join(lines[r].split())
        if len(row) < size:
            raise MapInvalid(f"row {r} has {len(row)} cells, expected {size}")
        for c in range(size):
            symbol = row[c]
            cells[r, c] = symbol
            if symbol in START_SYMBOLS:
                if start is not None:
                    raise MapInvalid(f"more than one start marker: {start} and {(r, c)}")
                start = (r, c)

    return GameMap(cells, start)


def load_map(path: str) -> GameMap:
    """Load a map from a text file"""
    if not os.path.isfile(path):
        raise MapInvalid(f"map file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"\nError reading file: {path} ({e})\n")
        raise MapInvalid(f"could not read map file: {path}") from e

    return parse_map(text)
