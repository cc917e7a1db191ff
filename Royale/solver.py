"""
Shrinking-zone path solver for battle royale maps

Depth-first backtracking search from a start cell toward the centre of the
map. Every recursive step widens the forbidden outer ring by one, so the
playable area closes in on the centre and the search always terminates.

Among all finishing paths the solver keeps the one with the most loot,
breaking loot ties by fewer steps. Equal loot and equal steps keep the
path found first, so the move order (down, up, right, left, stay) decides
which of several equally good paths gets reported.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Set, Tuple

import numpy as np

from .grid import GameMap, Position, START_SYMBOLS, VISITED_SYMBOL, FINISH_SYMBOL, LOOT_SYMBOLS


StateKey = Tuple[int, int, int, int, int, int]

# Successor moves in exploration order: (d_row, d_col, d_steps)
MOVES = (
    (1, 0, 1),    # down
    (-1, 0, 1),   # up
    (0, 1, 1),    # right
    (0, -1, 1),   # left
    (0, 0, 0),    # stay
)


@dataclass
class Solution:
    """Best finishing path found by a search"""
    loot: int
    items_looted: int
    steps: int
    finish: Position
    snapshot: np.ndarray  # map copy at finish time, 'v' marks the path, 'F' the end

    def path_cells(self):
        """Positions marked as visited on the snapshot, row-major"""
        rows, cols = np.nonzero(self.snapshot == VISITED_SYMBOL)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def __eq__(self, other):
        return (isinstance(other, Solution)
                and self.loot == other.loot
                and self.items_looted == other.items_looted
                and self.steps == other.steps
                and self.finish == other.finish
                and np.array_equal(self.snapshot, other.snapshot))


class ZoneSolver:
    def __init__(self, game_map: GameMap, start: Optional[Position] = None,
                 verbose: bool = False, use_memo: bool = True):
        self.game_map = game_map
        self.start = start
        self.verbose = verbose
        self.use_memo = use_memo
        self.size = game_map.size
        self.memo: Set[StateKey] = set()
        self._reset()

    def _reset(self) -> None:
        self.optimal_loot = -1
        self.optimal_items_looted = -1
        self.optimal_steps = -1
        self.optimal_finish: Optional[Position] = None
        self.optimal_path: Optional[np.ndarray] = None
        self.memo = set()
        self.stats: Dict[str, int] = {
            'calls': 0,
            'out_of_bounds': 0,
            'memo_hits': 0,
            'finishes': 0,
            'improvements': 0,
            'starts_tried': 0,
            'memo_size': 0
        }

    # -------------------------------------------------------------------------
    # Main solving driver
    # -------------------------------------------------------------------------
    def solve(self) -> Optional[Solution]:
        """
        Search for the best path to the centre.

        Returns None when no path survives the closing zone. The map is left
        exactly as it was on return.
        """
        self._reset()

        if self.verbose:
            print(f"Starting zone search: {self.game_map}")

        if self.start is not None:
            row, col = self.start
            self.stats['starts_tried'] += 1
            self._explore(row, col, 0, 0, 0, 0)
            self.stats['memo_size'] = len(self.memo)
        else:
            if self.verbose:
                print("No start marker, trying every cell without loot")
            self._search_all_starts()

        if self.verbose:
            print("\n✓ Path found!" if self.optimal_loot != -1 else "\n✗ No path to solution")
            self._print_stats()

        return self._result()

    def _search_all_starts(self) -> None:
        """Try each non-loot cell as the start, keeping the best result overall."""
        cells = self.game_map.cells
        for row in range(self.size):
            for col in range(self.size):
                if cells[row, col] in LOOT_SYMBOLS:
                    continue

                saved = cells[row, col]
                self.memo = set()
                cells[row, col] = 'P'
                self.stats['starts_tried'] += 1
                try:
                    self._explore(row, col, 0, 0, 0, 0)
                finally:
                    cells[row, col] = saved
                self.stats['memo_size'] += len(self.memo)

    def _result(self) -> Optional[Solution]:
        if self.optimal_loot == -1:
            return None
        return Solution(
            loot=self.optimal_loot,
            items_looted=self.optimal_items_looted,
            steps=self.optimal_steps,
            finish=self.optimal_finish,
            snapshot=self.optimal_path.copy()
        )

    # -------------------------------------------------------------------------
    # Recursive search
    # -------------------------------------------------------------------------
    def _explore(self, row: int, col: int, boundary: int, loot: int,
                 items_looted: int, steps: int) -> None:
        self.stats['calls'] += 1

        if self.is_out_of_bounds(row, col, boundary):
            self.stats['out_of_bounds'] += 1
            return

        cells = self.game_map.cells
        symbol = cells[row, col]

        # Loot is counted per visit; the cell keeps its digit
        if symbol in LOOT_SYMBOLS:
            loot += int(symbol)
            items_looted += 1

        state = (row, col, boundary, loot, items_looted, steps)
        if self.use_memo and state in self.memo:
            self.stats['memo_hits'] += 1
            return

        if self.is_finished(row, col, boundary):
            self.stats['finishes'] += 1
            self._update_optimal_path(loot, steps, row, col, items_looted)
            return

        # A visited cell yields no loot if the path comes back to it
        if symbol not in START_SYMBOLS:
            cells[row, col] = VISITED_SYMBOL

        try:
            for d_row, d_col, d_steps in MOVES:
                self._explore(row + d_row, col + d_col, boundary + 1, loot,
                              items_looted, steps + d_steps)
        finally:
            cells[row, col] = symbol

        if self.use_memo:
            self.memo.add(state)

    # -------------------------------------------------------------------------
    # Zone predicates
    # -------------------------------------------------------------------------
    def is_out_of_bounds(self, row: int, col: int, boundary: int) -> bool:
        """True if (row, col) lies in the forbidden ring of width `boundary`."""
        limit = self.size - boundary
        return row >= limit or col >= limit or row <= boundary - 1 or col <= boundary - 1

    def is_finished(self, row: int, col: int, boundary: int) -> bool:
        """True once the zone has closed onto this single cell."""
        limit = self.size - boundary
        return ((row + 1) >= limit and (col + 1) >= limit
                and (row - 1) <= boundary - 1 and (col - 1) <= boundary - 1)

    # -------------------------------------------------------------------------
    # Best solution bookkeeping
    # -------------------------------------------------------------------------
    def _update_optimal_path(self, loot: int, steps: int, row: int, col: int,
                             items_looted: int) -> None:
        """Record a finish if it has more loot, or equal loot in fewer steps."""
        if loot > self.optimal_loot:
            self._update_optimal_data(loot, steps, row, col, items_looted)
        elif loot == self.optimal_loot and steps < self.optimal_steps:
            self._update_optimal_data(loot, steps, row, col, items_looted)

    def _update_optimal_data(self, loot: int, steps: int, row: int, col: int,
                             items_looted: int) -> None:
        self.optimal_loot = loot
        self.optimal_steps = steps
        self.optimal_items_looted = items_looted
        self.optimal_finish = (row, col)
        self.optimal_path = self.game_map.copy_cells()
        self.optimal_path[row, col] = FINISH_SYMBOL
        self.stats['improvements'] += 1

        if self.verbose:
            print(f"  New best: loot={loot} items={items_looted} steps={steps} at ({row},{col})")

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def _print_stats(self) -> None:
        """Print search statistics."""
        print("\nSearch Statistics:")
        print(f"  Starts tried: {self.stats['starts_tried']}")
        print(f"  Recursive calls: {self.stats['calls']}")
        print(f"  Out of bounds: {self.stats['out_of_bounds']}")
        print(f"  Memo hits: {self.stats['memo_hits']}")
        print(f"  Finishes: {self.stats['finishes']}")
        print(f"  Improvements: {self.stats['improvements']}")


def solve_map(game_map: GameMap, start: Optional[Position] = None, **kwargs) -> Optional[Solution]:
    """Solve a map from `start`, or from the map's own start marker if none is given."""
    if start is None:
        start = game_map.start
    return ZoneSolver(game_map, start=start, **kwargs).solve()
