import json
from datetime import datetime
from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from .grid import GameMap, render_cells, LOOT_SYMBOLS, START_SYMBOLS, VISITED_SYMBOL, FINISH_SYMBOL
from .solver import Solution


# BGR tile colours for the path overlay
TILE_COLORS: Dict[str, Tuple[int, int, int]] = {
    'loot': (60, 200, 240),      # gold
    'start': (90, 190, 90),      # green
    'visited': (220, 160, 70),   # blue
    'finish': (70, 70, 220),     # red
    'terrain': (215, 215, 215),  # light gray
}


class SolutionFormatter:
    """Formats search results for output"""

    @staticmethod
    def format_original_map(game_map: GameMap) -> str:
        """Echo of the map as loaded"""
        return "\nOriginal map: \n" + game_map.render()

    @staticmethod
    def format_solution_human_readable(solution: Optional[Solution]) -> str:
        """
        Format the winning path and its counters as text
        """
        if solution is None:
            return "No path to solution."

        lines = []
        lines.append("\nOptimal path: ")
        lines.append(render_cells(solution.snapshot))
        lines.append(f"{solution.items_looted} item(s) looted")
        lines.append(f"{solution.loot} total loot collected")
        lines.append(f"{solution.steps} steps taken")

        return "\n".join(lines)

    @staticmethod
    def format_solution_json(game_map: GameMap, solution: Optional[Solution], stats: Dict) -> Dict:
        """
        Format result as JSON
        """
        result = {
            'map_info': {
                'size': game_map.size,
                'start': list(game_map.start) if game_map.start is not None else None,
                'loot_cells': len(game_map.loot_cells()),
                'total_loot': game_map.total_loot(),
                'solved': solution is not None,
                'timestamp': datetime.now().isoformat()
            },
            'search_stats': dict(stats),
            'solution': None
        }

        if solution is not None:
            result['solution'] = {
                'loot': solution.loot,
                'items_looted': solution.items_looted,
                'steps': solution.steps,
                'finish': {'row': solution.finish[0], 'col': solution.finish[1]},
                'visited': [{'row': r, 'col': c} for r, c in solution.path_cells()],
                'grid': ["".join(row) for row in solution.snapshot]
            }

        return result

    @staticmethod
    def _tile_color(symbol: str) -> Tuple[int, int, int]:
        if symbol == FINISH_SYMBOL:
            return TILE_COLORS['finish']
        if symbol == VISITED_SYMBOL:
            return TILE_COLORS['visited']
        if symbol in START_SYMBOLS:
            return TILE_COLORS['start']
        if symbol in LOOT_SYMBOLS:
            return TILE_COLORS['loot']
        return TILE_COLORS['terrain']

    @staticmethod
    def render_path_overlay(solution: Solution, cell_px: int = 48) -> np.ndarray:
        """
        Draw the snapshot as a tiled image.

        Args:
            solution: Search result to draw
            cell_px: Side of one map cell in pixels

        Returns:
            BGR image of shape (N*cell_px, N*cell_px, 3)
        """
        size = solution.snapshot.shape[0]
        image = np.full((size * cell_px, size * cell_px, 3), 255, dtype=np.uint8)

        for r in range(size):
            for c in range(size):
                symbol = str(solution.snapshot[r, c])
                x, y = c * cell_px, r * cell_px
                cv2.rectangle(image, (x, y), (x + cell_px - 1, y + cell_px - 1),
                              SolutionFormatter._tile_color(symbol), -1)
                cv2.rectangle(image, (x, y), (x + cell_px - 1, y + cell_px - 1), (40, 40, 40), 1)
                cv2.putText(image, symbol, (x + cell_px // 3, y + (2 * cell_px) // 3),
                            cv2.FONT_HERSHEY_SIMPLEX, cell_px / 64.0, (0, 0, 0), 1)

        return image

    @staticmethod
    def save_solution(game_map: GameMap, solution: Optional[Solution], stats: Dict, output_path: str):
        """
        Save result to JSON file
        """
        result = SolutionFormatter.format_solution_json(game_map, solution, stats)

        with open(output_path, 'w') as f:
            json.dump(result, f, indent=2)

        print(f"\n✓ Solution saved to: {output_path}")

    @staticmethod
    def save_human_readable(game_map: GameMap, solution: Optional[Solution], output_path: str):
        """
        Save human-readable result to text file
        """
        text = SolutionFormatter.format_original_map(game_map)
        text += "\n" + SolutionFormatter.format_solution_human_readable(solution)

        with open(output_path, 'w') as f:
            f.write(text + "\n")

        print(f"✓ Human-readable solution saved to: {output_path}")

    @staticmethod
    def save_path_overlay(solution: Solution, output_path: str, cell_px: int = 48):
        """
        Save the path overlay as an image file
        """
        image = SolutionFormatter.render_path_overlay(solution, cell_px)
        if not cv2.imwrite(output_path, image):
            raise IOError(f"could not write image: {output_path}")

        print(f"✓ Path overlay saved to: {output_path}")
