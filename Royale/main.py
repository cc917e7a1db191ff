#!/usr/bin/env python3
"""
Battle Royale Solver - Main Entry Point

Usage:
    python -m Royale.main                  # Interactive prompt, "quit" to exit
    python -m Royale.main maps/map1.txt    # Solve a single map
    python -m Royale.main --all [maps/]    # Solve every .txt map in a directory
"""

import os
import sys
import time
import traceback
from pathlib import Path
from typing import Callable, Optional

from .grid import MapInvalid, load_map
from .solver import Solution, ZoneSolver
from .output import SolutionFormatter

# ============================================================================
# CONFIGURATION
# ============================================================================
MAP_DIR = "maps"            # Directory scanned by --all
OUTPUT_DIR = "output"       # Base output directory for saved results
SAVE_OUTPUTS = False        # Write solution.json / solution.txt / path.png per map
VERBOSE = False             # Print search progress and statistics

USE_MEMO = True
# Skip re-exploring a search state seen before on the current start.
# The key ignores visited marks, so a pruned state can hide a richer path;
# False searches every branch and may report more loot
# ============================================================================

PROMPT = '\nEnter the text file name (Type "quit" to quit): '

INVALID_MAP_BANNER = (
    "\n***************************************************************\n"
    "*\tThe map you chose is either empty or does not exist!      *\n"
    "***************************************************************"
)


def solve_file(map_path: str, output_dir: Optional[str] = None,
               save_outputs: bool = SAVE_OUTPUTS,
               verbose: bool = VERBOSE,
               use_memo: bool = USE_MEMO) -> Optional[Solution]:
    """
    Load, solve and report a single map.

    Args:
        map_path: Path to the map text file
        output_dir: Directory for output files (default: output/<map_name>/)
        save_outputs: Write JSON, text and image results to output_dir
        verbose: Print search progress
        use_memo: Enable search state memoization

    Raises:
        MapInvalid: the map file is missing, empty or malformed
    """
    game_map = load_map(map_path)
    print(SolutionFormatter.format_original_map(game_map))

    solver = ZoneSolver(game_map, start=game_map.start, verbose=verbose, use_memo=use_memo)
    start = time.perf_counter()
    solution = solver.solve()
    elapsed_ms = (time.perf_counter() - start) * 1000

    print(SolutionFormatter.format_solution_human_readable(solution))
    print(f"{elapsed_ms:.0f}ms")

    if save_outputs:
        if output_dir is None:
            output_dir = Path(OUTPUT_DIR) / Path(map_path).stem
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        SolutionFormatter.save_solution(game_map, solution, solver.stats, str(output_dir / "solution.json"))
        SolutionFormatter.save_human_readable(game_map, solution, str(output_dir / "solution.txt"))
        if solution is not None:
            SolutionFormatter.save_path_overlay(solution, str(output_dir / "path.png"))

    return solution


def run_prompt_loop(read_line: Callable[[str], str] = input, **kwargs) -> None:
    """
    Ask for map files until the user types "quit".

    Invalid maps print a banner and the loop carries on. Lines are used as
    typed, so surrounding spaces are part of the file name.
    """
    while True:
        try:
            map_path = read_line(PROMPT)
        except EOFError:
            break

        if map_path.lower() == "quit":
            break

        try:
            solve_file(map_path, **kwargs)
        except MapInvalid:
            print(INVALID_MAP_BANNER)


def solve_all_maps(map_dir: Optional[str] = None, **kwargs):
    """
    Solve all .txt maps in map_dir (default: MAP_DIR)
    """
    if map_dir is None:
        map_dir = MAP_DIR

    map_path = Path(map_dir)
    if not map_path.exists():
        print(f"Error: Directory not found: {map_dir}")
        return []

    map_files = sorted(map_path.glob("*.txt"))
    if not map_files:
        print(f"No maps found in {map_dir}")
        return []

    print(f"\nFound {len(map_files)} map(s) to solve")

    results = []

    for i, map_file in enumerate(map_files, 1):
        print(f"\n[{i}/{len(map_files)}] Solving {map_file.name}...")

        result = {'file': map_file.name, 'valid': True, 'solved': False,
                  'loot': None, 'steps': None, 'elapsed_ms': 0.0}
        started = time.perf_counter()
        try:
            solution = solve_file(str(map_file), **kwargs)
        except MapInvalid as e:
            print(f"  ✗ Invalid map: {e}")
            result['valid'] = False
        except Exception as e:
            print(f"\nError while solving {map_file}: {e}")
            traceback.print_exc()
            result['valid'] = False
        else:
            if solution is not None:
                result.update(solved=True, loot=solution.loot, steps=solution.steps)
        finally:
            result['elapsed_ms'] = (time.perf_counter() - started) * 1000

        results.append(result)

    # ---------------------------
    # Print summary
    # ---------------------------
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    solved_count = sum(1 for r in results if r['solved'])
    total_ms = sum(r['elapsed_ms'] for r in results)
    print(f"Solved: {solved_count}/{len(results)} maps in {total_ms:.0f}ms")
    print(f"{'='*60}\n")

    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s} {r['elapsed_ms']:>7.0f}ms", end="")
        if r['solved']:
            print(f" - loot {r['loot']}, {r['steps']} steps")
        elif not r['valid']:
            print(" - invalid map")
        else:
            print(" - no path")

    return results


def main():
    """Main entry point"""

    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Batch mode
        if command == "--all" or command == "-a":
            map_dir = sys.argv[2] if len(sys.argv) > 2 else MAP_DIR
            solve_all_maps(map_dir, save_outputs=SAVE_OUTPUTS, verbose=VERBOSE)
            return

        # Solve specific map
        if not os.path.exists(command):
            print(f"Error: File not found: {command}")
            sys.exit(1)

        try:
            solve_file(command)
        except MapInvalid:
            print(INVALID_MAP_BANNER)
        return

    run_prompt_loop()


if __name__ == "__main__":
    main()
