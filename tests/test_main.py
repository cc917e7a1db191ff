"""
Tests for the command line driver
=================================
"""

import sys

import pytest

from Royale import main as cli
from Royale.grid import MapInvalid


def write_map(directory, name, text):
    path = directory / name
    path.write_text(text)
    return path


def scripted_input(answers):
    """Stand-in for input() that replays answers, then hits end of input."""
    answers = iter(answers)

    def read_line(prompt):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError
    return read_line


# ==========================================
# SINGLE MAP
# ==========================================

def test_solve_file_prints_report(tmp_path, capsys):
    path = write_map(tmp_path, "map.txt", "xxxxx\nxp3xx\nx5x4x\nxxx9x\nxxxxx\n")

    solution = cli.solve_file(str(path))
    out = capsys.readouterr().out

    assert solution.loot == 5
    assert "Original map:" in out
    assert "Optimal path:" in out
    assert "5 total loot collected" in out
    assert "ms" in out


def test_solve_file_reports_no_path(tmp_path, capsys):
    path = write_map(tmp_path, "corner.txt", "p..\n...\n...\n")

    assert cli.solve_file(str(path)) is None
    assert "No path to solution." in capsys.readouterr().out


def test_solve_file_raises_for_missing_map(tmp_path):
    with pytest.raises(MapInvalid):
        cli.solve_file(str(tmp_path / "missing.txt"))


def test_solve_file_saves_outputs(tmp_path):
    path = write_map(tmp_path, "map.txt", "...\n.p.\n...\n")
    out_dir = tmp_path / "out"

    cli.solve_file(str(path), output_dir=str(out_dir), save_outputs=True)

    assert (out_dir / "solution.json").exists()
    assert (out_dir / "solution.txt").exists()
    assert (out_dir / "path.png").exists()


# ==========================================
# PROMPT LOOP
# ==========================================

def test_prompt_loop_reports_invalid_map_and_continues(tmp_path, capsys):
    good = write_map(tmp_path, "good.txt", "...\n.p.\n...\n")
    empty = write_map(tmp_path, "empty.txt", "")

    cli.run_prompt_loop(scripted_input([
        str(tmp_path / "missing.txt"),
        str(empty),
        str(good),
        "QuIt",
        str(good),
    ]))
    out = capsys.readouterr().out

    assert out.count("The map you chose is either empty or does not exist!") == 2
    # Only the map before "quit" was solved
    assert out.count("Optimal path:") == 1


def test_prompt_loop_quits_only_on_exact_word(tmp_path, capsys):
    good = write_map(tmp_path, "good.txt", "...\n.p.\n...\n")

    cli.run_prompt_loop(scripted_input([" quit ", str(good), "quit", str(good)]))
    out = capsys.readouterr().out

    # A padded "quit" is looked up as a file name and the loop keeps going
    assert out.count("The map you chose is either empty or does not exist!") == 1
    assert out.count("Optimal path:") == 1


def test_prompt_loop_uses_line_as_typed(tmp_path, monkeypatch, capsys):
    write_map(tmp_path, "good.txt", "...\n.p.\n...\n")
    monkeypatch.chdir(tmp_path)

    cli.run_prompt_loop(scripted_input(["good.txt ", "good.txt"]))
    out = capsys.readouterr().out

    assert out.count("The map you chose is either empty or does not exist!") == 1
    assert out.count("Optimal path:") == 1


def test_prompt_loop_stops_at_end_of_input(capsys):
    cli.run_prompt_loop(scripted_input([]))
    assert capsys.readouterr().out == ""


# ==========================================
# BATCH MODE
# ==========================================

def test_solve_all_maps_summary(tmp_path, capsys):
    write_map(tmp_path, "a_centre.txt", "...\n.p.\n...\n")
    write_map(tmp_path, "b_corner.txt", "p..\n...\n...\n")
    write_map(tmp_path, "c_empty.txt", "\n")

    results = cli.solve_all_maps(str(tmp_path))
    out = capsys.readouterr().out

    assert [r['file'] for r in results] == ["a_centre.txt", "b_corner.txt", "c_empty.txt"]
    assert [r['solved'] for r in results] == [True, False, False]
    assert [r['valid'] for r in results] == [True, True, False]
    assert "Solved: 1/3 maps" in out


def test_solve_all_maps_reports_time_per_map(tmp_path, capsys):
    write_map(tmp_path, "a_centre.txt", "...\n.p.\n...\n")
    write_map(tmp_path, "b_empty.txt", "")

    results = cli.solve_all_maps(str(tmp_path))
    out = capsys.readouterr().out
    summary = out.split("SUMMARY")[1]

    assert all(r['elapsed_ms'] >= 0 for r in results)
    assert "Solved: 1/2 maps in " in summary
    rows = [line for line in summary.splitlines() if line.startswith(("✓", "✗"))]
    assert len(rows) == 2
    assert all("ms - " in row for row in rows)


def test_solve_all_maps_missing_directory(tmp_path, capsys):
    assert cli.solve_all_maps(str(tmp_path / "nope")) == []
    assert "Directory not found" in capsys.readouterr().out


# ==========================================
# ENTRY POINT
# ==========================================

def test_main_with_map_argument(tmp_path, monkeypatch, capsys):
    path = write_map(tmp_path, "map.txt", "...\n.p.\n...\n")
    monkeypatch.setattr(sys, "argv", ["royale", str(path)])

    cli.main()

    assert "0 steps taken" in capsys.readouterr().out


def test_main_with_missing_file_exits(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["royale", str(tmp_path / "missing.txt")])

    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1


def test_main_with_empty_file_prints_banner(tmp_path, monkeypatch, capsys):
    path = write_map(tmp_path, "empty.txt", "")
    monkeypatch.setattr(sys, "argv", ["royale", str(path)])

    cli.main()

    assert "either empty or does not exist" in capsys.readouterr().out
