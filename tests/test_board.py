from pathlib import Path
import sys
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from sudoku_engine import board as board_mod  # noqa: E402
from sudoku_engine.board import Board, GivenCellError, OutOfRangeError  # noqa: E402


def test_round_trip_reads_puzzle(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    for r in range(9):
        for c in range(9):
            assert board.get(r, c) == evil_puzzle[r][c]
    assert board.grid == evil_puzzle
    assert board.given_grid == evil_puzzle


def test_constructor_deep_copies(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    evil_puzzle[0][1] = 4
    assert board.get(0, 1) == 0
    # grid プロパティもコピーを返す
    board.grid[0][1] = 4
    assert board.get(0, 1) == 0


def test_constructor_rejects_bad_shape() -> None:
    with pytest.raises(ValueError):
        Board([[0] * 9 for _ in range(8)])
    with pytest.raises(ValueError):
        Board([[0] * 8 for _ in range(9)])
    with pytest.raises(ValueError):
        Board([[10] + [0] * 8] + [[0] * 9 for _ in range(8)])


def test_set_and_clear(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    board.set(0, 1, 4)
    assert board.get(0, 1) == 4
    board.set(0, 1, 0)
    assert board.get(0, 1) == 0


def test_set_given_cell_raises(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    assert board.is_given(0, 0)
    assert not board.is_given(0, 1)
    with pytest.raises(GivenCellError):
        board.set(0, 0, 1)
    assert board.get(0, 0) == 8


@pytest.mark.parametrize("row,col", [(-1, 0), (0, 9), (9, 9), (3, -2)])
def test_set_out_of_range_coordinate(row: int, col: int) -> None:
    board = Board.empty()
    with pytest.raises(OutOfRangeError):
        board.set(row, col, 1)
    assert board.empty_count() == 81


def test_set_out_of_range_value() -> None:
    board = Board.empty()
    with pytest.raises(OutOfRangeError):
        board.set(0, 0, 10)
    with pytest.raises(ValueError):
        board.set(0, 0, -1)


def test_is_valid_placement(classic_puzzle: str) -> None:
    board = Board.from_string(classic_puzzle)
    # (0, 2) の正解は 4
    assert board.is_valid_placement(0, 2, 4)
    # 同じ行に 5 がある
    assert not board.is_valid_placement(0, 2, 5)
    # 同じ列に 8 がある
    assert not board.is_valid_placement(0, 2, 8)
    # 同じブロックに 9 がある
    assert not board.is_valid_placement(0, 2, 9)
    # 範囲外の値は例外ではなく False
    assert not board.is_valid_placement(0, 2, 0)
    assert not board.is_valid_placement(0, 2, 10)


def test_is_valid_placement_ignores_own_cell(classic_puzzle: str) -> None:
    board = Board.from_string(classic_puzzle)
    assert board.is_valid_placement(0, 0, 5)


def test_complete_and_solved(classic_solution: str) -> None:
    board = Board.from_string(classic_solution)
    assert board.is_complete()
    assert board.is_solved()
    assert board.is_valid()

    broken = Board.from_string("1" * 81)
    assert broken.is_complete()
    assert not broken.is_solved()
    assert not broken.is_valid()


def test_solved_board_has_each_digit_once_per_unit(classic_solution: str) -> None:
    board = Board.from_string(classic_solution)
    grid = board.grid
    digits = set(range(1, 10))
    for i in range(9):
        assert set(grid[i]) == digits
        assert {grid[r][i] for r in range(9)} == digits
        br, bc = (i // 3) * 3, (i % 3) * 3
        assert {grid[r][c] for r in range(br, br + 3) for c in range(bc, bc + 3)} == digits


def test_conflicting_cells() -> None:
    board = Board.empty()
    board.set(0, 0, 5)
    board.set(0, 8, 5)
    board.set(4, 4, 3)
    assert not board.is_valid()
    assert board.conflicting_cells() == [(0, 0), (0, 8)]


def test_conflict_in_block_only() -> None:
    board = Board.empty()
    board.set(0, 0, 7)
    board.set(1, 1, 7)
    assert board.conflicting_cells() == [(0, 0), (1, 1)]
    assert not board.is_valid_placement(1, 1, 7)


def test_candidates(classic_puzzle: str) -> None:
    board = Board.from_string(classic_puzzle)
    assert board.candidates(0, 2) == [1, 2, 4]
    # 埋まっているマスは空リスト
    assert board.candidates(0, 0) == []


def test_from_string_and_to_string(classic_puzzle: str) -> None:
    board = Board.from_string(classic_puzzle)
    assert board.to_string() == classic_puzzle.replace("0", ".")
    spaced = "\n".join(classic_puzzle[i : i + 9] for i in range(0, 81, 9))
    assert Board.from_string(spaced) == board
    with pytest.raises(ValueError):
        Board.from_string("123")
    with pytest.raises(ValueError):
        Board.from_string("x" * 81)


def test_copy_is_independent(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    board.set(0, 1, 4)
    clone = board.copy()
    assert clone == board
    assert clone.is_given(0, 0)
    assert not clone.is_given(0, 1)
    clone.set(0, 1, 0)
    assert board.get(0, 1) == 4


def test_from_grids_rejects_changed_given(evil_puzzle: List[List[int]]) -> None:
    working = [row[:] for row in evil_puzzle]
    working[0][0] = 1
    with pytest.raises(ValueError):
        Board.from_grids(working, evil_puzzle)


def test_to_array() -> None:
    board = Board.empty()
    board.set(2, 3, 9)
    arr = board.to_array()
    assert arr.shape == (9, 9)
    assert arr[2, 3] == 9
    assert int(arr.sum()) == 9


def test_module_exports() -> None:
    assert set(board_mod.__all__) == {"Board", "OutOfRangeError", "GivenCellError"}
    assert issubclass(OutOfRangeError, ValueError)
    assert issubclass(GivenCellError, ValueError)
