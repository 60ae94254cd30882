from pathlib import Path
import sys
from typing import List

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from sudoku_engine import sat_unique  # noqa: E402
from sudoku_engine.board import Board  # noqa: E402


def test_is_unique_classic(classic_puzzle: str) -> None:
    assert sat_unique.is_unique(Board.from_string(classic_puzzle))


def test_is_unique_empty_board() -> None:
    assert not sat_unique.is_unique(Board.empty())


def test_solve_with_sat(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    grid = sat_unique.solve_with_sat(board)
    assert grid is not None
    solved = Board(grid)
    assert solved.is_solved()
    for r in range(9):
        for c in range(9):
            if evil_puzzle[r][c]:
                assert grid[r][c] == evil_puzzle[r][c]
    # 盤面自体は変更されない
    assert board.grid == evil_puzzle


def test_solve_with_sat_unsolvable() -> None:
    board = Board.empty()
    for c, v in enumerate([1, 2, 3, 4, 5, 6, 7, 8]):
        board.set(0, c, v)
    board.set(1, 8, 9)
    assert sat_unique.solve_with_sat(board) is None
    assert not sat_unique.is_unique(board)
