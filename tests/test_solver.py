from pathlib import Path
import random
import sys
from typing import List

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from sudoku_engine import solver  # noqa: E402
from sudoku_engine.board import Board  # noqa: E402


def test_solve_classic_deterministic(classic_puzzle: str, classic_solution: str) -> None:
    board = Board.from_string(classic_puzzle)
    assert solver.solve(board, False)
    assert board.is_solved()
    assert board.to_string() == classic_solution
    # given は変わらない
    assert board.given_grid == Board.from_string(classic_puzzle).given_grid


def test_solve_evil_puzzle_randomized(evil_puzzle: List[List[int]]) -> None:
    board = Board(evil_puzzle)
    assert solver.solve(board, True, rng=random.Random(0))
    assert board.is_complete()
    assert board.is_solved()
    for r in range(9):
        for c in range(9):
            if evil_puzzle[r][c]:
                assert board.get(r, c) == evil_puzzle[r][c]


def test_solve_randomized_without_rng() -> None:
    # rng を渡さなくても新しい乱数生成器で完成盤面を作れる
    board = Board.empty()
    assert solver.solve(board, True)
    assert board.is_solved()


def test_solve_already_solved(classic_solution: str) -> None:
    board = Board.from_string(classic_solution)
    assert solver.solve(board)
    assert board.to_string() == classic_solution


def test_solve_unsolvable_leaves_board_untouched() -> None:
    grid = [[0] * 9 for _ in range(9)]
    grid[0][:8] = [1, 2, 3, 4, 5, 6, 7, 8]
    # (0, 8) に入るはずの 9 を同じ列に置いて解をなくす
    grid[1][8] = 9
    board = Board(grid)
    assert board.is_valid()
    before = board.grid
    assert not solver.solve(board)
    assert board.grid == before


def test_solve_rejects_board_with_duplicates() -> None:
    board = Board.empty()
    board.set(0, 0, 4)
    board.set(0, 5, 4)
    assert not solver.solve(board)
    assert solver.count_solutions(board) == 0


def test_solve_randomized_is_reproducible() -> None:
    first = Board.empty()
    second = Board.empty()
    assert solver.solve(first, True, rng=random.Random(42))
    assert solver.solve(second, True, rng=random.Random(42))
    assert first == second
    assert first.is_solved()


def test_count_solutions_solved_board(classic_solution: str) -> None:
    assert solver.count_solutions(Board.from_string(classic_solution)) == 1


def test_count_solutions_unique_puzzle(classic_puzzle: str) -> None:
    board = Board.from_string(classic_puzzle)
    assert solver.count_solutions(board) == 1
    assert solver.has_unique_solution(board)
    # 数えた後も盤面は元のまま
    assert board.to_string() == classic_puzzle.replace("0", ".")


def test_count_solutions_limit() -> None:
    board = Board.empty()
    assert solver.count_solutions(board, limit=2) == 2
    assert solver.count_solutions(board, limit=5) == 5
    assert not solver.has_unique_solution(board)


def test_count_solutions_stats(classic_puzzle: str) -> None:
    result = solver.count_solutions(
        Board.from_string(classic_puzzle), limit=2, return_stats=True
    )
    assert isinstance(result, tuple)
    count, stats = result
    assert count == 1
    assert stats["steps"] >= 1
    assert stats["max_depth"] >= 1


def test_count_solutions_step_limit() -> None:
    # 81 マスを埋める前にステップ上限で打ち切られる
    assert solver.count_solutions(Board.empty(), step_limit=10) == 0
