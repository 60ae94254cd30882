# 数独用バックトラックソルバーモジュール

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from sudoku_engine.board import Board
    from sudoku_engine.constants import DIGITS, FULL_MASK, SIZE
    from sudoku_engine.puzzle_types import Cell, Grid
else:
    try:
        # パッケージとして実行された場合の相対インポート
        from .board import Board
        from .constants import DIGITS, FULL_MASK, SIZE
        from .puzzle_types import Cell, Grid
    except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
        from board import Board
        from constants import DIGITS, FULL_MASK, SIZE
        from puzzle_types import Cell, Grid

logger = logging.getLogger(__name__)


def _box(r: int, c: int) -> int:
    return (r // 3) * 3 + c // 3


@dataclass
class SearchState:
    """探索中の盤面と使用済み数字のマスクを保持するデータクラス"""

    grid: Grid
    rows: List[int]
    cols: List[int]
    boxes: List[int]

    def place(self, r: int, c: int, value: int) -> None:
        bit = 1 << value
        self.grid[r][c] = value
        self.rows[r] |= bit
        self.cols[c] |= bit
        self.boxes[_box(r, c)] |= bit

    def clear(self, r: int, c: int, value: int) -> None:
        bit = ~(1 << value)
        self.grid[r][c] = 0
        self.rows[r] &= bit
        self.cols[c] &= bit
        self.boxes[_box(r, c)] &= bit

    def allowed(self, r: int, c: int) -> int:
        """(r, c) に置ける数字のビットマスク"""
        return FULL_MASK & ~(self.rows[r] | self.cols[c] | self.boxes[_box(r, c)])


def _init_state(board: Board) -> Optional[SearchState]:
    """盤面をコピーして SearchState を作る。既に重複があれば None"""

    state = SearchState(board.grid, [0] * SIZE, [0] * SIZE, [0] * SIZE)
    for r in range(SIZE):
        for c in range(SIZE):
            v = state.grid[r][c]
            if v == 0:
                continue
            bit = 1 << v
            if (state.rows[r] | state.cols[c] | state.boxes[_box(r, c)]) & bit:
                return None
            state.place(r, c, v)
    return state


def _empty_cells(state: SearchState) -> List[Cell]:
    """空マスを行優先の順で列挙する"""
    return [(r, c) for r in range(SIZE) for c in range(SIZE) if state.grid[r][c] == 0]


def solve(
    board: Board,
    randomize: bool = False,
    *,
    rng: random.Random | None = None,
) -> bool:
    """深さ優先のバックトラックで盤面を解く

    行優先で最初の空マスを分岐点にし、1..9 を順に試す。``randomize`` が
    True のときは候補の順序を ``rng`` でシャッフルする (盤面生成用)。

    探索は盤面のコピー上で行い、解が見つかったときだけ ``board`` の
    working に書き戻す。解がない場合 ``board`` は変更されない。

    :param board: 解く盤面。成功時はその場で解に置き換わる
    :param randomize: 候補数字の順序をランダムにするか
    :param rng: シャッフルに使う ``random.Random``。None なら新しく作る
    :return: 解が見つかったら True
    """

    state = _init_state(board)
    if state is None:
        logger.debug("盤面に重複があるため解けません")
        return False
    # シャッフル用の乱数生成器。randomize が False なら使わない
    shuffle_rng = rng if rng is not None else random.Random()

    # 空マスは行優先に並べておく。探索中は先頭から順に埋まるので
    # idx 番目が常に「最初の空マス」になる
    empties = _empty_cells(state)

    def dfs(idx: int) -> bool:
        if idx == len(empties):
            return True
        r, c = empties[idx]
        numbers = list(DIGITS)
        if randomize:
            shuffle_rng.shuffle(numbers)
        allowed = state.allowed(r, c)
        for num in numbers:
            if not allowed & (1 << num):
                continue
            state.place(r, c, num)
            if dfs(idx + 1):
                return True
            state.clear(r, c, num)
        return False

    if not dfs(0):
        return False
    board._load_solution(state.grid)
    return True


def count_solutions(
    board: Board,
    *,
    limit: int | None = None,
    return_stats: bool = False,
    step_limit: int | None = None,
) -> int | tuple[int, Dict[str, int]]:
    """バックトラックで解の個数を数える

    ``limit`` を指定すると、その個数に達した時点で探索を打ち切る。
    一意性だけを知りたい場合は ``limit=2`` で十分。分岐には候補が最も
    少ない空マスを選ぶ。探索順は速度にだけ影響し、個数は変わらない。

    :param limit: 数える解の上限。None なら全解を数える
    :param return_stats: True なら ``(個数, 統計)`` を返す
    :param step_limit: 探索ノード数の上限。超えたらその時点の個数を返す
    """

    solutions = 0
    steps = 0
    max_depth = 0

    state = _init_state(board)
    if state is None:
        if return_stats:
            return 0, {"steps": 0, "max_depth": 0}
        return 0

    empties = _empty_cells(state)

    def dfs(depth: int) -> None:
        nonlocal solutions, steps, max_depth
        steps += 1
        if depth > max_depth:
            max_depth = depth
        if step_limit is not None and steps > step_limit:
            return
        if limit is not None and solutions >= limit:
            return

        # 候補が最も少ない空マスを探す
        best: Cell | None = None
        best_mask = 0
        best_count = SIZE + 1
        for r, c in empties:
            if state.grid[r][c] != 0:
                continue
            mask = state.allowed(r, c)
            count = mask.bit_count()
            if count == 0:
                # 置ける数字がないので行き止まり
                return
            if count < best_count:
                best, best_mask, best_count = (r, c), mask, count
                if count == 1:
                    break
        if best is None:
            # すべての空マスが埋まったので解を 1 つ見つけた
            solutions += 1
            return

        r, c = best
        for num in DIGITS:
            if not best_mask & (1 << num):
                continue
            state.place(r, c, num)
            dfs(depth + 1)
            state.clear(r, c, num)
            if limit is not None and solutions >= limit:
                return

    dfs(0)
    if step_limit is not None and steps > step_limit:
        logger.debug("探索ステップ上限 %d に達しました", step_limit)
    if return_stats:
        return solutions, {"steps": steps, "max_depth": max_depth}
    return solutions


def has_unique_solution(board: Board) -> bool:
    """解がちょうど 1 つなら True"""
    return count_solutions(board, limit=2) == 1


__all__ = ["SearchState", "solve", "count_solutions", "has_unique_solution"]
