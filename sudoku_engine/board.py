"""9x9 盤面と初期配置 (given) を保持するモジュール"""

from __future__ import annotations

from typing import List, Sequence, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from sudoku_engine.constants import BOX, SIZE
    from sudoku_engine.candidates import candidate_masks, conflict_map, mask_to_values
    from sudoku_engine.puzzle_types import Cell, Grid
else:
    try:
        # パッケージとして実行された場合の相対インポート
        from .constants import BOX, SIZE
        from .candidates import candidate_masks, conflict_map, mask_to_values
        from .puzzle_types import Cell, Grid
    except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
        from constants import BOX, SIZE
        from candidates import candidate_masks, conflict_map, mask_to_values
        from puzzle_types import Cell, Grid


class OutOfRangeError(ValueError):
    """座標や数字が盤面の範囲外のときに送出する例外"""


class GivenCellError(ValueError):
    """初期配置のマスを書き換えようとしたときに送出する例外"""


def _check_grid(puzzle: Sequence[Sequence[int]]) -> None:
    """9x9 かつ各値が 0..9 か確認する"""

    if len(puzzle) != SIZE:
        raise ValueError(f"盤面の行数が {SIZE} ではありません: {len(puzzle)}")
    for r, row in enumerate(puzzle):
        if len(row) != SIZE:
            raise ValueError(f"{r} 行目の列数が {SIZE} ではありません: {len(row)}")
        for value in row:
            if not isinstance(value, (int, np.integer)) or not 0 <= value <= SIZE:
                raise ValueError(f"{r} 行目に不正な値があります: {value!r}")


def _check_cell(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise OutOfRangeError(f"座標 ({row}, {col}) は盤面の外です")


class Board:
    """現在の盤面 ``working`` と初期配置 ``given`` を持つクラス

    ``given`` は生成時に固定され、``set`` では given のマスを変更できない。
    ソルバーが内部でコピーを使う場合はこの制約の対象外。
    """

    def __init__(self, puzzle: Sequence[Sequence[int]]) -> None:
        _check_grid(puzzle)
        # 呼び出し元の配列と共有しないよう両方をディープコピーする
        self._working: Grid = [[int(v) for v in row] for row in puzzle]
        self._given: Grid = [[int(v) for v in row] for row in puzzle]

    @classmethod
    def empty(cls) -> "Board":
        """空マスだけの盤面を作る"""
        return cls([[0] * SIZE for _ in range(SIZE)])

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """81 文字の文字列から盤面を作る。``0`` と ``.`` は空マス"""

        chars = [ch for ch in text if not ch.isspace()]
        if len(chars) != SIZE * SIZE:
            raise ValueError(f"81 文字が必要です: {len(chars)} 文字")
        values: List[int] = []
        for ch in chars:
            if ch == ".":
                values.append(0)
            elif ch.isdigit():
                values.append(int(ch))
            else:
                raise ValueError(f"不正な文字です: {ch!r}")
        return cls([values[r * SIZE : (r + 1) * SIZE] for r in range(SIZE)])

    @classmethod
    def from_grids(cls, working: Grid, given: Grid) -> "Board":
        """保存済みの 2 つの配列から盤面を復元する"""

        _check_grid(given)
        board = cls(working)
        board._given = [[int(v) for v in row] for row in given]
        for r in range(SIZE):
            for c in range(SIZE):
                if board._given[r][c] != 0 and board._working[r][c] != board._given[r][c]:
                    raise ValueError(f"given のマス ({r}, {c}) の値が一致しません")
        return board

    def get(self, row: int, col: int) -> int:
        _check_cell(row, col)
        return self._working[row][col]

    def set(self, row: int, col: int, value: int) -> None:
        """マスに数字を書き込む。0 を書くと空マスに戻す"""

        _check_cell(row, col)
        if not 0 <= value <= SIZE:
            raise OutOfRangeError(f"値 {value} は 0..{SIZE} の範囲外です")
        if self._given[row][col] != 0:
            raise GivenCellError(f"({row}, {col}) は初期配置のマスです")
        self._working[row][col] = value

    def is_given(self, row: int, col: int) -> bool:
        _check_cell(row, col)
        return self._given[row][col] != 0

    def is_valid_placement(self, row: int, col: int, value: int) -> bool:
        """(row, col) に value を置いても行・列・ブロックで重複しないか"""

        _check_cell(row, col)
        if not 1 <= value <= SIZE:
            return False
        grid = self._working
        for c in range(SIZE):
            if c != col and grid[row][c] == value:
                return False
        for r in range(SIZE):
            if r != row and grid[r][col] == value:
                return False
        # 同じ行・列のマスは上のチェックで済んでいるのでブロック内の残りだけ見る
        start_r = row - row % BOX
        start_c = col - col % BOX
        for r in range(start_r, start_r + BOX):
            for c in range(start_c, start_c + BOX):
                if r != row and c != col and grid[r][c] == value:
                    return False
        return True

    def is_complete(self) -> bool:
        return all(v != 0 for row in self._working for v in row)

    def is_solved(self) -> bool:
        """全マスが埋まり、どのマスも重複なく置かれているか"""

        if not self.is_complete():
            return False
        for r in range(SIZE):
            for c in range(SIZE):
                if not self.is_valid_placement(r, c, self._working[r][c]):
                    return False
        return True

    def is_valid(self) -> bool:
        """埋まっているマス同士で重複がなければ True"""
        return not conflict_map(self.to_array()).any()

    def conflicting_cells(self) -> List[Cell]:
        """重複に関わっているマスの座標を行優先で返す"""
        conflicts = conflict_map(self.to_array())
        return [(int(r), int(c)) for r, c in zip(*np.nonzero(conflicts))]

    def candidates(self, row: int, col: int) -> List[int]:
        """空マスに置ける数字の一覧。埋まっているマスは空リスト"""

        _check_cell(row, col)
        if self._working[row][col] != 0:
            return []
        masks = candidate_masks(self.to_array())
        return mask_to_values(int(masks[row, col]))

    def empty_count(self) -> int:
        return sum(1 for row in self._working for v in row if v == 0)

    def copy(self) -> "Board":
        """working と given の両方を保ったままコピーする"""
        return Board.from_grids(self.grid, self.given_grid)

    @property
    def grid(self) -> Grid:
        return [row[:] for row in self._working]

    @property
    def given_grid(self) -> Grid:
        return [row[:] for row in self._given]

    def to_array(self) -> np.ndarray:
        return np.array(self._working, dtype=np.int8)

    def to_string(self) -> str:
        return "".join(str(v) if v else "." for row in self._working for v in row)

    def _load_solution(self, grid: Grid) -> None:
        # ソルバーが見つけた解を書き戻す。given のマスは同じ値なので変わらない
        for r in range(SIZE):
            self._working[r][:] = grid[r]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._working == other._working and self._given == other._given

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"


__all__ = ["Board", "OutOfRangeError", "GivenCellError"]
