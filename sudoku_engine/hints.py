"""探索を使わずに次の一手 (ヒント) を見つけるモジュール

候補数字は呼び出しのたびに盤面から計算し直す。以前のヒントや
消去した候補は覚えておかないため、同じ盤面には同じヒントを返す。
盤面は読むだけで変更しない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from sudoku_engine.board import Board
    from sudoku_engine.candidates import candidate_masks, mask_to_values
    from sudoku_engine.constants import BOX, DIGITS, SIZE
    from sudoku_engine.puzzle_types import Cell
else:
    try:
        # パッケージとして実行された場合の相対インポート
        from .board import Board
        from .candidates import candidate_masks, mask_to_values
        from .constants import BOX, DIGITS, SIZE
        from .puzzle_types import Cell
    except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
        from board import Board
        from candidates import candidate_masks, mask_to_values
        from constants import BOX, DIGITS, SIZE
        from puzzle_types import Cell

logger = logging.getLogger(__name__)

PLACEMENT = "placement"
ELIMINATION = "elimination"

NAKED_SINGLE = "Naked Single"
POINTING = "Locked Candidates (Pointing)"
CLAIMING = "Locked Candidates (Claiming)"


@dataclass(frozen=True)
class UnitRef:
    """消去ヒントが指す行または列"""

    kind: str  # "row" または "column"
    index: int

    def __post_init__(self) -> None:
        if self.kind not in ("row", "column"):
            raise ValueError(f"kind は row か column で指定してください: {self.kind}")
        if not 0 <= self.index < SIZE:
            raise ValueError(f"index が範囲外です: {self.index}")


@dataclass(frozen=True)
class Placement:
    """(row, col) に value を置けることを示すヒント"""

    row: int
    col: int
    value: int
    technique: str

    kind: ClassVar[str] = PLACEMENT

    @property
    def explanation(self) -> str:
        return f"Place {self.value} at R{self.row + 1}C{self.col + 1}."


@dataclass(frozen=True)
class Elimination:
    """候補 value をブロックの外 (または中) から消せることを示すヒント

    ``targets`` は候補を消せるマスの一覧。配置するマスは示さない。
    """

    unit: UnitRef
    value: int
    technique: str
    explanation: str
    block: int
    targets: Tuple[Cell, ...]

    kind: ClassVar[str] = ELIMINATION


Hint = Union[Placement, Elimination]


def _block_origin(block: int) -> Cell:
    return (block // BOX) * BOX, (block % BOX) * BOX


def _block_cells(block: int) -> List[Cell]:
    rs, cs = _block_origin(block)
    return [(r, c) for r in range(rs, rs + BOX) for c in range(cs, cs + BOX)]


def _block_label(block: int) -> str:
    rs, cs = _block_origin(block)
    return f"Block R{rs + 1}-R{rs + BOX} C{cs + 1}-C{cs + BOX}"


# 隠れたシングルを探すユニットの順序: 行 -> 列 -> ブロック
_UNITS: List[Tuple[str, List[Cell]]] = (
    [("Row", [(r, c) for c in range(SIZE)]) for r in range(SIZE)]
    + [("Column", [(r, c) for r in range(SIZE)]) for c in range(SIZE)]
    + [("Block", _block_cells(b)) for b in range(SIZE)]
)


def _admits(masks: np.ndarray, cell: Cell, value: int) -> bool:
    # 埋まっているマスのマスクは 0 なので空マスかどうかも兼ねる
    return bool(masks[cell] & (1 << value))


def candidate_grid(board: Board) -> List[List[List[int]]]:
    """全マスの候補数字を 9x9 のリストで返す。埋まっているマスは空リスト"""
    masks = candidate_masks(board.to_array())
    return [[mask_to_values(int(masks[r, c])) for c in range(SIZE)] for r in range(SIZE)]


def _find_naked_single(masks: np.ndarray) -> Optional[Placement]:
    """候補が 1 つしかない空マスを行優先で探す"""
    for r in range(SIZE):
        for c in range(SIZE):
            mask = int(masks[r, c])
            if mask and mask.bit_count() == 1:
                return Placement(r, c, mask.bit_length() - 1, NAKED_SINGLE)
    return None


def _find_hidden_single(grid: np.ndarray, masks: np.ndarray) -> Optional[Placement]:
    """ユニット内で 1 マスにしか入らない数字を探す"""
    for label, cells in _UNITS:
        present = {int(grid[cell]) for cell in cells}
        for value in DIGITS:
            if value in present:
                continue
            spots = [cell for cell in cells if _admits(masks, cell, value)]
            if len(spots) == 1:
                r, c = spots[0]
                return Placement(r, c, value, f"Hidden Single ({label})")
    return None


def _find_pointing(masks: np.ndarray) -> Optional[Elimination]:
    """ブロック内で候補が 1 行 (1 列) に閉じている場合の消去を探す"""
    for block in range(SIZE):
        rs, cs = _block_origin(block)
        cells = _block_cells(block)
        for value in DIGITS:
            spots = [cell for cell in cells if _admits(masks, cell, value)]
            if len(spots) < 2:
                continue

            rows = {r for r, _ in spots}
            if len(rows) == 1:
                row = spots[0][0]
                targets = tuple(
                    (row, c)
                    for c in range(SIZE)
                    if not cs <= c < cs + BOX and _admits(masks, (row, c), value)
                )
                if targets:
                    explanation = (
                        f"{POINTING}: Candidate {value} is confined to Row {row + 1} "
                        f"in {_block_label(block)}. Therefore, {value} can be "
                        f"eliminated from all other candidate cells in Row {row + 1} "
                        "outside this block."
                    )
                    return Elimination(
                        UnitRef("row", row), value, POINTING, explanation, block, targets
                    )

            cols = {c for _, c in spots}
            if len(cols) == 1:
                col = spots[0][1]
                targets = tuple(
                    (r, col)
                    for r in range(SIZE)
                    if not rs <= r < rs + BOX and _admits(masks, (r, col), value)
                )
                if targets:
                    explanation = (
                        f"{POINTING}: Candidate {value} is confined to Column {col + 1} "
                        f"in {_block_label(block)}. Therefore, {value} can be "
                        f"eliminated from all other candidate cells in Column {col + 1} "
                        "outside this block."
                    )
                    return Elimination(
                        UnitRef("column", col), value, POINTING, explanation, block, targets
                    )
    return None


def _find_claiming(masks: np.ndarray) -> Optional[Elimination]:
    """行 (列) の候補が 1 ブロックに閉じている場合の消去を探す"""

    # 行 -> 列の順で調べる
    for kind in ("row", "column"):
        for index in range(SIZE):
            if kind == "row":
                line = [(index, c) for c in range(SIZE)]
            else:
                line = [(r, index) for r in range(SIZE)]
            for value in DIGITS:
                spots = [cell for cell in line if _admits(masks, cell, value)]
                if len(spots) < 2:
                    continue
                blocks = {(r // BOX) * BOX + c // BOX for r, c in spots}
                if len(blocks) != 1:
                    continue
                block = blocks.pop()
                targets = tuple(
                    cell
                    for cell in _block_cells(block)
                    if cell not in line and _admits(masks, cell, value)
                )
                if not targets:
                    continue
                name = "Row" if kind == "row" else "Column"
                # 行ならブロック列、列ならブロック行の番号で閉じたブロックを示す
                if kind == "row":
                    band = f"C{block % BOX + 1}"
                else:
                    band = f"R{block // BOX + 1}"
                explanation = (
                    f"{CLAIMING}: Candidate {value} is confined to {name} {index + 1} "
                    f"in Block {band}. Therefore, {value} can be eliminated from the "
                    f"other candidate cells in {_block_label(block)} that are not in "
                    f"{name} {index + 1}."
                )
                return Elimination(
                    UnitRef(kind, index), value, CLAIMING, explanation, block, targets
                )
    return None


def get_next_hint(board: Board) -> Optional[Hint]:
    """最も簡単な論理的な一手を返す

    Naked Single -> Hidden Single -> Locked Candidates (Pointing)
    -> Locked Candidates (Claiming) の順で調べ、最初に見つかったものを返す。
    どれも見つからなければ None (全探索が必要)。
    """

    grid = board.to_array()
    masks = candidate_masks(grid)

    hint: Optional[Hint] = _find_naked_single(masks)
    if hint is None:
        hint = _find_hidden_single(grid, masks)
    if hint is None:
        hint = _find_pointing(masks)
    if hint is None:
        hint = _find_claiming(masks)

    if hint is None:
        logger.debug("論理的なヒントが見つかりません")
    else:
        logger.debug("ヒント: %s (%s)", hint.technique, hint.explanation)
    return hint


__all__ = [
    "PLACEMENT",
    "ELIMINATION",
    "UnitRef",
    "Placement",
    "Elimination",
    "Hint",
    "candidate_grid",
    "get_next_hint",
]
