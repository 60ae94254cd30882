"""パズルデータの整合性を確認するモジュール"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sudoku_engine.board import Board
    from sudoku_engine import sat_unique
else:
    try:
        # パッケージとして実行された場合の相対インポート
        from .board import Board
        from . import sat_unique
    except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
        from board import Board
        import sat_unique


def validate_puzzle(board: Board) -> None:
    """盤面がパズルとして成立しているか確認する

    重複がないこと、解が存在すること、解が一意であることを PySAT で調べる。
    条件を満たさない場合は ``ValueError`` を送出する。
    """

    conflicts = board.conflicting_cells()
    if conflicts:
        raise ValueError(f"同じユニットに重複した数字があります: {conflicts}")

    if sat_unique.solve_with_sat(board) is None:
        raise ValueError("解が存在しません")

    if not sat_unique.is_unique(board):
        raise ValueError("解が一意ではありません")


__all__ = ["validate_puzzle"]
