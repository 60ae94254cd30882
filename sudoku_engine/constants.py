"""盤面サイズや難易度プリセットなど共通定数をまとめたモジュール"""

from __future__ import annotations

# 9x9 盤面と 3x3 ブロックを前提とする
SIZE = 9
BOX = 3

# セルに置ける数字。0 は空マスを表す
DIGITS = tuple(range(1, SIZE + 1))

# 1..9 のビットを立てたマスク (bit0 は使わない)
FULL_MASK = 0b1111111110

# New Game ボタンごとの削除マス数
DIFFICULTY_REMOVALS = {
    "easy": 40,
    "medium": 50,
    "hard": 60,
}


def _evaluate_difficulty(steps: int, depth: int) -> str:
    """解の個数探索の統計から難易度を推定する関数"""

    # 探索ノード数とバックトラック深さから判断する
    if steps < 100 and depth <= 45:
        return "easy"
    if steps < 1000:
        return "medium"
    if steps < 10000:
        return "hard"
    return "expert"


__all__ = [
    "SIZE",
    "BOX",
    "DIGITS",
    "FULL_MASK",
    "DIFFICULTY_REMOVALS",
    "_evaluate_difficulty",
]
