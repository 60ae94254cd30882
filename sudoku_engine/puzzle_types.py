"""共通で使う型エイリアスをまとめたモジュール

Python 標準ライブラリの ``types`` モジュールと名前が衝突しないよう、
このファイル名を ``puzzle_types`` としている。
"""

from typing import List, Tuple

# 9x9 の数字配列。0 は空マス
Grid = List[List[int]]

# (row, col) の座標
Cell = Tuple[int, int]

__all__ = ["Grid", "Cell"]
