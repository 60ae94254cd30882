"""候補数字をビットマスクで高速計算するモジュール

盤面は ``np.int8`` の 9x9 配列として受け取り、数字 ``v`` の有無を
``1 << v`` のビットで表す。Numba でコンパイルしてヒント探索の
繰り返し計算を速くしている。
"""

from __future__ import annotations

from typing import List

import numpy as np
from numba import njit

try:
    from .constants import FULL_MASK
except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
    from constants import FULL_MASK


@njit(cache=True)
def _unit_masks(grid: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """行・列・ブロックごとに使用済み数字のマスクを作る"""

    rows = np.zeros(9, dtype=np.int32)
    cols = np.zeros(9, dtype=np.int32)
    boxes = np.zeros(9, dtype=np.int32)
    for r in range(9):
        for c in range(9):
            v = grid[r, c]
            if v != 0:
                bit = 1 << v
                rows[r] |= bit
                cols[c] |= bit
                boxes[(r // 3) * 3 + c // 3] |= bit
    return rows, cols, boxes


@njit(cache=True)
def _candidate_masks(grid: np.ndarray) -> np.ndarray:
    """空マスごとの候補マスクを返す。埋まっているマスは 0"""

    rows, cols, boxes = _unit_masks(grid)
    masks = np.zeros((9, 9), dtype=np.int32)
    for r in range(9):
        for c in range(9):
            if grid[r, c] == 0:
                used = rows[r] | cols[c] | boxes[(r // 3) * 3 + c // 3]
                masks[r, c] = FULL_MASK & ~used
    return masks


@njit(cache=True)
def _conflict_map(grid: np.ndarray) -> np.ndarray:
    """同じユニット内で数字が重複しているマスに 1 を立てた配列を返す"""

    conflicts = np.zeros((9, 9), dtype=np.uint8)
    for r in range(9):
        for c in range(9):
            v = grid[r, c]
            if v == 0:
                continue
            for k in range(9):
                if k != c and grid[r, k] == v:
                    conflicts[r, c] = 1
                if k != r and grid[k, c] == v:
                    conflicts[r, c] = 1
            br = (r // 3) * 3
            bc = (c // 3) * 3
            for rr in range(br, br + 3):
                for cc in range(bc, bc + 3):
                    if (rr != r or cc != c) and grid[rr, cc] == v:
                        conflicts[r, c] = 1
    return conflicts


def mask_to_values(mask: int) -> List[int]:
    """ビットマスクを昇順の数字リストへ変換する"""
    return [v for v in range(1, 10) if mask & (1 << v)]


def candidate_masks(grid: np.ndarray) -> np.ndarray:
    """``_candidate_masks`` の公開ラッパー。dtype を揃えてから呼び出す"""
    return _candidate_masks(np.ascontiguousarray(grid, dtype=np.int8))


def conflict_map(grid: np.ndarray) -> np.ndarray:
    """``_conflict_map`` の公開ラッパー"""
    return _conflict_map(np.ascontiguousarray(grid, dtype=np.int8))


def _warmup_numba() -> None:
    """Numba コンパイルを事前に行うウォームアップ関数"""

    # 空盤面のダミー配列を使い JIT を走らせる
    dummy: np.ndarray = np.zeros((9, 9), dtype=np.int8)
    _candidate_masks(dummy)
    _conflict_map(dummy)


_warmup_numba()


__all__ = ["candidate_masks", "conflict_map", "mask_to_values"]
