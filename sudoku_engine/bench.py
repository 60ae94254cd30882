"""盤面生成の速さと実際に空けられたマス数を測る簡易ベンチマーク"""

from __future__ import annotations

import random
import time
from typing import List, Tuple, cast

from . import generator
from .board import Board


def run(
    removal_count: int, n: int = 1, *, seed: int | None = None
) -> Tuple[float, float]:
    """``n`` 回パズルを生成し、平均生成時間と平均空マス数を返す

    hard のように目標へ届かない削除数では、平均空マス数が目標を下回る。
    """

    if n < 1:
        raise ValueError("n は 1 以上を指定してください")

    rng = random.Random(seed)
    times: List[float] = []
    empties: List[int] = []
    for _ in range(n):
        start = time.perf_counter()
        board = cast(
            Board, generator.generate(removal_count, seed=rng.randint(0, 2**32 - 1))
        )
        times.append(time.perf_counter() - start)
        empties.append(board.empty_count())

    avg_time = sum(times) / n
    avg_empty = sum(empties) / n
    print(f"平均生成時間: {avg_time:.3f} 秒")
    print(f"平均空マス数: {avg_empty:.1f} / 目標 {removal_count} (最小 {min(empties)})")
    return avg_time, avg_empty


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="パズル生成ベンチマーク")
    parser.add_argument("removals", type=int, help="空けるマス数")
    parser.add_argument("-n", type=int, default=1, help="生成回数")
    parser.add_argument("--seed", type=int, help="乱数シード")
    args = parser.parse_args()
    run(args.removals, args.n, seed=args.seed)
