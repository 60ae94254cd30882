"""PySAT を使った一意解チェックモジュール"""

from __future__ import annotations

from typing import List, Optional

from pysat.formula import CNF, IDPool

# EncType は PySAT で定義されている列挙型で、
# エンコーディング方式を数値で表現します
from pysat.card import CardEnc, EncType
from pysat.solvers import Minisat22

try:
    from .board import Board
    from .constants import BOX, DIGITS, SIZE
    from .puzzle_types import Grid
except ImportError:  # pragma: no cover
    from board import Board
    from constants import BOX, DIGITS, SIZE
    from puzzle_types import Grid


def _create_variables(pool: IDPool) -> List[List[List[int]]]:
    """マス (r, c) に数字 v が入ることを表す SAT 変数を作成する補助関数"""
    variables: List[List[List[int]]] = []
    for r in range(SIZE):
        row = []
        for c in range(SIZE):
            # index 0 は使わず、数字と添字を揃える
            row.append([0] + [pool.id(f"x_{r}_{c}_{v}") for v in DIGITS])
        variables.append(row)
    return variables


def _exactly_one(lits: List[int], pool: IDPool) -> List[List[int]]:
    """lits のうちちょうど 1 つが真になる節を生成"""
    return CardEnc.equals(
        lits,
        1,
        vpool=pool,
        encoding=EncType.seqcounter,
    ).clauses


def _build_cnf(board: Board) -> tuple[CNF, List[List[List[int]]]]:
    pool = IDPool()
    x = _create_variables(pool)
    cnf = CNF()

    for r in range(SIZE):
        for c in range(SIZE):
            # 各マスに数字はちょうど 1 つ
            cnf.extend(_exactly_one([x[r][c][v] for v in DIGITS], pool))

    for v in DIGITS:
        # 行・列・ブロックの各ユニットに v はちょうど 1 回
        for r in range(SIZE):
            cnf.extend(_exactly_one([x[r][c][v] for c in range(SIZE)], pool))
        for c in range(SIZE):
            cnf.extend(_exactly_one([x[r][c][v] for r in range(SIZE)], pool))
        for br in range(0, SIZE, BOX):
            for bc in range(0, SIZE, BOX):
                lits = [
                    x[r][c][v]
                    for r in range(br, br + BOX)
                    for c in range(bc, bc + BOX)
                ]
                cnf.extend(_exactly_one(lits, pool))

    # 既に置かれている数字を単位節として追加
    for r in range(SIZE):
        for c in range(SIZE):
            value = board.get(r, c)
            if value != 0:
                cnf.append([x[r][c][value]])
    return cnf, x


def _decode(model: List[int], x: List[List[List[int]]]) -> Grid:
    true_vars = {lit for lit in model if lit > 0}
    grid: Grid = [[0] * SIZE for _ in range(SIZE)]
    for r in range(SIZE):
        for c in range(SIZE):
            for v in DIGITS:
                if x[r][c][v] in true_vars:
                    grid[r][c] = v
                    break
    return grid


def solve_with_sat(board: Board) -> Optional[Grid]:
    """SAT ソルバーで解を 1 つ求める。盤面自体は変更しない"""
    cnf, x = _build_cnf(board)
    with Minisat22(bootstrap_with=cnf.clauses) as solver:
        if not solver.solve():
            return None
        return _decode(solver.get_model(), x)


def is_unique(board: Board) -> bool:
    """現在の盤面から解が一意か確認する"""
    cnf, x = _build_cnf(board)
    with Minisat22(bootstrap_with=cnf.clauses) as solver:
        if not solver.solve():
            return False
        model = solver.get_model()
        true_vars = {lit for lit in model if lit > 0}
        # 見つかった解と同じ割り当てを禁止して再度解く
        blocking = []
        for r in range(SIZE):
            for c in range(SIZE):
                for v in DIGITS:
                    if x[r][c][v] in true_vars:
                        blocking.append(-x[r][c][v])
        solver.add_clause(blocking)
        unique = not solver.solve()
    return unique


__all__ = ["is_unique", "solve_with_sat"]
