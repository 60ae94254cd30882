"""解が一意な数独パズルを生成するモジュール"""

from __future__ import annotations

import logging
import time
import random
import concurrent.futures
from typing import Dict, List, Tuple, cast, TYPE_CHECKING

if TYPE_CHECKING:
    # 型チェック時は絶対インポートを使用する
    from sudoku_engine.board import Board
    from sudoku_engine.constants import DIFFICULTY_REMOVALS, SIZE, _evaluate_difficulty
    from sudoku_engine.solver import count_solutions, solve
    from sudoku_engine.validator import validate_puzzle
    from sudoku_engine import sat_unique
else:
    try:
        # パッケージ実行時は相対インポート
        from .board import Board
        from .constants import DIFFICULTY_REMOVALS, SIZE, _evaluate_difficulty
        from .solver import count_solutions, solve
        from .validator import validate_puzzle
        from . import sat_unique
    except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
        # スクリプトとして直接実行されたときは同じディレクトリからインポートする
        from board import Board
        from constants import DIFFICULTY_REMOVALS, SIZE, _evaluate_difficulty
        from solver import count_solutions, solve
        from validator import validate_puzzle
        import sat_unique

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """ログ出力の設定を行う関数

    ``basicConfig`` を使ってフォーマットと出力レベルをまとめて設定します。

    :param level: 表示するログの重要度。``logging.INFO`` などを指定
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


# 目標の削除数に届かなかったとき、解盤面を作り直して試す回数
MAX_ATTEMPTS = 5

# 一意性の確認方法。backtrack は解の個数探索、sat は PySAT を使う
UNIQUENESS_METHODS = {"backtrack", "sat"}


def _is_unique(board: Board, method: str) -> bool:
    if method == "sat":
        return sat_unique.is_unique(board)
    # 2 つ目の解が見つかった時点で打ち切る
    return count_solutions(board, limit=2) == 1


def _solved_grid(rng: random.Random) -> List[List[int]]:
    """空盤面をランダム順で解いて完成盤面を作る"""
    board = Board.empty()
    if not solve(board, randomize=True, rng=rng):  # pragma: no cover - 空盤面は必ず解ける
        raise RuntimeError("空盤面を解けませんでした")
    return board.grid


def _remove_cells(
    grid: List[List[int]],
    removal_count: int,
    rng: random.Random,
    *,
    method: str,
    deadline: float | None,
) -> int:
    """一意性を保てるマスだけを消していき、消した数を返す

    81 マスを一度だけシャッフルし、各マスを 1 回ずつ試す。
    消すと解が複数になるマスは元に戻す。``grid`` はその場で書き換える。
    """

    cells = [(r, c) for r in range(SIZE) for c in range(SIZE)]
    rng.shuffle(cells)
    removed = 0
    for r, c in cells:
        if removed >= removal_count:
            break
        if deadline is not None and time.perf_counter() > deadline:
            logger.info("タイムアウトのため削除を打ち切ります")
            break
        value = grid[r][c]
        grid[r][c] = 0
        if _is_unique(Board(grid), method):
            removed += 1
        else:
            grid[r][c] = value
    return removed


def generate(
    removal_count: int,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
    max_attempts: int = MAX_ATTEMPTS,
    timeout_s: float | None = None,
    uniqueness: str = "backtrack",
    return_stats: bool = False,
) -> Board | Tuple[Board, Dict[str, object]]:
    """``removal_count`` マスを空けた一意解のパズルを生成する

    完成盤面から 1 マスずつ消し、解が 1 つのままなら採用する。
    目標に届かなければ完成盤面を作り直して ``max_attempts`` 回まで試し、
    最も多く消せたパズルを返す。目標が大きすぎても必ず終了する。

    :param removal_count: 空けたいマス数 (0..81)
    :param seed: 乱数シード。``rng`` を渡した場合は無視する
    :param rng: 解盤面のシャッフルと削除順に使う ``random.Random``
    :param max_attempts: 完成盤面を作り直す最大回数
    :param timeout_s: 生成処理のタイムアウト秒。超えたらその時点の最良を返す
    :param uniqueness: 一意性の確認方法。"backtrack" か "sat"
    :param return_stats: True なら ``(Board, 統計)`` を返す
    """

    if not 0 <= removal_count <= SIZE * SIZE:
        raise ValueError(f"removal_count は 0..{SIZE * SIZE} で指定してください")
    if uniqueness not in UNIQUENESS_METHODS:
        raise ValueError(f"uniqueness は {UNIQUENESS_METHODS} のいずれかで指定")
    if max_attempts < 1:
        raise ValueError("max_attempts は 1 以上を指定してください")

    # 乱数生成器を作成。シードを指定すると結果を再現できる
    if rng is None:
        rng = random.Random(seed)

    start_time = time.perf_counter()
    deadline = None if timeout_s is None else start_time + timeout_s
    logger.info("盤面生成開始: removal_count=%d", removal_count)

    # 1 回目の試行結果を最良として持っておく
    best_grid = _solved_grid(rng)
    best_removed = _remove_cells(
        best_grid, removal_count, rng, method=uniqueness, deadline=deadline
    )
    attempts = 1
    logger.info("試行 %d: %d マス削除", attempts, best_removed)
    while best_removed < removal_count and attempts < max_attempts:
        if deadline is not None and time.perf_counter() > deadline:
            break
        attempts += 1
        grid = _solved_grid(rng)
        removed = _remove_cells(
            grid, removal_count, rng, method=uniqueness, deadline=deadline
        )
        logger.info("試行 %d: %d マス削除", attempts, removed)
        if removed > best_removed:
            best_grid, best_removed = grid, removed

    if best_removed < removal_count:
        logger.warning(
            "目標 %d マスに届きませんでした (最大 %d マス)", removal_count, best_removed
        )

    board = Board(best_grid)
    # 生成した結果がパズルとして成立しているか確認する
    validate_puzzle(board)

    elapsed = time.perf_counter() - start_time
    logger.info("盤面生成成功: %.3f 秒", elapsed)
    if not return_stats:
        return board

    _, solver_stats = cast(
        Tuple[int, Dict[str, int]],
        count_solutions(board, limit=2, return_stats=True),
    )
    stats: Dict[str, object] = {
        "removed": best_removed,
        "target": removal_count,
        "attempts": attempts,
        "solver_steps": solver_stats["steps"],
        "solver_max_depth": solver_stats["max_depth"],
        "difficulty": _evaluate_difficulty(
            solver_stats["steps"], solver_stats["max_depth"]
        ),
        "elapsed": elapsed,
    }
    return board, stats


def generate_puzzle(
    difficulty: str = "easy",
    *,
    seed: int | None = None,
    timeout_s: float | None = None,
    uniqueness: str = "backtrack",
) -> Board:
    """難易度ラベルから削除数を決めて ``generate`` を呼び出す

    削除数は目標値であり保証ではない。hard (60 マス) は 1 回の削除で
    最小パズルに達することが多く、たいてい 57-59 マスで止まる。
    その場合は全試行を使い、最良の盤面を WARNING 付きで返す。
    """

    if difficulty not in DIFFICULTY_REMOVALS:
        raise ValueError(f"difficulty は {sorted(DIFFICULTY_REMOVALS)} のいずれかで指定")
    return cast(
        Board,
        generate(
            DIFFICULTY_REMOVALS[difficulty],
            seed=seed,
            timeout_s=timeout_s,
            uniqueness=uniqueness,
        ),
    )


def generate_multiple_puzzles(
    count_each: int,
    *,
    seed: int | None = None,
    jobs: int | None = None,
    worker_log_level: int = logging.WARNING,
) -> List[Tuple[str, Board]]:
    """各難易度を同数生成して ``(difficulty, Board)`` の一覧で返す

    :param count_each: 各難易度の生成数
    :param seed: 乱数シード。パズルごとに ``seed + offset`` を使う
    :param jobs: 並列プロセス数。None または 1 なら逐次生成
    :param worker_log_level: 並列処理のログレベル。WARNING 以上のみ表示する
    """

    if count_each <= 0:
        raise ValueError("count_each は 1 以上を指定してください")

    logger.info("複数盤面生成開始 count_each=%d", count_each)
    start_time = time.perf_counter()

    if seed is None:
        seed = random.randint(0, 2**32 - 1)

    # 難易度の順序を固定し、各パズルのシードを先に決めておく
    tasks: List[Tuple[str, int]] = []
    offset = 0
    for difficulty in sorted(DIFFICULTY_REMOVALS):
        for _ in range(count_each):
            tasks.append((difficulty, seed + offset))
            offset += 1

    if jobs is None or jobs <= 1:
        puzzles = [(diff, generate_puzzle(diff, seed=s)) for diff, s in tasks]
    else:
        with concurrent.futures.ProcessPoolExecutor(
            max_workers=jobs,
            initializer=setup_logging,
            initargs=(worker_log_level,),
        ) as executor:
            futures = [
                executor.submit(generate_puzzle, diff, seed=s) for diff, s in tasks
            ]
            # submit 順に結果を受け取るので並び順は逐次生成と同じ
            puzzles = [(diff, f.result()) for (diff, _), f in zip(tasks, futures)]

    logger.info("複数盤面生成終了: %.3f 秒", time.perf_counter() - start_time)
    return puzzles


def board_to_ascii(board: Board) -> str:
    """盤面を 3x3 ブロック区切りのテキストへ変換する"""

    separator = "+-------+-------+-------+"
    lines: List[str] = [separator]
    for r in range(SIZE):
        line = "|"
        for c in range(SIZE):
            value = board.get(r, c)
            # 空マスは '.' で表示する
            line += f" {value if value else '.'}"
            if c % 3 == 2:
                line += " |"
        lines.append(line)
        if r % 3 == 2:
            lines.append(separator)
    return "\n".join(lines)


if __name__ == "__main__":
    import argparse

    # ログ設定を行う。デフォルトは INFO レベル
    setup_logging()

    try:
        from .hints import get_next_hint
    except ImportError:  # pragma: no cover - スクリプト実行時のフォールバック
        from hints import get_next_hint

    # コマンドライン引数を受け取る
    parser = argparse.ArgumentParser(description="一意解の数独パズルを生成します")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--difficulty",
        choices=sorted(DIFFICULTY_REMOVALS),
        default="easy",
        help="難易度ラベル",
    )
    group.add_argument("--removals", type=int, help="空けるマス数 (0..81)")
    parser.add_argument("--seed", type=int, default=None, help="乱数シード")
    parser.add_argument(
        "--attempts", type=int, default=MAX_ATTEMPTS, help="完成盤面を作り直す最大回数"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="タイムアウト秒数 (指定しない場合は無制限)",
    )
    parser.add_argument(
        "--uniqueness",
        choices=sorted(UNIQUENESS_METHODS),
        default="backtrack",
        help="一意性の確認方法",
    )
    parser.add_argument("--hint", action="store_true", help="最初のヒントも表示する")
    args = parser.parse_args()

    removals = (
        args.removals
        if args.removals is not None
        else DIFFICULTY_REMOVALS[args.difficulty]
    )
    pzl, pzl_stats = cast(
        Tuple[Board, Dict[str, object]],
        generate(
            removals,
            seed=args.seed,
            max_attempts=args.attempts,
            timeout_s=args.timeout,
            uniqueness=args.uniqueness,
            return_stats=True,
        ),
    )
    print(board_to_ascii(pzl))
    print(f"空マス: {pzl.empty_count()}  推定難易度: {pzl_stats['difficulty']}")
    if args.hint:
        hint = get_next_hint(pzl)
        print(hint.explanation if hint is not None else "論理的なヒントはありません")
