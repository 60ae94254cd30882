"""盤面・ソルバー・生成・ヒントの各関数を公開するパッケージ用モジュール"""

from importlib import import_module
from typing import Any

__all__ = [
    "Board",
    "OutOfRangeError",
    "GivenCellError",
    "solve",
    "count_solutions",
    "has_unique_solution",
    "generate",
    "generate_puzzle",
    "generate_multiple_puzzles",
    "board_to_ascii",
    "get_next_hint",
    "Placement",
    "Elimination",
    "UnitRef",
    "validate_puzzle",
]


def __getattr__(name: str) -> Any:
    """必要になったタイミングで対象モジュールを読み込む"""

    if name in {"Board", "OutOfRangeError", "GivenCellError"}:
        module = import_module(".board", __name__)
        return getattr(module, name)

    if name in {"solve", "count_solutions", "has_unique_solution"}:
        module = import_module(".solver", __name__)
        return getattr(module, name)

    if name in {
        "generate",
        "generate_puzzle",
        "generate_multiple_puzzles",
        "board_to_ascii",
    }:
        module = import_module(".generator", __name__)
        return getattr(module, name)

    if name in {"get_next_hint", "Placement", "Elimination", "UnitRef"}:
        module = import_module(".hints", __name__)
        return getattr(module, name)

    if name == "validate_puzzle":
        module = import_module(".validator", __name__)
        return getattr(module, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name}")
