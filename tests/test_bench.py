from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from sudoku_engine import bench  # noqa: E402


def test_bench_run(capsys: pytest.CaptureFixture[str]) -> None:
    avg_time, avg_empty = bench.run(20, 2, seed=0)
    assert avg_time >= 0.0
    # 20 マスなら必ず目標どおり空けられる
    assert avg_empty == 20.0
    out = capsys.readouterr().out
    assert "平均空マス数: 20.0 / 目標 20" in out


def test_bench_run_invalid_count() -> None:
    with pytest.raises(ValueError):
        bench.run(20, 0)
