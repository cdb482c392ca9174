from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from tools import inspect_axy
from zecat2axy.axy_writer import write_axy
from zecat2axy.catalog import CANDIDATE_DTYPE


def _write_sample(path: Path) -> Path:
    refs = np.zeros(4, dtype=CANDIDATE_DTYPE)
    refs["x"] = [10.0, 20.0, 30.0, 40.0]
    refs["y"] = [400.0, 300.0, 200.0, 100.0]
    return write_axy(refs, path, image_size=(512, 480))


def test_summarize_reports_rows_and_ranges(tmp_path: Path) -> None:
    axy = _write_sample(tmp_path / "sample.axy")
    summary = inspect_axy.summarize(axy)
    assert summary["rows"] == 4
    assert summary["image_w"] == 512
    assert summary["image_h"] == 480
    assert summary["x_range"] == [10.0, 40.0]
    assert summary["y_range"] == [100.0, 400.0]


def test_main_writes_json_summary(tmp_path: Path) -> None:
    axy = _write_sample(tmp_path / "sample.axy")
    out = tmp_path / "summary.json"
    assert inspect_axy.main([str(axy), "--dump-records", "2", "--json", str(out)]) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["rows"] == 4
