from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

import zecat2axy

SEXTRACTOR_HEADER = (
    "#   1 X_IMAGE                Object position along x                                    [pixel]",
    "#   2 Y_IMAGE                Object position along y                                    [pixel]",
    "#   3 FLUX_AUTO              Flux within a Kron-like elliptical aperture                [count]",
    "#   4 FWHM_IMAGE             FWHM assuming a gaussian core                              [pixel]",
    "#   5 ELONGATION             A_IMAGE/B_IMAGE",
)


def format_catalog(rows, *, header: bool = True) -> str:
    lines = list(SEXTRACTOR_HEADER) if header else []
    for row in rows:
        lines.append(" ".join(f"{float(v):.4f}" for v in row))
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory, monkeypatch):
    settings_file = tmp_path_factory.mktemp("settings") / ".zecat2axy_settings.json"
    monkeypatch.setattr(zecat2axy, "SETTINGS_PATH", settings_file, raising=True)
    return settings_file


@pytest.fixture
def write_catalog(tmp_path):
    def _write(rows, name: str = "sample.cat", *, header: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(format_catalog(rows, header=header), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def uniform_rows() -> np.ndarray:
    """200 valid stars spread over a 2048x2048 frame."""
    rng = np.random.default_rng(20190608)
    n = 200
    rows = np.column_stack(
        (
            rng.uniform(0.0, 2048.0, n),
            rng.uniform(0.0, 2048.0, n),
            rng.uniform(50.0, 50000.0, n),
            rng.uniform(1.5, 4.0, n),
            rng.uniform(1.0, 1.8, n),
        )
    )
    return rows
