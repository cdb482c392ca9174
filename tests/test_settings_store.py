import json
from pathlib import Path

import pytest

import zecat2axy
from zecat2axy.config import DEFAULT_MIN_FLUX, GRID_DEFAULT


def test_settings_roundtrip(isolated_settings: Path):
    s = zecat2axy.PersistentSettings(grid=64, cell_cap=3, min_reference_stars=8, min_flux=45.0, log_level="DEBUG")
    zecat2axy.save_persistent_settings(s)

    data = json.loads(isolated_settings.read_text(encoding="utf-8"))
    assert data["grid"] == 64
    assert data["cell_cap"] == 3

    s2 = zecat2axy.load_persistent_settings()
    assert s2.grid == 64
    assert s2.cell_cap == 3
    assert s2.min_reference_stars == 8
    assert s2.min_flux == pytest.approx(45.0)
    assert s2.log_level == "DEBUG"

    cfg = s2.to_pipeline_config()
    assert cfg.thinning.grid == 64
    assert cfg.thinning.cell_cap == 3
    assert cfg.filter.min_flux == pytest.approx(45.0)
    assert cfg.min_reference_stars == 8


def test_missing_settings_file_gives_defaults(isolated_settings: Path):
    assert not isolated_settings.exists()
    s = zecat2axy.load_persistent_settings()
    assert s.grid == GRID_DEFAULT
    assert s.min_flux == DEFAULT_MIN_FLUX


def test_invalid_values_fall_back_to_defaults(isolated_settings: Path):
    isolated_settings.write_text(
        json.dumps({"grid": -3, "cell_cap": "many", "min_fwhm": None, "log_level": "chatty"}),
        encoding="utf-8",
    )
    s = zecat2axy.load_persistent_settings()
    assert s.grid == GRID_DEFAULT
    assert s.cell_cap == zecat2axy.ThinningConfig().cell_cap
    assert s.min_fwhm == pytest.approx(1.0)
    assert s.log_level == "INFO"


def test_corrupt_settings_file(isolated_settings: Path):
    isolated_settings.write_text("{not json", encoding="utf-8")
    assert zecat2axy.load_persistent_settings() == zecat2axy.PersistentSettings()
