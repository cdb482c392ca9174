from __future__ import annotations

import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

from .config import (
    CELL_CAP_DEFAULT,
    GRID_DEFAULT,
    DEFAULT_MAX_ELONGATION,
    DEFAULT_MIN_FLUX,
    DEFAULT_MIN_FWHM,
    DEFAULT_MIN_REFERENCE_STARS,
    FilterConfig,
    PipelineConfig,
    ThinningConfig,
)

SETTINGS_PATH = Path.home() / ".zecat2axy_settings.json"
# Increment when the on-disk settings layout changes
SETTINGS_SCHEMA_VERSION = 1

LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class PersistentSettings:
    schema_version: int = SETTINGS_SCHEMA_VERSION
    grid: int = GRID_DEFAULT
    cell_cap: int = CELL_CAP_DEFAULT
    min_reference_stars: int = DEFAULT_MIN_REFERENCE_STARS
    min_flux: float = DEFAULT_MIN_FLUX
    min_fwhm: float = DEFAULT_MIN_FWHM
    max_elongation: float = DEFAULT_MAX_ELONGATION
    log_level: str = "INFO"

    def to_pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            filter=FilterConfig(
                min_flux=self.min_flux,
                min_fwhm=self.min_fwhm,
                max_elongation=self.max_elongation,
            ),
            thinning=ThinningConfig(grid=self.grid, cell_cap=self.cell_cap),
            min_reference_stars=self.min_reference_stars,
        )


def _resolve_settings_path() -> Path:
    """Return the active settings path, honoring runtime overrides."""
    pkg = sys.modules.get("zecat2axy")
    if pkg is not None:
        override = getattr(pkg, "SETTINGS_PATH", None)
        if override:
            return Path(override).expanduser()
    return SETTINGS_PATH


def load_persistent_settings() -> PersistentSettings:
    path = _resolve_settings_path()
    if not path.exists():
        return PersistentSettings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return PersistentSettings()
    if not isinstance(payload, dict):
        return PersistentSettings()

    def _positive_int(value: object, default: int) -> int:
        try:
            number = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return default
        return number if number > 0 else default

    def _float(value: object, default: float) -> float:
        try:
            return float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return default

    level = str(payload.get("log_level", "INFO") or "INFO").upper()
    return PersistentSettings(
        schema_version=int(payload.get("schema_version", 1) or 1),
        grid=_positive_int(payload.get("grid"), GRID_DEFAULT),
        cell_cap=_positive_int(payload.get("cell_cap"), CELL_CAP_DEFAULT),
        min_reference_stars=_positive_int(payload.get("min_reference_stars"), DEFAULT_MIN_REFERENCE_STARS),
        min_flux=_float(payload.get("min_flux"), DEFAULT_MIN_FLUX),
        min_fwhm=_float(payload.get("min_fwhm"), DEFAULT_MIN_FWHM),
        max_elongation=_float(payload.get("max_elongation"), DEFAULT_MAX_ELONGATION),
        log_level=level if level in LOG_LEVEL_CHOICES else "INFO",
    )


def save_persistent_settings(settings: PersistentSettings) -> None:
    path = _resolve_settings_path()
    data = asdict(settings)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


__all__ = [
    "LOG_LEVEL_CHOICES",
    "PersistentSettings",
    "SETTINGS_PATH",
    "SETTINGS_SCHEMA_VERSION",
    "load_persistent_settings",
    "save_persistent_settings",
]
