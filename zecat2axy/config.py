from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_GRID = 128
DEFAULT_CELL_CAP = 6
DEFAULT_MIN_CELLS = 4
DEFAULT_MIN_REFERENCE_STARS = 5

DEFAULT_MIN_FLUX = 30.0
DEFAULT_MIN_FWHM = 1.0
DEFAULT_MAX_ELONGATION = 2.0


def _env_positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


GRID_DEFAULT = _env_positive_int("ZE_AXY_GRID", DEFAULT_GRID)
CELL_CAP_DEFAULT = _env_positive_int("ZE_AXY_CELL_CAP", DEFAULT_CELL_CAP)


@dataclass(frozen=True)
class FilterConfig:
    """Quality cuts applied to every parsed catalog record.

    A record survives only if ``flux > min_flux``, ``fwhm > min_fwhm`` and
    ``elongation < max_elongation`` (all strict).
    """

    min_flux: float = DEFAULT_MIN_FLUX
    min_fwhm: float = DEFAULT_MIN_FWHM
    max_elongation: float = DEFAULT_MAX_ELONGATION


@dataclass(frozen=True)
class ThinningConfig:
    grid: int = GRID_DEFAULT
    cell_cap: int = CELL_CAP_DEFAULT
    # below this many grid cells the image is passed through unthinned
    min_cells: int = DEFAULT_MIN_CELLS

    def __post_init__(self) -> None:
        if int(self.grid) != self.grid or self.grid <= 0:
            raise ValueError(f"grid must be a positive integer, got {self.grid!r}")
        if int(self.cell_cap) != self.cell_cap or self.cell_cap <= 0:
            raise ValueError(f"cell_cap must be a positive integer, got {self.cell_cap!r}")
        if self.min_cells < 0:
            raise ValueError(f"min_cells must be >= 0, got {self.min_cells!r}")


@dataclass(frozen=True)
class PipelineConfig:
    filter: FilterConfig = field(default_factory=FilterConfig)
    thinning: ThinningConfig = field(default_factory=ThinningConfig)
    min_reference_stars: int = DEFAULT_MIN_REFERENCE_STARS


__all__ = [
    "CELL_CAP_DEFAULT",
    "DEFAULT_CELL_CAP",
    "DEFAULT_GRID",
    "DEFAULT_MAX_ELONGATION",
    "DEFAULT_MIN_CELLS",
    "DEFAULT_MIN_FLUX",
    "DEFAULT_MIN_FWHM",
    "DEFAULT_MIN_REFERENCE_STARS",
    "FilterConfig",
    "GRID_DEFAULT",
    "PipelineConfig",
    "ThinningConfig",
]
