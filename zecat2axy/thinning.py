from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .config import ThinningConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridLayout:
    """Uniform cell grid centred on the image.

    Cells are ``grid`` pixels square. ``x0``/``y0`` is the margin left on the
    low side so the grid sits in the middle of the frame.
    """

    grid: int
    cells_x: int
    cells_y: int
    x0: int
    y0: int

    @property
    def n_cells(self) -> int:
        return self.cells_x * self.cells_y

    def cell_of(self, x: float, y: float) -> tuple[int, int] | None:
        """Return the ``(i, j)`` cell holding a position, or ``None`` in the margin."""
        fx = math.floor((x - self.x0) / self.grid) if math.isfinite(x) else None
        fy = math.floor((y - self.y0) / self.grid) if math.isfinite(y) else None
        if fx is None or fy is None:
            return None
        if not (0 <= fx < self.cells_x and 0 <= fy < self.cells_y):
            return None
        return int(fx), int(fy)

    def linear_index(self, i: int, j: int) -> int:
        # row-major; distinct (i, j) always map to distinct counters
        return j * self.cells_x + i

    def cell_indices(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`cell_of` returning linear indices, ``-1`` for the margin."""
        with np.errstate(invalid="ignore"):
            fx = np.floor((np.asarray(x, dtype=np.float64) - self.x0) / self.grid)
            fy = np.floor((np.asarray(y, dtype=np.float64) - self.y0) / self.grid)
            inside = (
                np.isfinite(fx)
                & np.isfinite(fy)
                & (fx >= 0)
                & (fx < self.cells_x)
                & (fy >= 0)
                & (fy < self.cells_y)
            )
        out = np.full(fx.shape, -1, dtype=np.int64)
        out[inside] = self.linear_index(fx[inside].astype(np.int64), fy[inside].astype(np.int64))
        return out


def _check_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or int(value) != value or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def grid_layout(width: int, height: int, config: ThinningConfig | None = None) -> GridLayout:
    cfg = config or ThinningConfig()
    w = _check_dimension("width", width)
    h = _check_dimension("height", height)
    grid = int(cfg.grid)
    return GridLayout(
        grid=grid,
        cells_x=(w + grid - 1) // grid,
        cells_y=(h + grid - 1) // grid,
        x0=(w % grid) // 2,
        y0=(h % grid) // 2,
    )


def select_reference_stars(
    candidates: np.ndarray,
    width: int,
    height: int,
    config: ThinningConfig | None = None,
) -> np.ndarray:
    """Pick a spatially balanced reference set from brightness-ranked candidates.

    Candidates are visited in the order given (brightest first). Each one is
    binned into a grid cell; the first ``cell_cap`` stars reaching a cell are
    kept and later ones dropped, as are stars in the centring margin. Images
    spanning fewer than ``min_cells`` cells are too coarse to thin and every
    candidate is returned unchanged.
    """
    cfg = config or ThinningConfig()
    layout = grid_layout(width, height, cfg)
    if layout.n_cells < cfg.min_cells:
        logger.info(
            "image spans %d cell(s) (< %d); keeping all %d candidate(s)",
            layout.n_cells,
            cfg.min_cells,
            candidates.size,
        )
        return candidates.copy()
    if candidates.size == 0:
        return candidates.copy()

    cells = layout.cell_indices(candidates["x"], candidates["y"])
    occupancy = np.zeros(layout.n_cells, dtype=np.int64)
    keep = np.zeros(candidates.size, dtype=bool)
    margin = full = 0
    for idx, cell in enumerate(cells):
        if cell < 0:
            margin += 1
            continue
        if occupancy[cell] >= cfg.cell_cap:
            full += 1
            continue
        occupancy[cell] += 1
        keep[idx] = True
    refs = candidates[keep]
    logger.info(
        "grid %dx%d (cell=%dpx, cap=%d): %d reference star(s) selected, %d in margin, %d over cap",
        layout.cells_x,
        layout.cells_y,
        layout.grid,
        cfg.cell_cap,
        refs.size,
        margin,
        full,
    )
    return refs


def cell_occupancy(
    refs: np.ndarray,
    width: int,
    height: int,
    config: ThinningConfig | None = None,
) -> np.ndarray:
    """Count stars per grid cell, returned with shape ``(cells_y, cells_x)``."""
    layout = grid_layout(width, height, config)
    counts = np.zeros(layout.n_cells, dtype=np.int64)
    if refs.size:
        cells = layout.cell_indices(refs["x"], refs["y"])
        cells = cells[cells >= 0]
        np.add.at(counts, cells, 1)
    return counts.reshape(layout.cells_y, layout.cells_x)
