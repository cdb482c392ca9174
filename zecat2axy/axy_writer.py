from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np
from astropy.io import fits

from .errors import WriteError

logger = logging.getLogger(__name__)

AXY_COLUMNS = ("X", "Y")
AXY_DTYPE = np.dtype([("x", "f4"), ("y", "f4")])


def _build_table(refs: np.ndarray, image_size: Optional[tuple[int, int]]) -> fits.HDUList:
    x = np.asarray(refs["x"], dtype=np.float32)
    y = np.asarray(refs["y"], dtype=np.float32)
    table = fits.BinTableHDU.from_columns(
        [
            fits.Column(name="X", format="E", array=x),
            fits.Column(name="Y", format="E", array=y),
        ]
    )
    if image_size is not None:
        width, height = image_size
        table.header["IMAGEW"] = (int(width), "Image width [px]")
        table.header["IMAGEH"] = (int(height), "Image height [px]")
    return fits.HDUList([fits.PrimaryHDU(), table])


def _apply_umask_mode(path: Path) -> None:
    # mkstemp creates 0600 files; match what a plain open() would give
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(path, 0o666 & ~umask)


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("unable to remove %s (%s)", path, exc)


def write_axy(
    refs: np.ndarray,
    path: Path | str,
    *,
    image_size: Optional[tuple[int, int]] = None,
) -> Path:
    """Write reference star positions as an astrometry.net ``.axy`` table.

    The file holds an empty primary HDU followed by a binary table with
    float32 ``X`` and ``Y`` columns, one row per star. Any existing file at
    ``path`` is replaced. The table is staged in a temporary file next to the
    target and moved into place once complete; on failure the target is
    removed and :class:`WriteError` is raised.
    """
    target = Path(path)
    hdul = _build_table(refs, image_size)
    tmp_path: Optional[Path] = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.stem}_", suffix=".axy.tmp", dir=target.parent)
        os.close(fd)
        tmp_path = Path(tmp_name)
        hdul.writeto(tmp_path, overwrite=True, output_verify="exception")
        _apply_umask_mode(tmp_path)
        os.replace(tmp_path, target)
        tmp_path = None
    except Exception as exc:
        _unlink_quietly(target)
        raise WriteError(f"failed to write {target}: {exc}") from exc
    finally:
        if tmp_path is not None:
            _unlink_quietly(tmp_path)
    logger.info("wrote %d reference star(s) to %s", len(refs), target)
    return target


def read_axy(path: Path | str) -> np.ndarray:
    """Read the ``X``/``Y`` columns of an axy table into a structured array."""
    with fits.open(Path(path), mode="readonly", memmap=False) as hdul:
        data = hdul[1].data
        out = np.zeros(0 if data is None else len(data), dtype=AXY_DTYPE)
        if data is not None and len(data):
            out["x"] = data["X"]
            out["y"] = data["Y"]
    return out
