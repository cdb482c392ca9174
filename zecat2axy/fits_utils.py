from __future__ import annotations

from pathlib import Path

from astropy.io import fits


def image_size_from_header(header: fits.Header) -> tuple[int, int] | None:
    if int(header.get("NAXIS", 0) or 0) < 2:
        return None
    try:
        width = int(header["NAXIS1"])
        height = int(header["NAXIS2"])
    except (KeyError, TypeError, ValueError):
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def image_size_from_fits(path: Path | str) -> tuple[int, int]:
    """Return ``(width, height)`` of the first image HDU in a FITS file."""
    with fits.open(Path(path), mode="readonly", memmap=False) as hdul:
        for hdu in hdul:
            if not isinstance(hdu, (fits.PrimaryHDU, fits.ImageHDU, fits.CompImageHDU)):
                continue
            size = image_size_from_header(hdu.header)
            if size is not None:
                return size
    raise ValueError(f"no 2-D image found in {path}")
