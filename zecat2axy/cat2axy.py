from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import numpy as np

from .axy_writer import write_axy
from .catalog import load_catalog
from .config import PipelineConfig
from .errors import Cat2AxyError, InsufficientReferenceStars
from .fits_utils import image_size_from_fits
from .settings_store import LOG_LEVEL_CHOICES, load_persistent_settings
from .thinning import select_reference_stars

logger = logging.getLogger(__name__)

AXY_EXTENSION = ".axy"


@dataclass
class ConversionResult:
    catalog_path: Path
    output_path: Path
    candidates: int
    references: np.ndarray


def default_output_path(catalog_path: Path | str) -> Path:
    return Path(catalog_path).with_suffix(AXY_EXTENSION)


def convert_catalog(
    catalog_path: Path | str,
    width: int,
    height: int,
    output_path: Path | str | None = None,
    *,
    config: PipelineConfig | None = None,
) -> ConversionResult:
    """Turn a SExtractor catalog into an astrometry.net axy star list.

    Raises :class:`LoadError` if the catalog is unreadable,
    :class:`InsufficientReferenceStars` if thinning leaves fewer than
    ``config.min_reference_stars`` stars (nothing is written), and
    :class:`WriteError` if the table cannot be written.
    """
    cfg = config or PipelineConfig()
    source = Path(catalog_path)
    target = Path(output_path) if output_path is not None else default_output_path(source)
    candidates = load_catalog(source, cfg.filter)
    refs = select_reference_stars(candidates, width, height, cfg.thinning)
    if refs.size < cfg.min_reference_stars:
        raise InsufficientReferenceStars(int(refs.size), cfg.min_reference_stars)
    write_axy(refs, target, image_size=(int(width), int(height)))
    return ConversionResult(
        catalog_path=source,
        output_path=target,
        candidates=int(candidates.size),
        references=refs,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a SExtractor catalog (x y flux fwhm elongation) into an astrometry.net axy file"
    )
    parser.add_argument("catalog", type=Path, help="Path to the SExtractor ASCII catalog")
    parser.add_argument("width", type=int, nargs="?", help="Image width in pixels")
    parser.add_argument("height", type=int, nargs="?", help="Image height in pixels")
    parser.add_argument("--image", type=Path, help="Read width/height from this FITS frame instead")
    parser.add_argument("--output", type=Path, help="Output axy path (default: catalog path with .axy extension)")
    parser.add_argument("--grid", type=int, default=None, help="Grid cell size in pixels")
    parser.add_argument("--cell-cap", type=int, default=None, help="Maximum reference stars per grid cell")
    parser.add_argument("--min-stars", type=int, default=None, help="Minimum reference stars required to write output")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVEL_CHOICES, default=None)
    return parser


def _resolve_config(args: argparse.Namespace, defaults: PipelineConfig) -> PipelineConfig:
    thinning = defaults.thinning
    if args.grid is not None:
        thinning = replace(thinning, grid=args.grid)
    if args.cell_cap is not None:
        thinning = replace(thinning, cell_cap=args.cell_cap)
    min_stars = defaults.min_reference_stars if args.min_stars is None else max(0, int(args.min_stars))
    return replace(defaults, thinning=thinning, min_reference_stars=min_stars)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_persistent_settings()
    log_level = (args.log_level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    size: Optional[tuple[int, int]] = None
    if args.image is not None:
        try:
            size = image_size_from_fits(args.image)
        except (OSError, ValueError) as exc:
            logger.error("unable to read image size from %s: %s", args.image, exc)
            return 2
    elif args.width is not None and args.height is not None:
        size = (args.width, args.height)
    else:
        parser.error("image width and height (or --image) are required")
    width, height = size
    if width <= 0 or height <= 0:
        parser.error("image width and height must be positive")

    try:
        config = _resolve_config(args, settings.to_pipeline_config())
    except ValueError as exc:
        parser.error(str(exc))

    try:
        result = convert_catalog(args.catalog, width, height, args.output, config=config)
    except Cat2AxyError as exc:
        logger.error("%s", exc)
        return 2
    logger.info(
        "%d of %d candidate(s) written to %s",
        result.references.size,
        result.candidates,
        result.output_path,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
