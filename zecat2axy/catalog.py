from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import numpy as np

from .config import FilterConfig
from .errors import LoadError

logger = logging.getLogger(__name__)

# SExtractor column order expected in the text catalog
CATALOG_FIELDS = ("x", "y", "flux", "fwhm", "elongation")
CANDIDATE_DTYPE = np.dtype([(name, "f8") for name in CATALOG_FIELDS])
COMMENT_PREFIX = "#"


def empty_candidates() -> np.ndarray:
    return np.zeros(0, dtype=CANDIDATE_DTYPE)


def parse_catalog_line(line: str) -> Optional[tuple[float, float, float, float, float]]:
    """Parse one catalog record, returning ``None`` for comments and malformed lines."""
    if line.startswith(COMMENT_PREFIX):
        return None
    tokens = line.split()
    if len(tokens) < len(CATALOG_FIELDS):
        return None
    try:
        x, y, flux, fwhm, elongation = (float(tok) for tok in tokens[: len(CATALOG_FIELDS)])
    except ValueError:
        return None
    return x, y, flux, fwhm, elongation


def passes_filter(record: tuple[float, ...], config: FilterConfig) -> bool:
    _, _, flux, fwhm, elongation = record
    return flux > config.min_flux and fwhm > config.min_fwhm and elongation < config.max_elongation


def rank_by_flux(candidates: np.ndarray) -> np.ndarray:
    """Return a copy ordered brightest first; equal fluxes keep their input order."""
    if candidates.size == 0:
        return candidates.copy()
    order = np.argsort(-candidates["flux"], kind="stable")
    return candidates[order]


def parse_catalog_lines(lines: Iterable[str], config: FilterConfig | None = None) -> np.ndarray:
    """Build the filtered, brightness-ranked candidate list from catalog text lines."""
    cfg = config or FilterConfig()
    kept: list[tuple[float, ...]] = []
    parsed = skipped = rejected = 0
    for lineno, line in enumerate(lines, start=1):
        record = parse_catalog_line(line)
        if record is None:
            if line.strip() and not line.startswith(COMMENT_PREFIX):
                logger.debug("line %d skipped: not a catalog record", lineno)
            skipped += 1
            continue
        parsed += 1
        if not passes_filter(record, cfg):
            rejected += 1
            continue
        kept.append(record)
    logger.info(
        "catalog: %d record(s) parsed, %d kept, %d rejected by quality cuts, %d line(s) skipped",
        parsed,
        len(kept),
        rejected,
        skipped,
    )
    if not kept:
        return empty_candidates()
    candidates = np.array(kept, dtype=CANDIDATE_DTYPE)
    return rank_by_flux(candidates)


def load_catalog(path: Path | str, config: FilterConfig | None = None) -> np.ndarray:
    """Load a SExtractor ASCII catalog (``x y flux fwhm elongation``).

    Raises :class:`LoadError` when the file cannot be opened or read. An empty
    or fully rejected catalog is returned as an empty array.
    """
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8", errors="replace") as handle:
            return parse_catalog_lines(handle, config)
    except OSError as exc:
        raise LoadError(f"failed to load CAT file: {source} ({exc})") from exc
