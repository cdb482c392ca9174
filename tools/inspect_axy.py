#!/usr/bin/env python3
"""
Inspection helper for astrometry.net axy star lists.

Example:
    python tools/inspect_axy.py sample.axy --dump-records 10 --json summary.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import numpy as np
from astropy.io import fits

from zecat2axy.axy_writer import read_axy


def summarize(path: Path) -> dict:
    stars = read_axy(path)
    with fits.open(path, mode="readonly", memmap=False) as hdul:
        header = hdul[1].header
        image_w = header.get("IMAGEW")
        image_h = header.get("IMAGEH")
    summary: dict = {
        "path": str(path),
        "rows": int(stars.size),
        "image_w": image_w,
        "image_h": image_h,
    }
    if stars.size:
        summary["x_range"] = [float(np.min(stars["x"])), float(np.max(stars["x"]))]
        summary["y_range"] = [float(np.min(stars["y"])), float(np.max(stars["y"]))]
    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print a summary of an axy star list.")
    parser.add_argument("axy", type=Path, help="Path to the axy file")
    parser.add_argument("--dump-records", type=int, default=0, help="Number of rows to print (default: %(default)s)")
    parser.add_argument("--json", type=Path, help="Write the summary as JSON to this path")
    parser.add_argument("--log-level", default="INFO", help="Logging verbosity (default: %(default)s)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))
    summary = summarize(args.axy)
    logging.info(
        "%s: %d star(s), image %sx%s",
        args.axy,
        summary["rows"],
        summary["image_w"] if summary["image_w"] is not None else "?",
        summary["image_h"] if summary["image_h"] is not None else "?",
    )
    if args.dump_records > 0:
        stars = read_axy(args.axy)
        for idx in range(min(args.dump_records, stars.size)):
            logging.info("  #%d  X=%.3f  Y=%.3f", idx, float(stars["x"][idx]), float(stars["y"][idx]))
    if args.json:
        args.json.write_text(json.dumps(summary, indent=2), encoding="utf-8")
        logging.info("Summary written to %s", args.json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
