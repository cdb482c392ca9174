"""ZeCat2Axy: SExtractor catalog to astrometry.net axy star lists."""

from .axy_writer import read_axy, write_axy
from .cat2axy import ConversionResult, convert_catalog, default_output_path
from .catalog import CANDIDATE_DTYPE, load_catalog, parse_catalog_lines
from .config import FilterConfig, PipelineConfig, ThinningConfig
from .errors import Cat2AxyError, InsufficientReferenceStars, LoadError, WriteError
from .settings_store import (
    SETTINGS_PATH,
    PersistentSettings,
    load_persistent_settings,
    save_persistent_settings,
)
from .thinning import GridLayout, cell_occupancy, grid_layout, select_reference_stars

# short names for the three pipeline stages
load = load_catalog
thin = select_reference_stars
write = write_axy

__all__ = [
    "CANDIDATE_DTYPE",
    "Cat2AxyError",
    "ConversionResult",
    "FilterConfig",
    "GridLayout",
    "InsufficientReferenceStars",
    "LoadError",
    "PersistentSettings",
    "PipelineConfig",
    "SETTINGS_PATH",
    "ThinningConfig",
    "WriteError",
    "cell_occupancy",
    "convert_catalog",
    "default_output_path",
    "grid_layout",
    "load",
    "load_catalog",
    "load_persistent_settings",
    "parse_catalog_lines",
    "read_axy",
    "save_persistent_settings",
    "select_reference_stars",
    "thin",
    "write",
    "write_axy",
]
