"""
Configuration and constants for the table reconstruction pipeline.

This module provides:
- Global logging configuration
- Grid reconstruction parameters (row proximity, gap statistics)
- Fragment source settings for the PDF text layer
- Export settings
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import logging

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("tablegrid")


# ============================================================================
# Directory Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class GridConfig:
    """Row clustering and cell assembly parameters (PDF points)."""
    row_threshold: float = 5.0  # max |dy| for a fragment to join a row (strict <)
    noise_floor: float = 2.0  # separates glyph kerning from word spacing
    gap_multiplier: float = 3.0
    min_gap_threshold: float = 20.0  # absolute floor for the cell boundary gap
    default_median_gap: float = 5.0  # used when a page has no measurable gaps

    def validate(self) -> "GridConfig":
        """Raise ValueError for values that would break clustering."""
        if self.row_threshold <= 0:
            raise ValueError(f"row_threshold must be positive, got {self.row_threshold}")
        if self.noise_floor < 0:
            raise ValueError(f"noise_floor must not be negative, got {self.noise_floor}")
        if self.gap_multiplier < 1:
            raise ValueError(f"gap_multiplier must be >= 1, got {self.gap_multiplier}")
        if self.min_gap_threshold <= 0:
            raise ValueError(
                f"min_gap_threshold must be positive, got {self.min_gap_threshold}"
            )
        if self.default_median_gap <= 0:
            raise ValueError(
                f"default_median_gap must be positive, got {self.default_median_gap}"
            )
        return self


@dataclass
class SourceConfig:
    """PDF text layer extraction configuration."""
    # word: split text lines on whitespace glyphs, line: one fragment per text line
    fragment_mode: str = "word"
    # pdfminer LAParams
    char_margin: float = 2.0
    word_margin: float = 0.1
    line_margin: float = 0.5


@dataclass
class ExportConfig:
    """Export configuration."""
    sheet_name: str = "extracted_data"
    csv_delimiter: str = ","
    json_indent: int = 2
    pad_rows: bool = True  # pad ragged rows in xlsx/csv output
    preview_rows: int = 50


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    grid: GridConfig = field(default_factory=GridConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Global settings
    debug_mode: bool = False
    max_pages: Optional[int] = None  # None = process all pages


# ============================================================================
# Default Configuration Instance
# ============================================================================

FRAGMENT_MODES = ("word", "line")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return default


def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    # Grid parameters
    config.grid.row_threshold = _env_float(
        "TABLEGRID_ROW_THRESHOLD", config.grid.row_threshold
    )
    config.grid.noise_floor = _env_float(
        "TABLEGRID_NOISE_FLOOR", config.grid.noise_floor
    )
    config.grid.gap_multiplier = _env_float(
        "TABLEGRID_GAP_MULTIPLIER", config.grid.gap_multiplier
    )
    config.grid.min_gap_threshold = _env_float(
        "TABLEGRID_MIN_GAP", config.grid.min_gap_threshold
    )

    mode = os.environ.get("TABLEGRID_FRAGMENT_MODE", "").strip().lower()
    if mode:
        if mode in FRAGMENT_MODES:
            config.source.fragment_mode = mode
        else:
            logger.warning(f"Ignoring TABLEGRID_FRAGMENT_MODE={mode!r}")

    if os.environ.get("TABLEGRID_DEBUG", "").lower() == "true":
        config.debug_mode = True

    return config


# ============================================================================
# JSON Schema Version
# ============================================================================

JSON_SCHEMA_VERSION = "1.0"
