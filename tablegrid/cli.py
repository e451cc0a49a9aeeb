#!/usr/bin/env python
"""
Command-line interface for the Table Reconstruction Pipeline.

Usage:
    tablegrid --input <pdf_or_json> --output <output_dir> [options]

Examples:
    # Convert a PDF to an Excel workbook
    tablegrid --input report.pdf --output ./output

    # Export every format
    tablegrid --input report.pdf --output ./output --format all

    # Convert fragments exported by another text-layer extractor
    tablegrid --input fragments.json --output ./output --format csv
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger("tablegrid")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_TABLES = 2
EXIT_INTERRUPTED = 130


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="tablegrid",
        description="Table Reconstruction Pipeline - Rebuild tables from a PDF text layer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Convert a PDF to xlsx:
    tablegrid --input report.pdf --output ./output

  Export xlsx, csv and json:
    tablegrid --input report.pdf --output ./output --format all

  Process only specific pages:
    tablegrid --input report.pdf --output ./output --pages 1-5

  Tune column detection for sparse tables:
    tablegrid --input report.pdf --output ./output --min-gap 30
        """
    )

    # Required arguments
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input PDF file or fragment JSON file"
    )

    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output directory for generated files"
    )

    # Optional arguments
    parser.add_argument(
        "--format", "-f",
        nargs="+",
        default=["xlsx"],
        choices=["xlsx", "csv", "json", "all"],
        help="Output format(s) (default: xlsx)"
    )

    parser.add_argument(
        "--pages",
        type=str,
        default=None,
        help="Page range to process, e.g., '1-5' or '1,3,5' (default: all)"
    )

    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        metavar="N",
        help="Process at most N of the selected pages (default: all)"
    )

    parser.add_argument(
        "--fragment-mode",
        choices=["word", "line"],
        default=None,
        help="PDF text fragment granularity (default: word)"
    )

    # Grid parameters
    grid = parser.add_argument_group("grid parameters")
    grid.add_argument(
        "--row-threshold",
        type=float,
        default=None,
        help="Max vertical distance for fragments in one row (default: 5)"
    )
    grid.add_argument(
        "--noise-floor",
        type=float,
        default=None,
        help="Gap below which fragments are joined without a space (default: 2)"
    )
    grid.add_argument(
        "--gap-multiplier",
        type=float,
        default=None,
        help="Median gap multiplier for the cell boundary (default: 3)"
    )
    grid.add_argument(
        "--min-gap",
        type=float,
        default=None,
        help="Absolute minimum cell boundary gap (default: 20)"
    )

    parser.add_argument(
        "--report",
        action="store_true",
        help="Also write a JSON report with per-page details and metrics"
    )

    parser.add_argument(
        "--preview",
        type=int,
        default=None,
        metavar="N",
        help="Print the first N rows after conversion (default: 0)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (re-raise unexpected errors)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser


def parse_page_range(page_str: str) -> List[int]:
    """
    Parse page range string to list of page numbers.

    Pages beyond the end of the document are dropped later, once the
    page count is known.
    """
    pages = []

    for part in page_str.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, end = part.split("-", 1)
            start, end = int(start), int(end)
            if start > end:
                raise ValueError(f"Invalid page range: {part}")
            pages.extend(range(start, end + 1))
        else:
            pages.append(int(part))

    pages = sorted(set(p for p in pages if p >= 1))
    if not pages:
        raise ValueError(f"No pages selected by: {page_str!r}")
    return pages


def build_config(args):
    """Merge environment configuration with command-line overrides."""
    from .config import get_config

    config = get_config()

    if args.fragment_mode:
        config.source.fragment_mode = args.fragment_mode
    if args.row_threshold is not None:
        config.grid.row_threshold = args.row_threshold
    if args.noise_floor is not None:
        config.grid.noise_floor = args.noise_floor
    if args.gap_multiplier is not None:
        config.grid.gap_multiplier = args.gap_multiplier
    if args.min_gap is not None:
        config.grid.min_gap_threshold = args.min_gap
    if args.max_pages is not None:
        config.max_pages = args.max_pages
    if args.debug:
        config.debug_mode = True

    return config


def print_preview(rows: List[List[str]], limit: int):
    """Print the first rows as pipe-separated text."""
    for row in rows[:limit]:
        print(" | ".join(row))
    if len(rows) > limit:
        print(f"... ({len(rows) - limit} more rows)")


def run_pipeline(args, config) -> int:
    """Run the table reconstruction pipeline."""
    from .utils.assembler import TableAssembler
    from .utils.export import TableExporter
    from .utils.io import ensure_dir, open_source, save_json

    start_time = time.time()

    pages: Optional[List[int]] = parse_page_range(args.pages) if args.pages else None

    # Setup output directory
    output_dir = Path(args.output)
    ensure_dir(output_dir)

    input_path = Path(args.input)
    assembler = TableAssembler(config.grid)

    def report_progress(done: int, total: int):
        logger.debug(f"Progress: {done}/{total} pages ({done * 100 // total}%)")

    with open_source(input_path, config.source) as source:
        logger.info(f"Loaded {source.page_count()} page(s)")
        matrix = assembler.process_document(
            source,
            source_file=str(input_path),
            pages=pages,
            max_pages=config.max_pages,
            progress_callback=report_progress
        )

    exporter = TableExporter(output_dir, input_path.stem, config.export)
    export_results = exporter.export(matrix, args.format)

    for fmt, path in export_results.items():
        logger.info(f"Exported {fmt}: {path}")

    if args.report:
        report_path = output_dir / f"{input_path.stem}.report.json"
        save_json(matrix.to_dict(), report_path)
        logger.info(f"Saved report: {report_path}")

    # Print summary
    elapsed = time.time() - start_time
    metrics = matrix.metrics

    if args.preview:
        print_preview(matrix.rows, args.preview)

    if not args.quiet:
        print("\n" + "=" * 60)
        print("TABLE RECONSTRUCTION COMPLETE")
        print("=" * 60)
        print(f"Source: {input_path}")
        print(f"Output: {output_dir}")
        print(f"Pages processed: {metrics.pages_processed} "
              f"(empty: {metrics.pages_empty}, failed: {metrics.pages_failed})")
        print(f"Rows extracted: {metrics.rows_total}")
        print(f"Widest row: {metrics.max_columns} cells")
        print(f"Processing time: {elapsed:.2f}s")
        print("=" * 60)

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    from .utils.errors import NoTabularTextError, TableGridError

    parser = setup_argparser()
    args = parser.parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    config = build_config(args)

    try:
        return run_pipeline(args, config)
    except NoTabularTextError as e:
        logger.error(str(e))
        logger.error("Run OCR on the document first if it only contains page images.")
        return EXIT_NO_TABLES
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except (TableGridError, ValueError, FileNotFoundError) as e:
        logger.error(f"Error: {e}")
        if config.debug_mode:
            raise
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if config.debug_mode:
            raise
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
