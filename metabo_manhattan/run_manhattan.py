#!/usr/bin/env python3
"""
Generate Manhattan plots for the top metabolite traits of a GWAS table.

Usage:
    metabo-manhattan --input data_raw/metabolite_gwas.csv --top-n 10
    metabo-manhattan --input table.csv --mode faceted --report reports/top10.html
    metabo-manhattan --input table.csv --traits M101 M233 --labels --format html
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import FIGURES_DIR, load_plot_config, validate_plot_config
from .constants import EXPORT_FORMATS, RENDER_MODES
from .exceptions import ManhattanError
from .pipeline.ingest import load_wide_table
from .pipeline.layout import build_layout
from .pipeline.ranking import select_top_traits
from .pipeline.reshape import to_long
from .plot_types import RenderedArtifact
from .plotting.batch import render_all, write_manifest

logger = logging.getLogger(__name__)


def run_pipeline(
    input_path: Path,
    config: Dict,
    traits: Optional[Sequence[str]] = None,
    output_dir: Optional[Path] = None,
    report_path: Optional[Path] = None,
    manifest_path: Optional[Path] = None,
) -> List[RenderedArtifact]:
    """Load, rank (unless traits are given), render and export."""
    logger.info("=" * 70)
    logger.info(f"MANHATTAN PLOTS: {input_path}")
    logger.info("=" * 70)

    wide = load_wide_table(input_path)
    layout = build_layout(wide)
    logger.info(f"Layout: {len(layout)} linkage groups")

    if traits:
        selected = list(traits)
        logger.info(f"Using {len(selected)} traits given on the command line")
    else:
        selected = select_top_traits(to_long(wide), int(config["top_n"]))

    artifacts = render_all(
        wide,
        layout,
        selected,
        mode=config["mode"],
        threshold=float(config["threshold"]),
        highlight_labels=bool(config["highlight_labels"]),
        boxed_labels=bool(config["boxed_labels"]),
        facet_rows=int(config["facet_rows"]),
        palette=config["palette"],
        highlight_color=config["highlight_color"],
        output_dir=output_dir,
        export_format=config["export_format"],
        report_path=report_path,
    )

    if manifest_path is not None:
        write_manifest(
            artifacts,
            manifest_path,
            metadata={
                "input": str(input_path),
                "mode": config["mode"],
                "threshold": float(config["threshold"]),
            },
        )

    logger.info(f"Done: {len(artifacts)} artifacts")
    return artifacts


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render Manhattan plots for metabolite GWAS results"
    )
    parser.add_argument("--input", type=Path, required=True, help="Wide GWAS table (.csv or .tsv)")
    parser.add_argument("--config", type=Path, default=None, help="YAML plot config (default: config/manhattan.yaml)")
    parser.add_argument("--top-n", type=int, default=None, help="Number of distinct traits to plot")
    parser.add_argument("--traits", nargs="+", default=None, help="Plot these traits instead of ranking")
    parser.add_argument("--mode", choices=RENDER_MODES, default=None, help="One figure per trait or one faceted grid")
    parser.add_argument("--threshold", type=float, default=None, help="Significance line in -log10(p)")
    parser.add_argument("--facet-rows", type=int, default=None, help="Rows in the faceted grid")
    parser.add_argument("--labels", action="store_true", help="Label markers above the threshold")
    parser.add_argument("--boxed-labels", action="store_true", help="Draw labels in boxes (implies --labels)")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default=None, help="Export format for each figure")
    parser.add_argument("--output-dir", type=Path, default=FIGURES_DIR, help="Directory for exported figures")
    parser.add_argument("--report", type=Path, default=None, help="Also bundle all figures into this HTML file")
    parser.add_argument("--manifest", type=Path, default=None, help="Write a JSON manifest of the outputs")
    return parser


def apply_cli_overrides(config: Dict, args: argparse.Namespace) -> Dict:
    config = dict(config)
    overrides = {
        "top_n": args.top_n,
        "mode": args.mode,
        "threshold": args.threshold,
        "facet_rows": args.facet_rows,
        "export_format": args.format,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    if args.labels or args.boxed_labels:
        config["highlight_labels"] = True
    if args.boxed_labels:
        config["boxed_labels"] = True
    validate_plot_config(config, source="command line")
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = apply_cli_overrides(load_plot_config(args.config), args)
        run_pipeline(
            args.input,
            config,
            traits=args.traits,
            output_dir=args.output_dir,
            report_path=args.report,
            manifest_path=args.manifest,
        )
    except (ManhattanError, FileNotFoundError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
