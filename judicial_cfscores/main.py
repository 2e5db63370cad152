#!/usr/bin/env python3
"""
Judicial CF Score Analysis - Main Analysis Script

This script loads a dataset of judicial campaign-finance ideology scores,
summarizes them by party, appointment type and state, and renders a violin
plot, a trend plot, a box plot and an interactive state map.

Usage:
    python main.py --input data/judges_cfscores.csv             # Full pipeline
    python main.py --input data/judges_cfscores.csv --analyze   # Tables only
    python main.py --input data/judges_cfscores.csv --visualize # Figures only
    JUDICIAL_CFSCORES_DATA=data/judges.csv python main.py       # Path from env
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from judicial_cfscores.src.data_acquisition import CFScoreDataLoader, ReadError
from judicial_cfscores.src.preprocessing import CFScoreDataPreprocessor
from judicial_cfscores.src.analysis import CFScoreAnalyzer
from judicial_cfscores.src.visualization import CFScoreVisualizer

logger = logging.getLogger(__name__)

DATA_PATH_ENV = "JUDICIAL_CFSCORES_DATA"


def setup_directories(output_dir: str) -> dict:
    """Create output directories for figures and tables."""
    dirs = {
        "figures": f"{output_dir}/figures",
        "data": f"{output_dir}/data",
    }
    for path in dirs.values():
        Path(path).mkdir(parents=True, exist_ok=True)
    return dirs


def preprocess_data(data_path: str) -> CFScoreDataPreprocessor:
    """
    Load and preprocess the CF score dataset.

    Args:
        data_path: Path to the input CSV file.

    Returns:
        Preprocessor instance with processed data.
    """
    logger.info("Preprocessing data from %s...", data_path)

    raw = CFScoreDataLoader(data_path).load()
    preprocessor = CFScoreDataPreprocessor(raw)
    preprocessor.preprocess_all()

    return preprocessor


def run_analysis(
    preprocessor: CFScoreDataPreprocessor,
    data_dir: str,
) -> CFScoreAnalyzer:
    """
    Compute aggregates, print a summary and export the tables.

    Args:
        preprocessor: Preprocessor with processed data.
        data_dir: Directory for the exported CSV tables.

    Returns:
        Analyzer instance with results.
    """
    logger.info("Running CF score analysis...")

    analyzer = CFScoreAnalyzer(
        plot_df=preprocessor.plot_data,
        map_df=preprocessor.map_data,
    )
    summary = analyzer.compute_analysis_summary()

    print(f"\n{'='*60}")
    print("JUDICIAL CF SCORE ANALYSIS SUMMARY")
    print(f"{'='*60}")
    print(f"Judges Analyzed: {summary['n_records']}")
    print("Mean CF Score by Party:")
    for party, mean in summary["party_means"].items():
        print(f"  {party}: {mean:.3f}")
    print(f"States With Data: {summary['n_states_with_data']}")
    print("States per Ideology Category:")
    for category, count in summary["category_counts"].items():
        print(f"  {category}: {count}")
    print(f"{'='*60}\n")

    diff = analyzer.analyze_party_differences()
    if diff:
        print("Party Difference Test (Kruskal-Wallis):")
        print(f"  H-statistic: {diff['statistic']:.4f}")
        print(f"  p-value: {diff['p_value']:.6f}")
        print(f"  Significant: {diff['significant_at_05']}")
        print()

    preprocessor.save_processed_data(data_dir)
    for name, df in [
        ("party_means", analyzer.compute_party_means()),
        ("state_averages", analyzer.categorize_states()),
        ("group_summary", analyzer.compute_group_summary()),
    ]:
        path = Path(data_dir) / f"{name}.csv"
        df.to_csv(path, index=False)
        logger.info("Saved %s to %s", name, path)

    return analyzer


def create_visualizations(
    analyzer: CFScoreAnalyzer,
    figures_dir: str,
    prefix: str = "",
) -> list:
    """
    Render all CF score visualizations.

    Args:
        analyzer: Analyzer instance.
        figures_dir: Directory to save figures.
        prefix: Filename prefix.

    Returns:
        List of saved file paths.
    """
    logger.info("Creating visualizations...")

    viz = CFScoreVisualizer()
    return viz.create_analysis_dashboard(
        analyzer=analyzer,
        output_dir=figures_dir,
        prefix=prefix,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Judicial CF Score Analysis - Ideology by Party, Appointment and State"
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help=f"Path to the CF score CSV file (or set {DATA_PATH_ENV} env var)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Directory for figures and tables (default: output)",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default="",
        help="Filename prefix for generated figures",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Compute and export summary tables only",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Create visualizations only",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Run full pipeline (analyze and visualize)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Resolve input path from args or environment
    data_path = args.input or os.environ.get(DATA_PATH_ENV)
    if not data_path:
        parser.error(f"no input file given (use --input or set {DATA_PATH_ENV})")

    # Default: if no specific action, run full pipeline
    run_all = args.full or not (args.analyze or args.visualize)

    dirs = setup_directories(args.output_dir)
    logger.info("Starting Judicial CF Score Analysis")

    try:
        preprocessor = preprocess_data(data_path)
    except ReadError as e:
        logger.error("Cannot read input: %s", e)
        sys.exit(1)

    if args.analyze or run_all:
        analyzer = run_analysis(preprocessor, dirs["data"])
    else:
        analyzer = CFScoreAnalyzer(
            plot_df=preprocessor.plot_data,
            map_df=preprocessor.map_data,
        )

    if args.visualize or run_all:
        saved = create_visualizations(analyzer, dirs["figures"], prefix=args.prefix)
        logger.info("Created %d visualizations in %s", len(saved), dirs["figures"])

    logger.info("Analysis complete!")


if __name__ == "__main__":
    main()
