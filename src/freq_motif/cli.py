"""
Command-line interface for motif frequency analysis.
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .constants import DEFAULT_MAX_READS, DEFAULT_RATIO, DEFAULT_SKIP
from .fastq import FASTQParseError
from .pipeline import AnalysisConfig, MotifFrequencyAnalysis

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='freq-motif-fastq',
        description=(
            'Analyze FASTQ files (including gzip) and generate statistics on '
            'motifs and low-complexity bases'
        ),
    )

    parser.add_argument(
        '-i', '--input',
        required=True,
        help='Input FASTQ file (supports gzip)',
    )
    parser.add_argument(
        '-o', '--output_dir',
        default=None,
        help='Output directory (default: unique directory in current directory)',
    )
    parser.add_argument(
        '-m', '--max_reads',
        type=int,
        default=DEFAULT_MAX_READS,
        help='Maximum number of reads to analyze',
    )
    parser.add_argument(
        '-r', '--ratio',
        type=float,
        default=DEFAULT_RATIO,
        help='Minimum proportion to consider (in percentage)',
    )
    parser.add_argument(
        '-S', '--skip',
        type=int,
        default=DEFAULT_SKIP,
        help='Number of initial reads to skip',
    )
    parser.add_argument(
        '--no_plot',
        action='store_true',
        help='Do not render the bar plot',
    )
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        help='Enable debug logging',
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for MotifFrequencyAnalysis."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        config = AnalysisConfig(
            input_path=args.input,
            output_dir=args.output_dir,
            max_reads=args.max_reads,
            ratio=args.ratio,
            skip=args.skip,
            plot=not args.no_plot,
        )
    except ValueError as e:
        parser.error(str(e))

    analysis = MotifFrequencyAnalysis(config)
    try:
        analysis.read()
    except FASTQParseError as e:
        logger.error(str(e))
        return 1

    results_path = analysis.serialize()
    analysis.print_summary()

    logger.info(f"Analysis completed successfully. Results saved to '{results_path}'.")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
