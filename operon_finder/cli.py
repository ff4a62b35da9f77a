#!/usr/bin/env python3

"""
Command-line interface for the operon finder pipeline.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from operon_finder.core.config import load_config
from operon_finder.core.exceptions import PipelineError


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up console logging on stdout.

    The console handler filters at `log_level`; the root logger stays at
    INFO or lower so the per-run log file still records progress.
    """
    level = getattr(logging, log_level.upper())
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    logging.basicConfig(
        level=min(level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[console_handler],
        force=True
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="operon-finder",
        description="Detect operons from a GTF file with coverage filtering.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage, outputs named after the input file
  operon-finder -f stringtie_merged.gtf

  # Stricter coverage ratio and a custom output prefix
  operon-finder -f stringtie_merged.gtf --threshold 1.5 -o results/sample1
        """
    )

    parser.add_argument(
        '-f', '--file',
        required=True,
        help='Path to the input GTF file'
    )
    parser.add_argument(
        '--threshold',
        type=float,
        help='Coverage threshold multiplier (default: 1.0)'
    )
    parser.add_argument(
        '-o', '--output',
        help='Output file prefix (default: input file name without extension)'
    )
    parser.add_argument(
        '--log',
        help='Log file path (default: <prefix>_operon_finder.log)'
    )
    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--memory-limit',
        type=int,
        help='Memory limit in MB (default: 4096)'
    )
    parser.add_argument(
        '--no-gtf',
        action='store_true',
        help='Skip writing the re-emitted annotation subsets'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        if not os.path.exists(args.file):
            raise FileNotFoundError(f"GTF file not found: {args.file}")

        config = load_config(config_path=args.config, use_env=True)

        # Override config with command line arguments
        if args.threshold is not None:
            config.threshold = args.threshold
        if args.memory_limit is not None:
            config.memory_limit_mb = args.memory_limit
        if args.no_gtf:
            config.write_annotation_files = False
        if args.log_level == 'DEBUG':
            config.debug_mode = True

        # Re-validate after CLI overrides.
        config.validate()

        logger.info(f"Coverage threshold: {config.threshold}")

        from operon_finder.core.pipeline import OperonFinderPipeline

        pipeline = OperonFinderPipeline(config)
        success = pipeline.run(
            gtf_file=args.file,
            output_prefix=args.output,
            log_file=args.log
        )

        if success:
            return 0
        logger.error("Pipeline failed!")
        return 1

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except PipelineError as e:
        logger.error(f"Pipeline error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
