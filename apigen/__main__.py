#!/usr/bin/env python3
"""API binding generator CLI entrypoint."""

import sys
import argparse
import logging

from apigen.errors import ApigenError
from apigen.generator import ApiGenerator
from apigen.utils.logging import LoggerFactory


def main(argv=None):
    """Main entry point for the binding generator."""
    parser = argparse.ArgumentParser(
        prog="apigen",
        description="Generate typed API bindings from an HTML reference page"
    )
    parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "-o", "--output-dir",
        help="Output directory for generated files"
    )
    parser.add_argument(
        "-u", "--url",
        help="Documentation URL (overrides source.url)"
    )
    parser.add_argument(
        "-i", "--input",
        help="Read the documentation page from a local HTML file instead of fetching it"
    )
    parser.add_argument(
        "--from-snapshot",
        metavar="DIR",
        help="Regenerate sources from a previous JSON dump instead of scraping"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit structured JSON log lines"
    )

    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logger = LoggerFactory.create_logger(
        name="apigen",
        level=log_level,
        structured=args.json_logs
    )

    try:
        generator = ApiGenerator(config_path=args.config, output_dir=args.output_dir)
        if args.from_snapshot:
            generator.regenerate(args.from_snapshot)
        else:
            generator.run(url=args.url, input_path=args.input)
    except (ApigenError, OSError) as e:
        logger.error(f"Generation failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
