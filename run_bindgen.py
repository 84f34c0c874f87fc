#!/usr/bin/env python3
"""
Command-line entry point for TypeScript -> wasm-bindgen binding generation.

Loads the generator config (creating a default one when missing), resolves
every module reachable from the configured index file, and writes one Rust
binding file per module under the configured output directory.

Usage:
    python run_bindgen.py
    python run_bindgen.py -v --input bindgen.yml
    python run_bindgen.py --regenerate
    python run_bindgen.py -vv --report-dir output/run_reports
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.bindgen_config import DEFAULT_CONFIG_PATH, load_config
from core.errors import BindgenError
from core.run_artifacts import write_run_report
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from bindings.generator import generate_bindings
from bindings.type_mapping import TypeMapping

logger = logging.getLogger("run_bindgen")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Generate wasm-bindgen Rust bindings from TypeScript classes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_bindgen.py\n"
            "  python run_bindgen.py -v --input bindgen.yml\n"
            "  python run_bindgen.py --regenerate\n"
        ),
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v project debug, -vv debug everywhere).",
    )
    parser.add_argument(
        "-i",
        "--input",
        default=DEFAULT_CONFIG_PATH,
        help=f"Config file to use. Default: {DEFAULT_CONFIG_PATH}",
    )
    parser.add_argument(
        "-r",
        "--regenerate",
        action="store_true",
        default=False,
        help="Regenerate the config file from the default template before running.",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="If set, write a JSON run report into this directory.",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the generator.

    Returns:
        Process exit status.
    """
    args = parse_args(argv)
    configure_structured_logging(verbose=args.verbose)
    run_id = set_run_id()

    logger.info("Starting tsbindgen.")
    logger.debug("CLI settings: %s", args)

    try:
        with phase_scope("config"):
            config = load_config(args.input, regenerate=args.regenerate)
            type_mapping = TypeMapping.with_overrides(config.types)
            logger.info("Config loaded.")

        result = generate_bindings(
            config.input.index_file,
            config.output.directory,
            type_mapping=type_mapping,
        )

        if args.report_dir:
            report = result.to_report()
            report["status"] = "success"
            path = write_run_report(report, run_id=run_id, output_dir=args.report_dir)
            logger.info("Run report written to %s", path)

    except BindgenError as e:
        logger.error("Binding generation failed: %s", e)
        return 1
    except Exception as e:
        logger.error("Unexpected failure: %s", e, exc_info=True)
        return 1

    logger.info(
        "Generated bindings for %d type(s) across %d module(s) in %s",
        result.types_bound,
        len(result.graph),
        result.output_root,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
