#!/usr/bin/env python3
"""
Top-level pipeline for generating a typed declaration file from annotated
sources.

Reads the given source files and directories in order, extracts the symbol
table, and writes the declaration file plus an optional outline and run
report.

Usage:
    python run_pipeline.py --source src/BMCoreUI.js --source src/BMView
    python run_pipeline.py --source ./src --output out/core.d.ts --modules
    python run_pipeline.py --source ./src --config dtsgen.yml --outline-file out/outline.json
"""

import argparse
import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from core.generator_config import (
    ConfigValidationError,
    load_environment,
    load_generator_config,
    resolve_config_path,
    resolve_emit_as_module,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_outline, write_run_report
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Annotated-source declaration file generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_pipeline.py --source ./src\n"
            "  python run_pipeline.py --source ./src --modules --output out/core.d.ts\n"
        )
    )

    parser.add_argument(
        "--source",
        action="append",
        required=True,
        help="Source file or directory; repeat to concatenate several in order."
    )
    parser.add_argument(
        "--output",
        default="output/declarations.d.ts",
        help="Path of the declaration file. Default: output/declarations.d.ts"
    )
    parser.add_argument(
        "--modules",
        action="store_true",
        default=None,
        help="Export every top-level declaration instead of declaring it globally."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML configuration file. Default: $DTSGEN_CONFIG when set."
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=None,
        help="Fail on unreadable or invalid configuration instead of using defaults."
    )
    parser.add_argument(
        "--outline-file",
        default=None,
        help="Optional JSON file receiving the per-section declaration outline."
    )
    parser.add_argument(
        "--report-dir",
        default="output/run_reports",
        help="Directory for JSON run reports. Default: output/run_reports"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO"
    )

    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Resolve extraction settings, emission options and prelude from config and env.

    Raises:
        ConfigValidationError: In strict mode, on invalid configuration.
    """
    from emission.config import DEFAULT_INDENT
    from emission.prelude import Prelude
    from extraction.config import ExtractionSettings

    strict = args.strict_config if args.strict_config is not None else resolve_strict_config_validation()
    config_path = resolve_config_path(args.config)

    sections: Dict[str, Dict[str, Any]] = {"extraction": {}, "emission": {}, "prelude": {}}
    if config_path:
        sections = load_generator_config(config_path, strict=strict)

    emission = sections["emission"]
    if args.modules is not None:
        emit_as_module = args.modules
    else:
        emit_as_module = resolve_emit_as_module(default=emission.get("emit_as_module", False))

    return {
        "config_path": config_path,
        "strict": strict,
        "settings": ExtractionSettings.from_mapping(sections["extraction"]),
        "prelude": Prelude.from_mapping(sections["prelude"]),
        "emit_as_module": emit_as_module,
        "indent": emission.get("indent", DEFAULT_INDENT),
    }


def run(args: argparse.Namespace) -> Dict[str, Any]:
    """Run extraction and emission and write the outputs.

    Returns:
        Report fields describing the run.

    Raises:
        FileNotFoundError: If a source path does not exist.
        ValueError: If a source file is not an annotated source file.
        ConfigValidationError: In strict mode, on invalid configuration.
    """
    from emission.emitter import emit_declarations
    from extraction.extractor import extract_sources

    options = load_settings(args)

    for source in args.source:
        if not os.path.exists(source):
            raise FileNotFoundError(f"Source not found: {source}")

    logger.info(f"Sources          : {', '.join(args.source)}")
    logger.info(f"Output file      : {os.path.abspath(args.output)}")
    logger.info(f"Module mode      : {options['emit_as_module']}")
    logger.info(f"Config file      : {options['config_path'] or '-'}")

    t0 = time.time()
    with phase_scope("extract"):
        result = extract_sources(args.source, options["settings"])
    extraction_time = time.time() - t0
    logger.info("Extraction completed in %.2fs: %s", extraction_time, result.stats)

    t0 = time.time()
    with phase_scope("emit"):
        text = emit_declarations(
            result.globals,
            emit_as_module=options["emit_as_module"],
            prelude=options["prelude"],
            indent=options["indent"],
        )
        os.makedirs(os.path.dirname(os.path.abspath(args.output)), exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    emission_time = time.time() - t0
    logger.info("Wrote %d characters to %s in %.2fs", len(text), args.output, emission_time)

    outline_path = None
    if args.outline_file:
        outline_path = write_outline(result.outline_to_dict(), args.outline_file)
        logger.info("Outline written: %s", outline_path)

    return {
        "status": "success",
        "sources": list(args.source),
        "output": os.path.abspath(args.output),
        "outline": outline_path,
        "emit_as_module": options["emit_as_module"],
        "config_path": options["config_path"],
        "globals": len(result.globals),
        "stats": result.stats.to_dict(),
        "timings": {
            "extraction_seconds": round(extraction_time, 3),
            "emission_seconds": round(emission_time, 3),
        },
    }


def main(argv: Optional[list] = None) -> None:
    """Main entry point for the pipeline."""
    load_environment()
    args = parse_args(argv)
    configure_structured_logging(level=getattr(logging, args.log_level))
    run_id = set_run_id()

    run_report: Dict[str, Any] = {
        "run_id": run_id,
        "pipeline": "declaration_pipeline",
        "status": "failed",
    }
    try:
        run_report.update(run(args))
        report_path = write_run_report(run_report, run_id, output_dir=args.report_dir)
        logger.info("Run report written: %s", report_path)
    except (FileNotFoundError, ValueError) as e:
        run_report["error"] = str(e)
        write_run_report(run_report, run_id, output_dir=args.report_dir)
        logger.error(f"Input error: {e}")
        sys.exit(1)
    except ConfigValidationError as e:
        run_report["error"] = str(e)
        write_run_report(run_report, run_id, output_dir=args.report_dir)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        run_report["error"] = str(e)
        write_run_report(run_report, run_id, output_dir=args.report_dir)
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
