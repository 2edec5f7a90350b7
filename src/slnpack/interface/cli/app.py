from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration layering
(defaults, optional JSON file, command-line overrides), validation, pipeline
execution and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from slnpack.core.pipeline.engine import run_extraction, run_tree
from slnpack.core.pipeline.stages.validator import validate_config
from slnpack.domain.config import MODE_TREE, load_config
from slnpack.domain.pipeline_models import PipelineResult
from slnpack.infra.console import StreamEmitter
from slnpack.infra.logging import LoggingConfig, configure_logging, get_logger
from slnpack.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 130 interrupted).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Configuration layering
    base_conf = load_config(args.config_file)
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    # 4. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 5. Pipeline execution phase
    try:
        if args.command == MODE_TREE:
            # JSON mode carries the lines in the payload instead
            emitter = None if args.json_output else StreamEmitter(
                sys.stdout, color=False if args.no_color else None
            )
            result = run_tree(clean_conf, emitter=emitter)
        else:
            result = run_extraction(clean_conf)
    except KeyboardInterrupt:
        msg = "Operation interrupted by user."
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130
    except Exception as e:
        msg = f"Pipeline execution failed: {e}"
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 1

    # 6. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge override values into the base configuration.

    Only keys known to the base configuration are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: PipelineResult) -> None:
    """
    Print the execution result for a terminal user.

    The tree itself has already been streamed; extraction prints its
    artifacts and counters.

    Args:
        result: The pipeline result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    if result.mode == MODE_TREE:
        saved = result.summary.get("saved_to")
        if saved:
            print(f"\nTree saved to: {saved}")
        return

    print(f"Extraction completed: {result.file_count} files in {result.partition_count} part(s).")

    if result.output_files:
        print("Generated files:")
        for path in result.output_files:
            print(f"  - {path}")

    if result.skipped:
        print(f"Files skipped: {len(result.skipped)}")
    if result.errors:
        print(f"Files with read errors: {len(result.errors)}")

    missing = result.summary.get("missing_projects") or []
    if missing:
        print(f"Projects not found: {', '.join(missing)}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
