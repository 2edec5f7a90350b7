from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the `tree` and `extract` sub-commands with their options, and
translates a parsed namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from slnpack.domain.config import MODE_EXTRACT, MODE_TREE

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the slnpack CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="slnpack",
        description="Render the structure of a .sln solution or extract its sources "
                    "into token-bounded text files.",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Tree rendering ---
    tree = sub.add_parser(MODE_TREE, help="Print the solution structure as a tree.")
    _add_common_arguments(tree)
    tree.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=None,
        help="Maximum directory depth below each project (default: 10).",
    )
    tree.add_argument(
        "--show-size",
        dest="show_file_size",
        action="store_true",
        help="Append the size of each file.",
    )
    tree.add_argument(
        "--file-types",
        dest="file_types",
        default=None,
        help="Comma-separated extensions replacing the default tree set.",
    )
    tree.add_argument(
        "--save",
        dest="save_tree_path",
        default=None,
        help="Also write the rendered tree to this file.",
    )
    tree.add_argument(
        "--no-color",
        dest="no_color",
        action="store_true",
        help="Disable ANSI colors on the console.",
    )

    # --- Extraction ---
    ext = sub.add_parser(MODE_EXTRACT, help="Extract source files into token-bounded text files.")
    _add_common_arguments(ext)
    ext.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Output file (default: <solution>_extracted_code.txt next to the manifest).",
    )
    ext.add_argument(
        "-d", "--output-dir",
        dest="output_dir",
        default=None,
        help="Output directory for --separate-projects.",
    )
    ext.add_argument(
        "--separate-projects",
        dest="separate_projects",
        action="store_true",
        help="Write one file series per project plus a solution-level file.",
    )
    ext.add_argument(
        "--max-tokens",
        dest="max_unit_weight",
        type=int,
        default=None,
        help="Maximum estimated tokens per output file (default: 190000).",
    )
    ext.add_argument(
        "--no-split",
        dest="no_split",
        action="store_true",
        help="Write everything into a single file.",
    )
    ext.add_argument(
        "--max-file-size",
        dest="max_file_size_mb",
        type=float,
        default=None,
        help="Skip files larger than this many MB (default: 1).",
    )
    ext.add_argument(
        "--include-binary",
        dest="include_binary",
        action="store_true",
        help="Read binary-classified files instead of writing a placeholder.",
    )
    ext.add_argument(
        "--tokenizer",
        dest="tokenizer",
        choices=["heuristic", "tiktoken"],
        default=None,
        help="Weight estimation strategy (default: heuristic).",
    )
    ext.add_argument(
        "--no-timestamp",
        dest="no_timestamp",
        action="store_true",
        help="Omit the 'Generated on' header line.",
    )

    return p


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    """Options shared by both sub-commands."""
    p.add_argument("solution_path", help="Path to the .sln manifest.")

    # --- Filtering ---
    p.add_argument(
        "--include",
        dest="include_extensions",
        default=None,
        help="Comma-separated extensions to include (overrides --exclude).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_extensions",
        default=None,
        help="Comma-separated extensions to exclude.",
    )
    p.add_argument(
        "--show-hidden",
        dest="show_hidden_files",
        action="store_true",
        help="Visit hidden files and directories.",
    )
    p.add_argument(
        "--show-build-artifacts",
        dest="show_build_artifacts",
        action="store_true",
        help="Visit build output directories (bin, obj, ...).",
    )
    p.add_argument(
        "--encoding",
        dest="encoding",
        default=None,
        help="Text encoding for reading and writing (default: utf-8).",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file merged over the defaults.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to a rotating log file.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the result as JSON.",
    )

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options the user actually gave are returned, so file and default
    values survive.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {"solution_path": args.solution_path}

    # Value options (None means "not given")
    for key in (
            "output_path", "output_dir", "save_tree_path", "encoding", "tokenizer",
            "max_depth", "max_unit_weight", "max_file_size_mb",
    ):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    # Extension lists
    for key in ("include_extensions", "exclude_extensions", "file_types"):
        value = _split_csv(getattr(args, key, None))
        if value is not None:
            overrides[key] = value

    # Flags that only switch a default on
    for key in ("show_hidden_files", "show_build_artifacts", "show_file_size", "separate_projects"):
        if getattr(args, key, False):
            overrides[key] = True

    # Negative flags
    if getattr(args, "no_split", False):
        overrides["enable_partitioning"] = False
    if getattr(args, "include_binary", False):
        overrides["skip_binary_files"] = False
    if getattr(args, "no_timestamp", False):
        overrides["include_timestamp"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
