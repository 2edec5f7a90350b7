from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, manifest pre-flight checks, output naming helpers
and text codec resolution. Acts as an abstraction over the 'os' and 'codecs'
modules so the core pipeline stays free of platform details.
"""

import codecs
import logging
import os
from typing import Optional, Tuple

from slnpack.domain.constants import (
    DEFAULT_ENCODING,
    MANIFEST_EXTENSION,
    SAFE_NAME_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

# Characters rejected in file names on at least one supported platform
_INVALID_FILENAME_CHARS = set('<>:"/\\|?*') | {chr(c) for c in range(32)}

_ENCODING_ALIASES = {
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "utf-16": "utf-16",
    "utf16": "utf-16",
    "ascii": "ascii",
}

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def to_host_separators(relative_path: str) -> str:
    """Convert manifest-style backslash separators to the host separator."""
    return relative_path.replace("\\", os.sep).replace("/", os.sep)


def solution_name(solution_path: str) -> str:
    """Return the manifest file name without its extension."""
    return os.path.splitext(os.path.basename(solution_path))[0]

# -----------------------------------------------------------------------------
# FILESYSTEM VALIDATION API
# -----------------------------------------------------------------------------

def check_manifest_path(solution_path: str) -> Optional[str]:
    """
    Pre-flight validation of the manifest path.

    Args:
        solution_path: Path given by the caller.

    Returns:
        Optional[str]: A one-line error message, or None when usable.
    """
    if not solution_path or not os.path.isfile(solution_path):
        return f"Solution file '{solution_path}' not found."
    if not solution_path.lower().endswith(MANIFEST_EXTENSION):
        return f"The specified file is not a {MANIFEST_EXTENSION} file."
    return None


def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)

# -----------------------------------------------------------------------------
# NAMING & FORMATTING
# -----------------------------------------------------------------------------

def part_file_path(base_path: str, part_number: int, total_parts: int) -> str:
    """
    Compute the artifact path of one partition.

    A single partition keeps the requested path; several partitions are named
    '<stem>_partNN<ext>' next to it so they sort by name.

    Args:
        base_path: Requested output path.
        part_number: 1-based partition index.
        total_parts: Number of partitions.

    Returns:
        str: Target file path.
    """
    if total_parts <= 1:
        return base_path
    directory = os.path.dirname(base_path)
    stem, ext = os.path.splitext(os.path.basename(base_path))
    return os.path.join(directory, f"{stem}_part{part_number:02d}{ext}")


def safe_file_name(name: str) -> str:
    """Replace characters invalid in file names and cap the length."""
    safe = "".join("_" if c in _INVALID_FILENAME_CHARS else c for c in name)
    return safe[:SAFE_NAME_MAX_LENGTH]


def format_file_size(size_bytes: int) -> str:
    """
    Render a byte count with the largest fitting unit (B/KB/MB/GB).

    Args:
        size_bytes: Size in bytes.

    Returns:
        str: e.g. '512 B', '1.5 KB', '2.25 MB'.
    """
    sizes = ["B", "KB", "MB", "GB"]
    order = 0
    size = float(size_bytes)
    while size >= 1024 and order < len(sizes) - 1:
        order += 1
        size /= 1024

    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {sizes[order]}"

# -----------------------------------------------------------------------------
# TEXT CODECS
# -----------------------------------------------------------------------------

def resolve_encoding(name: Optional[str]) -> str:
    """
    Resolve a configured codec name to one Python can use.

    An unknown name is a degraded error: it is logged and UTF-8 is used.

    Args:
        name: Codec name from configuration.

    Returns:
        str: Usable codec name.
    """
    raw = (name or "").strip()
    if not raw:
        return DEFAULT_ENCODING

    alias = _ENCODING_ALIASES.get(raw.lower())
    if alias:
        return alias

    try:
        return codecs.lookup(raw).name
    except LookupError:
        logger.warning(f"Unknown encoding '{raw}', using {DEFAULT_ENCODING}")
        return DEFAULT_ENCODING
