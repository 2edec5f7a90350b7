from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between the interface layer and the pipelines. Coerces untrusted
values (JSON files, CLI overrides) into the expected types, normalizes
extension lists and enforces numeric lower bounds. In non-strict mode every
correction is reported as a warning; strict mode raises instead.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from slnpack.core.pipeline.components.filters import normalize_extension
from slnpack.domain.config import get_default_config

logger = logging.getLogger(__name__)

KNOWN_TOKENIZERS = ("heuristic", "tiktoken")

_STRING_FIELDS = [
    "solution_path", "output_path", "output_dir", "save_tree_path",
    "encoding", "tokenizer",
]

_BOOL_FIELDS = [
    "show_hidden_files", "show_build_artifacts", "show_file_size",
    "skip_binary_files", "enable_partitioning", "separate_projects",
    "include_timestamp",
]

_EXTENSION_FIELDS = ["include_extensions", "exclude_extensions", "file_types"]

# Field -> inclusive lower bound
_INT_FIELDS = {
    "max_depth": 1,
    "max_unit_weight": 1,
}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Missing keys are filled with domain defaults. The returned dictionary
    also carries `max_file_size_bytes`, derived from `max_file_size_mb`.

    Args:
        config: Raw configuration data.
        strict: Raise on invalid values instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and the
                                          warnings produced.

    Raises:
        TypeError: In strict mode, on a type mismatch.
        ValueError: In strict mode, on an out-of-range value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        defaults["max_file_size_bytes"] = _mb_to_bytes(defaults["max_file_size_mb"])
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Coercion
    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults.get(field, ""), field, warnings, strict)

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults.get(field, False), field, warnings, strict)

    for field in _EXTENSION_FIELDS:
        raw = _as_list_str(merged.get(field), defaults.get(field, []), field, warnings, strict)
        merged[field] = _normalize_extensions(raw, field, warnings, strict)

    for field, minimum in _INT_FIELDS.items():
        merged[field] = _as_int(merged.get(field), defaults[field], minimum, field, warnings, strict)

    merged["max_file_size_mb"] = _as_positive_float(
        merged.get("max_file_size_mb"), defaults["max_file_size_mb"], "max_file_size_mb", warnings, strict
    )
    merged["max_file_size_bytes"] = _mb_to_bytes(merged["max_file_size_mb"])

    # 3. Domain Checks
    merged["tokenizer"] = _validate_tokenizer(merged["tokenizer"], defaults["tokenizer"], warnings, strict)

    if merged["include_extensions"] and merged["exclude_extensions"]:
        warnings.append("Both include and exclude extensions given; the include list takes precedence.")

    return merged, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_int(value: Any, fallback: int, minimum: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce to int and enforce the lower bound."""
    if value is None:
        return fallback

    parsed: Optional[int] = None
    if isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    elif not strict and isinstance(value, str):
        try:
            parsed = int(value.strip().replace(",", "").replace("_", ""))
            warnings.append(f"Field '{field}' converted from '{value}' to {parsed}.")
        except ValueError:
            parsed = None

    if parsed is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if parsed < minimum:
        msg = f"Invalid field '{field}': {parsed} is below the minimum of {minimum}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    return parsed


def _as_positive_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    """Coerce to a strictly positive float."""
    if value is None:
        return fallback

    parsed: Optional[float] = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = float(value)
    elif not strict and isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            parsed = None

    if parsed is None:
        msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if parsed <= 0:
        msg = f"Invalid field '{field}': must be greater than 0."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    return parsed

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extensions(exts: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Normalize to lowercase '.ext' form, dropping duplicates."""
    out: List[str] = []
    for ext in exts:
        e = normalize_extension(ext)
        if not e:
            continue
        if not ext.strip().startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}' in '{field}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '{e}'.")
        if e not in out:
            out.append(e)
    return out


def _validate_tokenizer(name: str, fallback: str, warnings: List[str], strict: bool) -> str:
    key = name.strip().lower()
    if key in KNOWN_TOKENIZERS:
        return key
    msg = f"Unknown tokenizer '{name}'. Expected one of: {', '.join(KNOWN_TOKENIZERS)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using {fallback}.")
    return fallback


def _mb_to_bytes(mb: float) -> int:
    return int(mb * 1024 * 1024)
