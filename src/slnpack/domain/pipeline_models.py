from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result object exchanged between the pipeline engine and the
interface layer, plus the factory functions that build it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result object of a tree or extraction run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        mode: 'tree' or 'extract'.
        solution_path: Manifest that was processed.
        project_count: Number of project records parsed.
        tree_lines: Rendered tree (tree mode).
        output_files: Artifacts written (extraction mode).
        file_count: Units written across all partitions.
        partition_count: Number of partitions written.
        skipped: Paths dropped or excluded by policy.
        errors: Degraded failures reported during the run.
        summary: Additional execution metrics.
    """
    ok: bool
    error: str
    mode: str
    solution_path: str

    project_count: int = 0
    tree_lines: List[str] = field(default_factory=list)
    output_files: List[str] = field(default_factory=list)
    file_count: int = 0
    partition_count: int = 0
    skipped: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        mode: str,
        solution_path: str,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """
    Create a failed pipeline result instance.

    Args:
        error: Detailed error description.
        mode: Pipeline mode that failed.
        solution_path: The manifest path given by the caller.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        mode=mode,
        solution_path=solution_path,
        summary=summary_extra or {},
    )


def create_success_result(
        mode: str,
        solution_path: str,
        project_count: int,
        tree_lines: Optional[List[str]] = None,
        output_files: Optional[List[str]] = None,
        file_count: int = 0,
        partition_count: int = 0,
        skipped: Optional[List[str]] = None,
        errors: Optional[List[str]] = None,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """
    Create a successful pipeline result instance.

    Returns:
        PipelineResult: An immutable success result object.
    """
    return PipelineResult(
        ok=True,
        error="",
        mode=mode,
        solution_path=solution_path,
        project_count=project_count,
        tree_lines=tree_lines or [],
        output_files=output_files or [],
        file_count=file_count,
        partition_count=partition_count,
        skipped=skipped or [],
        errors=errors or [],
        summary=summary_extra or {},
    )
