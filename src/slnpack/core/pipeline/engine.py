from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates the two workflows over a solution manifest:

Tree mode:
1. Validates configuration and the manifest path.
2. Parses the manifest and builds the folder forest.
3. Renders the forest and each project's directory tree.
4. Optionally saves the rendering.

Extraction mode:
1. Validates configuration and the manifest path.
2. Parses the manifest.
3. Collects weighted units (manifest, project files, project directories).
4. Packs units into ceiling-bounded partitions.
5. Writes one artifact per partition (or per project when separated).
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Set, Tuple

from slnpack.core.analysis.manifest_parser import parse_manifest, read_manifest_text
from slnpack.core.analysis.tree_builder import build_forest
from slnpack.core.analysis.tree_renderer import render_solution_tree
from slnpack.core.pipeline.components.filters import should_show_file
from slnpack.core.pipeline.components.reader import collect_unit
from slnpack.core.pipeline.components.walker import iter_accepted_files
from slnpack.core.pipeline.components.writer import (
    format_header,
    generation_timestamp,
    partition_weights,
    write_artifact,
    write_partitions,
)
from slnpack.core.pipeline.stages.packer import pack_units
from slnpack.core.pipeline.stages.validator import validate_config
from slnpack.core.processing.tokenizer import TokenizerService
from slnpack.domain.config import MODE_EXTRACT, MODE_TREE, policy_from_config
from slnpack.domain.constants import (
    EXTRACTED_CODE_SUFFIX,
    EXTRACTED_LAYERS_SUFFIX,
    SOLUTION_LEVEL_PREFIX,
)
from slnpack.domain.extraction_models import UNIT_ERROR, FileUnit, UnitExclusion
from slnpack.domain.pipeline_models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from slnpack.domain.solution_models import ManifestContents, ProjectRecord
from slnpack.domain.tree_models import FilterPolicy
from slnpack.infra.console import Emitter, LineEmitter, MultiEmitter
from slnpack.infra.fs import (
    check_manifest_path,
    normalize_path,
    resolve_encoding,
    safe_file_name,
    safe_mkdir,
    solution_name,
)

logger = logging.getLogger(__name__)

WeightFunc = Callable[[str], int]

# -----------------------------------------------------------------------------
# COLLECTION STATE
# -----------------------------------------------------------------------------

@dataclass
class _CollectionState:
    """
    Mutable accumulator owned by a single extraction pass.

    `seen_files` and `processed_dirs` guarantee that a physical file or a
    directory reachable from several projects is collected once. Artifacts
    of this run's output series or directory are never collected.
    """
    policy: FilterPolicy
    encoding: str
    skip_binary: bool
    weigh: WeightFunc
    seen_files: Set[str] = field(default_factory=set)
    processed_dirs: Set[str] = field(default_factory=set)
    skipped: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    missing_projects: List[str] = field(default_factory=list)
    output_series: List[Tuple[str, Pattern[str]]] = field(default_factory=list)
    output_dirs: List[str] = field(default_factory=list)

    def exclude_output_series(self, base_path: str) -> None:
        """Never collect `base_path` or its `_partNN` siblings, stale ones included."""
        directory = _path_key(os.path.dirname(base_path))
        stem, ext = os.path.splitext(os.path.normcase(os.path.basename(base_path)))
        pattern = re.compile(re.escape(stem) + r"(_part\d{2,})?" + re.escape(ext))
        self.output_series.append((directory, pattern))

    def exclude_output_dir(self, directory: str) -> None:
        """Never collect anything below `directory`."""
        self.output_dirs.append(_path_key(directory))

    def is_own_output(self, path: str) -> bool:
        key = _path_key(path)
        if any(key.startswith(d + os.sep) for d in self.output_dirs):
            return True
        parent, name = os.path.split(key)
        return any(parent == d and p.fullmatch(name) for d, p in self.output_series)

    def collect(self, paths: Iterable[str], claim: bool = True) -> List[FileUnit]:
        """
        Collect unseen paths, sorted by path.

        With `claim` off the collected paths are not recorded as seen, so a
        later call may collect them again.
        """
        seen = self.seen_files if claim else set(self.seen_files)
        fresh: List[str] = []
        for p in paths:
            key = _path_key(p)
            if key in seen or self.is_own_output(p):
                continue
            seen.add(key)
            fresh.append(p)

        units: List[FileUnit] = []
        for p in sorted(fresh):
            result = collect_unit(
                p,
                self.policy.max_unit_size_bytes,
                skip_binary=self.skip_binary,
                weigh=self.weigh,
            )
            if isinstance(result, UnitExclusion):
                self.skipped.append(result.path)
                continue
            if result.kind == UNIT_ERROR and result.failure:
                self.errors.append(f"{result.failure.path}: {result.failure.reason}")
            units.append(result)
        return units

    def project_paths(self, project: ProjectRecord) -> List[str]:
        """Project file plus every accepted file of its directory (walked once)."""
        if not os.path.isfile(project.resolved_path):
            logger.warning(f"Project file not found: {project.resolved_path}")
            self.missing_projects.append(project.name)
            return []

        paths = [project.resolved_path]
        project_dir = os.path.dirname(project.resolved_path)
        key = _path_key(project_dir)
        if key in self.processed_dirs:
            logger.debug(f"Directory already processed: {project_dir}")
            return paths
        self.processed_dirs.add(key)

        paths.extend(iter_accepted_files(project_dir, self.policy))
        return paths

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def run_tree(config: Optional[Dict[str, Any]], *, emitter: Optional[Emitter] = None) -> PipelineResult:
    """
    Execute the tree rendering workflow.

    Args:
        config: Raw or partial configuration dictionary.
        emitter: Optional live output sink (e.g. a colored console). The
                 rendering is always collected as plain lines as well.

    Returns:
        PipelineResult: Status, rendered lines and summary.
    """
    logger.info("Tree rendering started.")
    cfg = _validated(config)

    solution_path, contents, error = _load_solution(cfg, MODE_TREE)
    if error:
        return error

    forest = build_forest(contents)
    policy = policy_from_config(cfg, MODE_TREE)

    collector = LineEmitter()
    sink: Emitter = MultiEmitter(collector, emitter) if emitter else collector
    render_solution_tree(solution_path, forest, policy, sink, show_file_size=bool(cfg["show_file_size"]))

    missing = [p.name for p in contents.projects if not os.path.isfile(p.resolved_path)]

    save_path = cfg.get("save_tree_path") or ""
    if save_path:
        save_path = normalize_path(save_path, os.getcwd())
        try:
            with open(save_path, "w", encoding=resolve_encoding(cfg["encoding"])) as f:
                f.write("\n".join(collector.lines) + "\n")
            logger.info(f"Tree saved to: {save_path}")
        except OSError as e:
            msg = f"Failed to save tree to {save_path}: {e}"
            logger.error(msg)
            return create_error_result(msg, MODE_TREE, solution_path)

    summary = {
        "folders": len(forest.folders),
        "root_folders": len(forest.root_ids),
        "orphan_projects": len(forest.orphan_ids),
        "missing_projects": missing,
        "saved_to": save_path or None,
    }

    logger.info("Tree rendering completed.")
    return create_success_result(
        MODE_TREE,
        solution_path,
        project_count=len(contents.projects),
        tree_lines=collector.lines,
        output_files=[save_path] if save_path else [],
        summary_extra=summary,
    )


def run_extraction(config: Optional[Dict[str, Any]]) -> PipelineResult:
    """
    Execute the extraction workflow.

    Args:
        config: Raw or partial configuration dictionary.

    Returns:
        PipelineResult: Status, written artifacts, counters and summary.
    """
    logger.info("Extraction started.")
    cfg = _validated(config)

    solution_path, contents, error = _load_solution(cfg, MODE_EXTRACT)
    if error:
        return error

    tokenizer = TokenizerService(cfg["tokenizer"])
    state = _CollectionState(
        policy=policy_from_config(cfg, MODE_EXTRACT),
        encoding=resolve_encoding(cfg["encoding"]),
        skip_binary=bool(cfg["skip_binary_files"]),
        weigh=tokenizer.count,
    )

    if cfg["separate_projects"]:
        return _extract_separated(cfg, solution_path, contents, state)
    return _extract_combined(cfg, solution_path, contents, state)

# -----------------------------------------------------------------------------
# EXTRACTION MODES
# -----------------------------------------------------------------------------

def _extract_combined(
        cfg: Dict[str, Any],
        solution_path: str,
        contents: ManifestContents,
        state: _CollectionState,
) -> PipelineResult:
    """Every unit of the solution, packed into one artifact series."""
    base_dir = os.path.dirname(solution_path)
    default_output = os.path.join(base_dir, solution_name(solution_path) + EXTRACTED_CODE_SUFFIX)
    output_path = normalize_path(cfg.get("output_path") or "", default_output)
    state.exclude_output_series(output_path)

    paths = [solution_path]
    for project in contents.projects:
        paths.extend(state.project_paths(project))

    units = state.collect(paths)
    logger.info(f"Collected {len(units)} files from solution")

    packing = pack_units(units, cfg["max_unit_weight"], enabled=bool(cfg["enable_partitioning"]))

    ok, err = safe_mkdir(os.path.dirname(output_path))
    if not ok:
        msg = f"Failed to create output directory {os.path.dirname(output_path)}: {err}"
        logger.critical(msg)
        return create_error_result(msg, MODE_EXTRACT, solution_path)

    try:
        written = write_partitions(
            output_path,
            packing,
            state.encoding,
            include_timestamp=bool(cfg["include_timestamp"]),
        )
    except OSError as e:
        msg = f"Failed to write extraction output: {e}"
        logger.error(msg)
        return create_error_result(msg, MODE_EXTRACT, solution_path)

    if not written:
        logger.warning("No files were extracted.")
    if len(written) > 1:
        logger.info(f"Content split into {len(written)} files due to token limits")

    skipped = state.skipped + [u.path for u in packing.dropped]
    summary = {
        "output_path": output_path,
        "ceiling": packing.ceiling,
        "partition_weights": partition_weights(packing.partitions),
        "dropped": [u.path for u in packing.dropped],
        "excluded": list(state.skipped),
        "missing_projects": list(state.missing_projects),
    }

    logger.info("Extraction completed.")
    return create_success_result(
        MODE_EXTRACT,
        solution_path,
        project_count=len(contents.projects),
        output_files=written,
        file_count=packing.unit_count,
        partition_count=len(packing.partitions),
        skipped=skipped,
        errors=state.errors,
        summary_extra=summary,
    )


def _extract_separated(
        cfg: Dict[str, Any],
        solution_path: str,
        contents: ManifestContents,
        state: _CollectionState,
) -> PipelineResult:
    """One solution-level artifact plus one artifact series per project."""
    name = solution_name(solution_path)
    default_dir = os.path.join(os.path.dirname(solution_path), name + EXTRACTED_LAYERS_SUFFIX)
    output_dir = normalize_path(cfg.get("output_dir") or "", default_dir)
    state.exclude_output_dir(output_dir)

    ok, err = safe_mkdir(output_dir)
    if not ok:
        msg = f"Failed to create output directory {output_dir}: {err}"
        logger.critical(msg)
        return create_error_result(msg, MODE_EXTRACT, solution_path)

    include_timestamp = bool(cfg["include_timestamp"])
    enabled = bool(cfg["enable_partitioning"])
    written: List[str] = []
    file_count = 0
    partition_count = 0
    dropped: List[str] = []

    try:
        # 1. Solution-level files
        top_level, listing_error = _solution_level_paths(solution_path, state.policy)
        # Not claimed: a project rooted next to the manifest still gets its own files
        units = state.collect([solution_path] + top_level, claim=False)
        level_path = os.path.join(output_dir, f"{SOLUTION_LEVEL_PREFIX}{name}.txt")
        header = format_header(
            f"# Solution Level Files: {name}",
            generated_on=generation_timestamp() if include_timestamp else None,
        )
        write_artifact(level_path, header, units, state.encoding)
        if listing_error:
            with open(level_path, "a", encoding=state.encoding) as out:
                out.write(f"# Error reading solution directory: {listing_error}\n")
        logger.info(f"Extracted solution level files to: {os.path.basename(level_path)}")
        written.append(level_path)
        file_count += len(units)
        partition_count += 1

        # 2. One series per project
        for project in contents.projects:
            logger.info(f"Processing project: {project.name}")
            project_units = state.collect(state.project_paths(project))
            if not project_units:
                continue
            logger.info(f"  Collected {len(project_units)} files from project")

            packing = pack_units(project_units, cfg["max_unit_weight"], enabled=enabled)
            base_path = os.path.join(output_dir, f"{safe_file_name(project.name)}.txt")
            written.extend(
                write_partitions(
                    base_path,
                    packing,
                    state.encoding,
                    title=f"# Project: {project.name}",
                    extra_lines=[f"# Project Path: {project.resolved_path}"],
                    include_timestamp=include_timestamp,
                )
            )
            if len(packing.partitions) > 1:
                logger.info(f"  Project split into {len(packing.partitions)} files due to token limits")
            file_count += packing.unit_count
            partition_count += len(packing.partitions)
            dropped.extend(u.path for u in packing.dropped)

    except OSError as e:
        msg = f"Failed to write extraction output: {e}"
        logger.error(msg)
        return create_error_result(msg, MODE_EXTRACT, solution_path)

    summary = {
        "output_dir": output_dir,
        "ceiling": cfg["max_unit_weight"] if enabled else None,
        "dropped": dropped,
        "excluded": list(state.skipped),
        "missing_projects": list(state.missing_projects),
    }

    logger.info("Extraction completed.")
    return create_success_result(
        MODE_EXTRACT,
        solution_path,
        project_count=len(contents.projects),
        output_files=written,
        file_count=file_count,
        partition_count=partition_count,
        skipped=state.skipped + dropped,
        errors=state.errors,
        summary_extra=summary,
    )

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _validated(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")
    return cfg


def _load_solution(
        cfg: Dict[str, Any],
        mode: str,
) -> Tuple[str, ManifestContents, Optional[PipelineResult]]:
    """
    Pre-flight check and parse of the manifest.

    Returns:
        Tuple: (absolute manifest path, parsed contents, error result or None).
    """
    raw = cfg.get("solution_path") or ""
    solution_path = normalize_path(raw, "") if raw else ""
    empty = ManifestContents()

    problem = check_manifest_path(solution_path or raw)
    if problem:
        logger.error(problem)
        return solution_path, empty, create_error_result(problem, mode, raw)

    try:
        text = read_manifest_text(solution_path)
    except OSError as e:
        msg = f"Failed to read solution file {solution_path}: {e}"
        logger.error(msg)
        return solution_path, empty, create_error_result(msg, mode, solution_path)

    contents = parse_manifest(text, solution_path)
    logger.info(f"Found {len(contents.projects)} projects in solution")
    return solution_path, contents, None


def _solution_level_paths(solution_path: str, policy: FilterPolicy) -> Tuple[List[str], Optional[str]]:
    """Accepted files directly in the manifest directory, manifest excluded."""
    solution_dir = os.path.dirname(solution_path)
    manifest_key = os.path.normcase(solution_path)
    paths: List[str] = []
    try:
        with os.scandir(solution_dir) as it:
            for entry in it:
                if os.path.normcase(entry.path) == manifest_key:
                    continue
                try:
                    is_file = entry.is_file()
                except OSError:
                    continue
                if is_file and should_show_file(entry.name, policy):
                    paths.append(entry.path)
    except OSError as e:
        logger.warning(f"Error reading solution directory: {e}")
        return [], e.strerror or str(e)
    return sorted(paths), None


def _path_key(path: str) -> str:
    """Identity of a physical path: links resolved, case folded where the OS does."""
    return os.path.normcase(os.path.realpath(path))
