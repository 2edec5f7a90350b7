from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the manifest conventions, default extension sets, build-artifact
directory names and the binary classification table shared by the tree and
extraction pipelines.
"""

from typing import FrozenSet, Tuple

# -----------------------------------------------------------------------------
# MANIFEST CONVENTIONS
# -----------------------------------------------------------------------------

MANIFEST_EXTENSION = ".sln"
PROJECT_FILE_EXTENSION = ".csproj"
NESTING_SECTION_START = "GlobalSection(NestedProjects)"
NESTING_SECTION_END = "EndGlobalSection"

HIDDEN_MARKER = "."

# -----------------------------------------------------------------------------
# DEFAULT EXTENSION SETS
# -----------------------------------------------------------------------------

DEFAULT_TREE_EXTENSIONS: Tuple[str, ...] = (
    ".cs", ".csproj", ".sln", ".json", ".xml", ".config",
    ".resx", ".razor", ".cshtml", ".xaml", ".txt", ".md",
    ".yaml", ".yml", ".props", ".targets",
)

DEFAULT_EXTRACTION_EXTENSIONS: Tuple[str, ...] = DEFAULT_TREE_EXTENSIONS + (
    ".js", ".ts", ".css", ".scss", ".html", ".htm",
)

# -----------------------------------------------------------------------------
# TRAVERSAL POLICY TABLES
# -----------------------------------------------------------------------------

TREE_BUILD_ARTIFACT_DIRS: FrozenSet[str] = frozenset({"bin", "obj"})
EXTRACTION_BUILD_ARTIFACT_DIRS: FrozenSet[str] = frozenset({"bin", "obj", "node_modules", ".git"})

# Dotfiles that are still extracted when hidden entries are off
EXTRACTION_HIDDEN_ALLOWLIST: FrozenSet[str] = frozenset({".gitignore", ".editorconfig"})

BINARY_EXTENSIONS: FrozenSet[str] = frozenset({
    ".exe", ".dll", ".bin", ".obj", ".pdb", ".lib", ".so", ".dylib",
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".ico", ".tiff",
    ".pdf", ".zip", ".rar", ".7z", ".tar", ".gz",
    ".mp3", ".mp4", ".wav", ".avi", ".mov",
    ".nupkg", ".vsix",
})

# -----------------------------------------------------------------------------
# EXTRACTION DEFAULTS & OUTPUT CONVENTIONS
# -----------------------------------------------------------------------------

DEFAULT_MAX_DEPTH = 10
DEFAULT_EXTRACTION_DEPTH = 64
DEFAULT_MAX_FILE_SIZE_MB = 1.0
DEFAULT_MAX_UNIT_WEIGHT = 190_000
DEFAULT_ENCODING = "utf-8"
# Inputs are always decoded as UTF-8 (BOM stripped); `encoding` applies to outputs
SOURCE_ENCODING = "utf-8-sig"
DEFAULT_TOKENIZER = "heuristic"

BINARY_PLACEHOLDER = "# [Binary file - content not extracted]"
READ_ERROR_PLACEHOLDER = "# [Error reading file: {reason}]"

EXTRACTION_TITLE = "# Code Extraction from Solution"
HEADER_RULE_WIDTH = 80
SAFE_NAME_MAX_LENGTH = 100

EXTRACTED_CODE_SUFFIX = "_extracted_code.txt"
EXTRACTED_LAYERS_SUFFIX = "_extracted_layers"
SOLUTION_LEVEL_PREFIX = "00_Solution_"
