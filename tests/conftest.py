from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A sample solution on disk shared by the pipeline and CLI tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

# -----------------------------------------------------------------------------
# Sample Data
# -----------------------------------------------------------------------------

FOLDER_TYPE = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"
CSHARP_TYPE = "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}"

SRC_FOLDER_ID = "{F1000000-0000-0000-0000-000000000001}"
APP_ID = "{A1000000-0000-0000-0000-000000000001}"
LIB_ID = "{B1000000-0000-0000-0000-000000000001}"
GHOST_ID = "{C1000000-0000-0000-0000-000000000001}"

SAMPLE_SLN = f"""
Microsoft Visual Studio Solution File, Format Version 12.00
# Visual Studio Version 17
Project("{FOLDER_TYPE}") = "Src", "Src", "{SRC_FOLDER_ID}"
EndProject
Project("{CSHARP_TYPE}") = "App", "Src\\App\\App.csproj", "{APP_ID}"
EndProject
Project("{CSHARP_TYPE}") = "Lib", "Lib\\Lib.csproj", "{LIB_ID}"
EndProject
Project("{CSHARP_TYPE}") = "Ghost", "Ghost\\Ghost.csproj", "{GHOST_ID}"
EndProject
Global
\tGlobalSection(SolutionConfigurationPlatforms) = preSolution
\t\tDebug|Any CPU = Debug|Any CPU
\tEndGlobalSection
\tGlobalSection(NestedProjects) = preSolution
\t\t{APP_ID.lower()} = {SRC_FOLDER_ID}
\t\t{GHOST_ID} = {SRC_FOLDER_ID.lower()}
\tEndGlobalSection
EndGlobal
"""

# Expected rendering below the 'Solution Structure:' line
SAMPLE_TREE = [
    "Sample.sln",
    "├── Src/",
    "│   ├── App",
    "│   │   ├── App.csproj",
    "│   │   ├── Program.cs",
    "│   │   └── Services/",
    "│   │       └── Greeter.cs",
    "│   └── Ghost (NOT FOUND)",
    "└── Lib",
    "    ├── Lib.cs",
    "    └── Lib.csproj",
]


def write_file(path: Path, content: str = "") -> Path:
    """Create `path` (and its parents) with the given text."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path

# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def sample_solution(tmp_path: Path) -> Path:
    """
    Create a small solution on disk and return the manifest path.

    Structure:
    /solution
      Sample.sln
      README.md
      /Src/App
        App.csproj, Program.cs, Services/Greeter.cs
        .hidden.cs, logo.png, notes.log, bin/, obj/
      /Lib
        Lib.csproj, Lib.cs
    (Ghost/Ghost.csproj is declared but missing.)
    """
    root = tmp_path / "solution"
    sln = write_file(root / "Sample.sln", SAMPLE_SLN)
    write_file(root / "README.md", "# Sample")

    app = root / "Src" / "App"
    write_file(app / "App.csproj", "<Project Sdk=\"Microsoft.NET.Sdk\" />")
    write_file(app / "Program.cs", "class Program { static void Main() {} }")
    write_file(app / "Services" / "Greeter.cs", "class Greeter {}")
    write_file(app / ".hidden.cs", "class Hidden {}")
    write_file(app / "notes.log", "log")
    (app / "logo.png").write_bytes(b"\x89PNG\r\n")
    write_file(app / "bin" / "Debug" / "App.cs", "class Built {}")
    write_file(app / "obj" / "Generated.cs", "class Generated {}")

    lib = root / "Lib"
    write_file(lib / "Lib.csproj", "<Project />")
    write_file(lib / "Lib.cs", "class Lib {}")

    return sln


@pytest.fixture
def sample_tree() -> List[str]:
    """Expected tree lines of the sample solution, root line included."""
    return list(SAMPLE_TREE)


@pytest.fixture
def sample_ids() -> Dict[str, str]:
    """Normalized identifiers used by the sample manifest."""
    return {
        "src": SRC_FOLDER_ID.strip("{}"),
        "app": APP_ID.strip("{}"),
        "lib": LIB_ID.strip("{}"),
        "ghost": GHOST_ID.strip("{}"),
    }


@pytest.fixture
def base_config(sample_solution: Path) -> Dict[str, Any]:
    """Minimal configuration pointing at the sample solution."""
    return {
        "solution_path": str(sample_solution),
        "include_timestamp": False,
    }
