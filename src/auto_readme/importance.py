"""Pure predicates deciding which files and directories matter for a README.

Pattern tables are keyed by project type (or by language tag for framework
extras) and hold compiled regular expressions in priority order.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from auto_readme.config import (
    IMPORTANT_EXTENSIONS,
    IMPORTANT_FILE_NAMES,
    UNIMPORTANT_DIRECTORIES,
    ProjectType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


def _basename_rule(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _suffix_rule(pattern: str) -> re.Pattern[str]:
    # Matches the end of a path, so "DemoApplication.java" also matches "Application\.java".
    return re.compile(rf"{pattern}$", re.IGNORECASE)


PRIORITY_BASENAMES: dict[ProjectType, tuple[str, ...]] = {
    ProjectType.NODE: (r"index\.(js|ts)", r"main\.(js|ts)", r"app\.(js|ts)"),
    ProjectType.PYTHON: (r"main\.py", r"app\.py", r"__init__\.py"),
    ProjectType.JAVA: (r"main\.java", r"application\.java"),
    ProjectType.RUST: (r"main\.rs", r"lib\.rs"),
    ProjectType.GO: (r"main\.go",),
    ProjectType.RUBY: (r"main\.rb", r"application\.rb"),
    ProjectType.PHP: (r"index\.php",),
}

FRAMEWORK_BASENAMES: dict[str, tuple[str, ...]] = {
    "react": (r"app\.(jsx|tsx)", r"index\.(jsx|tsx)"),
}

# Broader than the basename rules: matched against the end of the whole path.
MAIN_FILE_SUFFIXES: dict[ProjectType, tuple[str, ...]] = {
    ProjectType.NODE: (r"index\.(js|ts)", r"main\.(js|ts)", r"app\.(js|ts)"),
    ProjectType.PYTHON: (r"main\.py", r"__init__\.py", r"app\.py"),
    ProjectType.JAVA: (r"Main\.java", r"Application\.java"),
    ProjectType.RUST: (r"main\.rs", r"lib\.rs"),
    ProjectType.GO: (r"main\.go",),
    ProjectType.RUBY: (r"main\.rb", r"application\.rb"),
    ProjectType.PHP: (r"index\.php",),
}

FRAMEWORK_MAIN_SUFFIXES: dict[str, tuple[str, ...]] = {
    "react": (r"App\.(js|tsx)", r"index\.(js|tsx)"),
}

GENERIC_MAIN_FILES: tuple[str, ...] = (r"README\.md", r"CONTRIBUTING\.md")

PRIORITY_PATTERNS: dict[ProjectType, tuple[re.Pattern[str], ...]] = {
    ptype: tuple(_basename_rule(p) for p in patterns) for ptype, patterns in PRIORITY_BASENAMES.items()
}
FRAMEWORK_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    tag: tuple(_basename_rule(p) for p in patterns) for tag, patterns in FRAMEWORK_BASENAMES.items()
}
MAIN_FILE_PATTERNS: dict[ProjectType, tuple[re.Pattern[str], ...]] = {
    ptype: tuple(_suffix_rule(p) for p in patterns) for ptype, patterns in MAIN_FILE_SUFFIXES.items()
}
FRAMEWORK_MAIN_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    tag: tuple(_suffix_rule(p) for p in patterns) for tag, patterns in FRAMEWORK_MAIN_SUFFIXES.items()
}
GENERIC_MAIN_PATTERNS: tuple[re.Pattern[str], ...] = tuple(_suffix_rule(p) for p in GENERIC_MAIN_FILES)

SOURCE_EXTENSIONS: dict[ProjectType, tuple[str, ...]] = {
    ProjectType.NODE: (".js", ".jsx", ".ts", ".tsx"),
    ProjectType.PYTHON: (".py",),
    ProjectType.JAVA: (".java",),
    ProjectType.RUST: (".rs",),
    ProjectType.GO: (".go",),
    ProjectType.RUBY: (".rb",),
    ProjectType.PHP: (".php",),
}
REACT_SOURCE_EXTENSIONS: tuple[str, ...] = (".jsx", ".tsx", ".js", ".ts")
FALLBACK_SOURCE_EXTENSIONS: tuple[str, ...] = (".js", ".py", ".java", ".c", ".cpp", ".h", ".go", ".rb", ".php", ".cs")


def extension_of(path: str) -> str:
    """Return the lowercased suffix of a POSIX path ("" when there is none)."""
    return PurePosixPath(path).suffix.lower()


def is_important_file(path: str) -> bool:
    """Check whether a file is likely to matter when describing a project.

    A file is important when its basename is a well-known root file (manifests,
    license, build and CI files, governance docs), when its extension is a
    documentation or source extension, or when it is a ``main.*`` / ``index.*``
    file with such an extension.

    Args:
        path: the file path (only the basename is inspected)

    Returns:
        bool: True if the file is considered important
    """
    name = PurePosixPath(path.replace("\\", "/")).name.lower()
    ext = PurePosixPath(name).suffix
    if name in IMPORTANT_FILE_NAMES:
        return True
    if ext in IMPORTANT_EXTENSIONS:
        return True
    return name.startswith(("main.", "index.")) and ext in IMPORTANT_EXTENSIONS


def is_important_directory(name: str) -> bool:
    """Reject dependency caches, VCS metadata, build output and temp directories.

    Unknown names are accepted; the walker's depth bound limits the descent.
    """
    return name.lower() not in UNIMPORTANT_DIRECTORIES


def _tagged(table: dict[str, tuple[re.Pattern[str], ...]], tags: Iterable[str]) -> list[re.Pattern[str]]:
    tag_set = set(tags)
    return [rule for tag, rules in table.items() if tag in tag_set for rule in rules]


def priority_patterns(project_type: ProjectType, tags: Iterable[str] = ()) -> list[re.Pattern[str]]:
    """Ordered basename rules for the canonical entry points of an ecosystem."""
    tags = list(tags)
    return [*PRIORITY_PATTERNS.get(project_type, ()), *_tagged(FRAMEWORK_PATTERNS, tags)]


def main_file_patterns(project_type: ProjectType, tags: Iterable[str] = ()) -> list[re.Pattern[str]]:
    """Path rules for main files: the priority set plus generic documentation files."""
    tags = list(tags)
    return [
        *MAIN_FILE_PATTERNS.get(project_type, ()),
        *_tagged(FRAMEWORK_MAIN_PATTERNS, tags),
        *GENERIC_MAIN_PATTERNS,
    ]


def source_extensions(project_type: ProjectType, tags: Iterable[str] = ()) -> tuple[str, ...]:
    """Extensions treated as this project's source code, React component files first."""
    if project_type is ProjectType.NODE and "react" in set(tags):
        return REACT_SOURCE_EXTENSIONS
    return SOURCE_EXTENSIONS.get(project_type, FALLBACK_SOURCE_EXTENSIONS)
