from __future__ import annotations

from enum import StrEnum, auto
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterable


class ProjectType(StrEnum):
    """Ecosystem a scanned project belongs to.

    Decided once from the marker files found at the project root.
    """

    NODE = auto()
    PYTHON = auto()
    JAVA = auto()
    RUST = auto()
    GO = auto()
    RUBY = auto()
    PHP = auto()
    UNKNOWN = auto()


# Ordered: the first marker present at the root decides the project type.
PROJECT_MARKERS: tuple[tuple[str, ProjectType], ...] = (
    ("package.json", ProjectType.NODE),
    ("requirements.txt", ProjectType.PYTHON),
    ("setup.py", ProjectType.PYTHON),
    ("pyproject.toml", ProjectType.PYTHON),
    ("pom.xml", ProjectType.JAVA),
    ("build.gradle", ProjectType.JAVA),
    ("cargo.toml", ProjectType.RUST),
    ("go.mod", ProjectType.GO),
    ("gemfile", ProjectType.RUBY),
    ("composer.json", ProjectType.PHP),
)

# Key under which a root manifest's text is stored, whatever its on-disk casing.
CANONICAL_MANIFEST_NAMES: dict[str, str] = {
    "package.json": "package.json",
    "requirements.txt": "requirements.txt",
    "setup.py": "setup.py",
    "pyproject.toml": "pyproject.toml",
    "pom.xml": "pom.xml",
    "build.gradle": "build.gradle",
    "cargo.toml": "Cargo.toml",
    "go.mod": "go.mod",
    "gemfile": "Gemfile",
    "composer.json": "composer.json",
}

README_KEY = "README.md"
LICENSE_KEY = "LICENSE"

DOCKER_TAG = "docker"
DOCKER_FILE_NAMES = frozenset({"dockerfile", "docker-compose.yml"})

BASE_LANGUAGE_TAG: dict[ProjectType, str] = {
    ProjectType.NODE: "javascript",
    ProjectType.PYTHON: "python",
    ProjectType.JAVA: "java",
    ProjectType.RUST: "rust",
    ProjectType.GO: "go",
    ProjectType.RUBY: "ruby",
    ProjectType.PHP: "php",
}

# Node dependency name -> language tag. Checked in both dependency groups.
NODE_FRAMEWORK_TAGS: dict[str, str] = {
    "typescript": "typescript",
    "react": "react",
    "vue": "vue",
    "angular": "angular",
    "@angular/core": "angular",
    "express": "express",
    "next": "nextjs",
}

IMPORTANT_FILE_NAMES = frozenset(
    {
        "readme.md",
        "license",
        "license.md",
        "license.txt",
        "package.json",
        "setup.py",
        "requirements.txt",
        "pyproject.toml",
        "cargo.toml",
        "gemfile",
        "composer.json",
        "go.mod",
        "dockerfile",
        "docker-compose.yml",
        "makefile",
        "cmakelists.txt",
        ".gitignore",
        ".travis.yml",
        "contributing.md",
        "changelog.md",
        "history.md",
        "code_of_conduct.md",
        "main.py",
        "app.py",
    },
)

IMPORTANT_EXTENSIONS = frozenset(
    {
        ".md",
        ".rst",
        ".txt",
        ".json",
        ".yaml",
        ".yml",
        ".toml",
        ".ini",
        ".cfg",
        ".py",
        ".js",
        ".ts",
        ".java",
        ".c",
        ".cpp",
        ".h",
        ".hpp",
        ".go",
        ".rb",
        ".php",
        ".cs",
        ".swift",
        ".kt",
        ".rs",
        ".html",
        ".css",
    },
)

# Only these are ever read; anything else is listed but treated as binary.
READABLE_EXTENSIONS = IMPORTANT_EXTENSIONS | {".jsx", ".tsx"}
READABLE_BARE_NAMES = frozenset({"dockerfile", "makefile", "license", "gemfile", "rakefile", "procfile"})

UNIMPORTANT_DIRECTORIES = frozenset(
    {
        "node_modules",
        ".git",
        ".github",
        ".vscode",
        ".idea",
        "venv",
        "env",
        ".env",
        "__pycache__",
        ".pytest_cache",
        "build",
        "dist",
        "out",
        "target",
        "bin",
        "obj",
        "coverage",
        "logs",
        "tmp",
        "temp",
        "cache",
    },
)

CONFIG_FILE_NAME = ".auto-readme.yaml"

DEFAULT_IGNORED_DIRECTORIES: tuple[str, ...] = (".git", "node_modules", ".vscode", ".idea", "dist", "build", "out")
DEFAULT_IGNORED_FILES: tuple[str, ...] = (
    ".DS_Store",
    ".gitignore",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    CONFIG_FILE_NAME,
)

MAX_DEPTH = 5


class ScanOptions(BaseModel):
    """Ignore sets for one scan: built-in defaults merged with caller extras.

    Built once per invocation and passed down the whole walk.
    """

    model_config = ConfigDict(frozen=True)

    ignored_directories: frozenset[str] = Field(default=frozenset(DEFAULT_IGNORED_DIRECTORIES))
    ignored_files: frozenset[str] = Field(default=frozenset(DEFAULT_IGNORED_FILES))
    max_depth: int = Field(default=MAX_DEPTH, ge=0, description="Deepest directory level visited.")

    @classmethod
    def build(
        cls,
        extra_directories: Iterable[str] = (),
        extra_files: Iterable[str] = (),
    ) -> ScanOptions:
        """Union the default ignore lists with caller-supplied names."""
        dirs = {d.strip() for d in extra_directories if d and d.strip()}
        files = {f.strip() for f in extra_files if f and f.strip()}
        return cls(
            ignored_directories=frozenset(DEFAULT_IGNORED_DIRECTORIES) | dirs,
            ignored_files=frozenset(DEFAULT_IGNORED_FILES) | files,
        )
