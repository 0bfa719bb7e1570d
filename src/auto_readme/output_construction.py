from __future__ import annotations

import io
from typing import TYPE_CHECKING

from auto_readme.config import README_KEY, ProjectType
from auto_readme.importance import extension_of

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from auto_readme.selector import Excerpt
    from auto_readme.walker import ScanResult

COMMON_IMPORTANT_FILES: tuple[str, ...] = ("LICENSE", "CONTRIBUTING.md", "CODE_OF_CONDUCT.md")

TYPE_IMPORTANT_FILES: dict[ProjectType, tuple[str, ...]] = {
    ProjectType.NODE: ("package.json", "tsconfig.json", "webpack.config.js", ".npmrc", ".npmignore"),
    ProjectType.PYTHON: ("requirements.txt", "setup.py", "pyproject.toml", "Pipfile", "app.py", "main.py"),
    ProjectType.JAVA: ("pom.xml", "build.gradle", "settings.gradle"),
    ProjectType.RUST: ("Cargo.toml",),
    ProjectType.GO: ("go.mod", "go.sum"),
    ProjectType.RUBY: ("Gemfile", "Rakefile"),
    ProjectType.PHP: ("composer.json", "composer.lock"),
}

README_SECTIONS: tuple[str, ...] = (
    "Project title and description",
    "Installation instructions",
    "Usage examples",
    "Features",
    "Dependencies",
    "License information (if available)",
    "Any other relevant sections based on the project structure",
)

_FENCE_LANGUAGE: dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".java": "java",
    ".rs": "rust",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".md": "markdown",
    ".json": "json",
    ".toml": "toml",
}


def important_files_for_project_type(project_type: ProjectType) -> list[str]:
    """File names worth quoting in full for a project type (licence and governance first)."""
    return [*COMMON_IMPORTANT_FILES, *TYPE_IMPORTANT_FILES.get(project_type, ())]


def find_content_key(contents: Mapping[str, str], file_name: str) -> str | None:
    """Find the ``contents`` key for a file name, at the root or in any directory.

    Args:
        contents (Mapping[str, str]): scanned contents
        file_name (str): the file name to look for, compared case-insensitively

    Returns:
        str | None: the first matching key, or None
    """
    target = file_name.lower()
    for key in contents:
        low = key.lower()
        if low == target or low.endswith("/" + target):
            return key
    return None


def format_excerpts(excerpts: Sequence[Excerpt]) -> str:
    """Render excerpts as fenced code blocks labelled with their path."""
    out = io.StringIO()
    for ex in excerpts:
        lang = _FENCE_LANGUAGE.get(extension_of(ex.path), "")
        out.write(f"Source code ({ex.path}):\n```{lang}\n{ex.content}\n```\n\n")
    return out.getvalue()


def build_important_contents(result: ScanResult, excerpts: Sequence[Excerpt]) -> str:
    """Collect manifest, existing README, per-type important files and excerpts.

    A file already quoted is not repeated, whichever section quoted it first.
    """
    out = io.StringIO()
    quoted: set[str] = set()
    contents = result.contents

    for name in important_files_for_project_type(result.project_type):
        key = find_content_key(contents, name)
        if key is None or key in quoted or not contents[key]:
            continue
        out.write(f"{name} content:\n{contents[key]}\n\n")
        quoted.add(key)

    readme = contents.get(README_KEY)
    if readme and README_KEY not in quoted:
        out.write(f"Existing README.md content (for reference):\n{readme}\n\n")
        quoted.add(README_KEY)

    out.write(format_excerpts([ex for ex in excerpts if ex.path not in quoted]))
    return out.getvalue()


def build_prompt(result: ScanResult, excerpts: Sequence[Excerpt], user_context: str = "") -> str:
    """Build the README generation prompt from a scan.

    Args:
        result (ScanResult): the completed scan
        excerpts (Sequence[Excerpt]): source samples from ``select_excerpts``
        user_context (str, optional): free text supplied by the user

    Returns:
        str: the full prompt text
    """
    out = io.StringIO()
    out.write("You are an expert developer tasked with creating a comprehensive README.md file for a project.\n")
    out.write(
        "Based on the following project structure and file contents, generate a well-structured README.md file.\n\n",
    )
    out.write(f"Project Type: {result.project_type}\n")
    out.write(f"Main Languages/Frameworks: {', '.join(result.language_tags)}\n\n")
    out.write("Project Files:\n")
    out.write("\n".join(result.files))
    out.write("\n\nProject Directories:\n")
    out.write("\n".join(result.directories))
    out.write("\n\nImportant File Contents:\n")
    out.write(build_important_contents(result, excerpts))
    out.write("\nAdditional context from the user:\n")
    out.write(user_context.strip())
    out.write("\n\nPlease generate a comprehensive README.md file that includes:\n")
    for idx, section in enumerate(README_SECTIONS, start=1):
        out.write(f"{idx}. {section}\n")
    out.write("\nFormat the README using proper Markdown syntax.\n")
    return out.getvalue()
