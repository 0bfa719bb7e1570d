"""Count and size budgets bounding how much of a project is read."""

from __future__ import annotations

from typing import TYPE_CHECKING

from auto_readme.config import ProjectType
from auto_readme.file_manipulation import Outcome, read_bytes_capped

if TYPE_CHECKING:
    from pathlib import Path

BASE_CONTENT_FILES = 50

CONTENT_FILES_BONUS: dict[ProjectType, int] = {
    ProjectType.NODE: 20,
    ProjectType.JAVA: 15,
    ProjectType.PYTHON: 10,
    ProjectType.GO: 10,
    ProjectType.RUST: 5,
}

MAX_EXCERPTS = 10

IMPORTANT_FILE_CEILING = 50 * 1024
SOURCE_FILE_CEILING = 30 * 1024

TRUNCATION_MARKER = "\n... [file truncated due to size]"


def max_content_files(project_type: ProjectType) -> int:
    """Maximum number of files whose content is kept for a project type."""
    return BASE_CONTENT_FILES + CONTENT_FILES_BONUS.get(project_type, 0)


def read_capped(path: Path, ceiling: int) -> Outcome[str]:
    """Read a text file, keeping at most ``ceiling`` bytes.

    Oversized files keep their leading ``ceiling`` bytes followed by
    ``TRUNCATION_MARKER``; truncation is still a successful read.

    Args:
        path (Path): the file to read
        ceiling (int): the byte limit for this file

    Returns:
        Outcome[str]: the decoded text, or the read failure
    """
    raw = read_bytes_capped(path, ceiling)
    if not raw.ok or raw.value is None:
        return Outcome(failure=raw.failure, detail=raw.detail)
    data, truncated = raw.value
    text = data.decode("utf-8", errors="replace")
    if truncated:
        text += TRUNCATION_MARKER
    return Outcome.success(text)
