"""Depth-bounded traversal of a project tree into a ``ScanResult``."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from auto_readme.budget import IMPORTANT_FILE_CEILING, SOURCE_FILE_CEILING, max_content_files, read_capped
from auto_readme.classifier import classify_project
from auto_readme.config import READABLE_BARE_NAMES, READABLE_EXTENSIONS, ProjectType, ScanOptions
from auto_readme.exceptions import ScanRootError
from auto_readme.file_manipulation import Entry, list_entries, relpath
from auto_readme.importance import extension_of, is_important_directory, is_important_file, source_extensions
from auto_readme.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class ScanResult(BaseModel):
    """Everything the scan learned about a project.

    Attributes:
        root: absolute path of the scanned directory.
        files: root-relative POSIX paths in discovery order.
        directories: root-relative paths of the directories descended into.
        contents: path (or canonical key) -> text, possibly truncated.
        project_type: ecosystem decided from the root markers.
        language_tags: base language and detected frameworks.
        canonical_sources: canonical key -> path the content was read from.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path
    files: list[str] = Field(default_factory=list)
    directories: list[str] = Field(default_factory=list)
    contents: dict[str, str] = Field(default_factory=dict)
    project_type: ProjectType = ProjectType.UNKNOWN
    language_tags: list[str] = Field(default_factory=list)
    canonical_sources: dict[str, str] = Field(default_factory=dict)

    @property
    def quota(self) -> int:
        return max_content_files(self.project_type)

    @property
    def quota_reached(self) -> bool:
        return len(self.contents) >= self.quota


def is_readable(name: str) -> bool:
    """Whether a file is text we are willing to read, judged by its name."""
    low = name.lower()
    return extension_of(low) in READABLE_EXTENSIONS or low in READABLE_BARE_NAMES


def _store(result: ScanResult, entry: Entry, rel: str, ceiling: int) -> None:
    if rel in result.contents or rel in result.canonical_sources.values():
        return
    outcome = read_capped(entry.path, ceiling)
    if not outcome.ok or outcome.value is None:
        logger.warning("Skipping %s: %s (%s)", rel, outcome.failure, outcome.detail)
        return
    result.contents[rel] = outcome.value


def _visit_file(result: ScanResult, entry: Entry, rel: str, sources: tuple[str, ...]) -> None:
    important = is_important_file(entry.name)
    if result.quota_reached:
        if important:
            result.files.append(rel)
        return
    if important:
        result.files.append(rel)
        if is_readable(entry.name):
            _store(result, entry, rel, IMPORTANT_FILE_CEILING)
    elif extension_of(entry.name) in sources:
        result.files.append(rel)
        _store(result, entry, rel, SOURCE_FILE_CEILING)


def walk(
    path: Path,
    options: ScanOptions,
    result: ScanResult,
    depth: int = 0,
    entries: Sequence[Entry] | None = None,
) -> None:
    """Recursively collect files, directories and contents under ``path``.

    Entries are visited in directory-listing order, depth first. A directory is
    recorded once its listing succeeded; a failed listing or read only skips that
    entry.

    Args:
        path (Path): the directory to walk
        options (ScanOptions): ignore sets and depth bound for this scan
        result (ScanResult): the result being filled in place
        depth (int, optional): depth of ``path`` below the root. Defaults to 0.
        entries (Sequence[Entry] | None, optional): an existing listing of
            ``path``. Defaults to None, which lists it.
    """
    if depth > options.max_depth:
        return

    if entries is None:
        listing = list_entries(path)
        if not listing.ok or listing.value is None:
            logger.warning("Cannot list %s: %s (%s)", path, listing.failure, listing.detail)
            return
        entries = listing.value
    if depth > 0:
        result.directories.append(relpath(path, result.root))

    sources = source_extensions(result.project_type, result.language_tags)
    for entry in entries:
        if entry.is_dir:
            if entry.name in options.ignored_directories or not is_important_directory(entry.name):
                continue
            if depth + 1 > options.max_depth:
                continue
            walk(entry.path, options, result, depth + 1)
        elif entry.is_file:
            if entry.name in options.ignored_files:
                continue
            _visit_file(result, entry, relpath(entry.path, result.root), sources)


def scan(
    root: str | Path,
    extra_ignored_directories: Iterable[str] = (),
    extra_ignored_files: Iterable[str] = (),
) -> ScanResult:
    """Scan a project directory and return its bounded context.

    Args:
        root (str | Path): the project root
        extra_ignored_directories (Iterable[str], optional): directory names
            skipped in addition to the defaults.
        extra_ignored_files (Iterable[str], optional): file names skipped in
            addition to the defaults.

    Raises:
        ScanRootError: if ``root`` does not exist or is not a directory.

    Returns:
        ScanResult: the files, directories, contents and classification
    """
    root_path = Path(root).resolve()
    if not root_path.exists():
        raise ScanRootError(root=root_path, message="The scan root does not exist.")
    if not root_path.is_dir():
        raise ScanRootError(root=root_path, message="The scan root is not a directory.")
    listing = list_entries(root_path)
    if not listing.ok or listing.value is None:
        raise ScanRootError(root=root_path, message=f"The scan root cannot be listed: {listing.failure}.")

    options = ScanOptions.build(extra_ignored_directories, extra_ignored_files)
    classification = classify_project(root_path, listing.value)
    result = ScanResult(
        root=root_path,
        project_type=classification.project_type,
        language_tags=list(classification.language_tags),
        contents=dict(classification.contents),
        canonical_sources=dict(classification.canonical_sources),
    )
    walk(root_path, options, result, entries=listing.value)
    logger.info(
        "Scan complete",
        root=str(root_path),
        files=len(result.files),
        directories=len(result.directories),
        contents=len(result.contents),
    )
    return result
