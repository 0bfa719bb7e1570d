from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from enum import StrEnum, auto
from pathlib import Path
from typing import Generic, TypeVar

from auto_readme.exceptions import FileAccessError, ReadmeExistsError
from auto_readme.logging import logger

T = TypeVar("T")


class FailureKind(StrEnum):
    """Why a single filesystem entry could not be used."""

    NOT_FOUND = auto()
    PERMISSION_DENIED = auto()
    IS_A_DIRECTORY = auto()
    NOT_A_DIRECTORY = auto()
    OTHER = auto()


def failure_kind(exc: OSError) -> FailureKind:
    """Map an ``OSError`` to the matching ``FailureKind``.

    Args:
        exc (OSError): the error raised by a filesystem call

    Returns:
        FailureKind: the category of the failure, ``OTHER`` when unrecognised
    """
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return FailureKind.NOT_FOUND
    if isinstance(exc, PermissionError) or exc.errno in {errno.EACCES, errno.EPERM}:
        return FailureKind.PERMISSION_DENIED
    if isinstance(exc, IsADirectoryError):
        return FailureKind.IS_A_DIRECTORY
    if isinstance(exc, NotADirectoryError):
        return FailureKind.NOT_A_DIRECTORY
    return FailureKind.OTHER


FAILURE_MESSAGES: dict[FailureKind, str] = {
    FailureKind.NOT_FOUND: "File or directory not found.",
    FailureKind.PERMISSION_DENIED: "Permission denied. Cannot access file or directory.",
    FailureKind.IS_A_DIRECTORY: "Expected a file but found a directory.",
}


def describe_failure(exc: OSError) -> str:
    """Turn a filesystem error into a message a user can act on."""
    return FAILURE_MESSAGES.get(failure_kind(exc), f"File system error: {exc.strerror or exc}")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of one filesystem operation: a value, or a failure kind.

    Attributes:
        value: the produced value when the operation succeeded.
        failure: the failure category, None on success.
        detail: the underlying error message on failure.
    """

    value: T | None = None
    failure: FailureKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def from_error(cls, exc: OSError) -> Outcome[T]:
        return cls(failure=failure_kind(exc), detail=str(exc))


@dataclass(frozen=True)
class Entry:
    """A directory entry, typed without following symlinks."""

    name: str
    path: Path
    is_dir: bool
    is_file: bool


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def list_entries(directory: Path) -> Outcome[list[Entry]]:
    """List the immediate entries of a directory in the order the OS returns them.

    Args:
        directory (Path): the directory to list

    Returns:
        Outcome[list[Entry]]: the entries, or the failure that prevented listing
    """
    try:
        with os.scandir(directory) as it:
            entries = [
                Entry(
                    name=de.name,
                    path=Path(de.path),
                    is_dir=de.is_dir(follow_symlinks=False),
                    is_file=de.is_file(follow_symlinks=False),
                )
                for de in it
            ]
    except OSError as e:
        return Outcome.from_error(e)
    return Outcome.success(entries)


def read_bytes_capped(path: Path, limit: int) -> Outcome[tuple[bytes, bool]]:
    """Read at most ``limit`` bytes from the start of a file.

    Args:
        path (Path): the file to read
        limit (int): the maximum number of bytes kept

    Returns:
        Outcome[tuple[bytes, bool]]: the leading bytes and whether the file was
            longer than ``limit``, or the failure that prevented reading
    """
    try:
        with path.open("rb") as f:
            data = f.read(limit + 1)
    except OSError as e:
        return Outcome.from_error(e)
    if len(data) > limit:
        return Outcome.success((data[:limit], True))
    return Outcome.success((data, False))


def write_readme(path: Path, text: str, *, overwrite: bool = False) -> Path:
    """Write the generated README to ``path``.

    Args:
        path (Path): destination of the README
        text (str): the document to write
        overwrite (bool, optional): replace an existing file. Defaults to False.

    Raises:
        ReadmeExistsError: if the file exists and ``overwrite`` is False.
        FileAccessError: if the file cannot be written.

    Returns:
        Path: the written path
    """
    if path.exists() and not overwrite:
        raise ReadmeExistsError(path=path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error("Cannot write %s: %s", path, e)
        raise FileAccessError(path=path, message=describe_failure(e)) from e
    logger.info("README written", path=str(path), chars=len(text))
    return path
