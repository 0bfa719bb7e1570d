from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from auto_readme.budget import MAX_EXCERPTS
from auto_readme.importance import extension_of, main_file_patterns, priority_patterns, source_extensions

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from auto_readme.config import ProjectType


class Excerpt(BaseModel):
    """A source sample embedded in the generation prompt."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


def select_excerpts(
    contents: Mapping[str, str],
    project_type: ProjectType,
    language_tags: Iterable[str] = (),
    limit: int = MAX_EXCERPTS,
) -> list[Excerpt]:
    """Pick the source samples that best represent a project.

    Three passes over ``contents`` keys, each skipping paths already chosen:

    1) basenames matching the priority patterns, in pattern order;
    2) paths matching the main-file patterns (including generic docs);
    3) any path with one of the project's source extensions.

    Within a pattern, paths keep their ``contents`` order. Selection stops as
    soon as ``limit`` excerpts are chosen.

    Args:
        contents (Mapping[str, str]): path -> content from a completed scan
        project_type (ProjectType): the scanned project's type
        language_tags (Iterable[str], optional): detected language tags
        limit (int, optional): maximum number of excerpts. Defaults to MAX_EXCERPTS.

    Returns:
        list[Excerpt]: ordered excerpts without repeated paths
    """
    tags = list(language_tags)
    paths = list(contents)
    chosen: dict[str, Excerpt] = {}

    def take(path: str) -> bool:
        if len(chosen) >= limit:
            return False
        if path not in chosen:
            chosen[path] = Excerpt(path=path, content=contents[path])
        return len(chosen) < limit

    for rule in priority_patterns(project_type, tags):
        for path in paths:
            if rule.fullmatch(PurePosixPath(path).name) and not take(path):
                return list(chosen.values())

    for rule in main_file_patterns(project_type, tags):
        for path in paths:
            if rule.search(path) and not take(path):
                return list(chosen.values())

    exts = source_extensions(project_type, tags)
    for path in paths:
        if extension_of(path) in exts and not take(path):
            return list(chosen.values())

    return list(chosen.values())
