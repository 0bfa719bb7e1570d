from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from auto_readme.budget import IMPORTANT_FILE_CEILING, read_capped
from auto_readme.config import (
    BASE_LANGUAGE_TAG,
    CANONICAL_MANIFEST_NAMES,
    DOCKER_FILE_NAMES,
    DOCKER_TAG,
    LICENSE_KEY,
    NODE_FRAMEWORK_TAGS,
    PROJECT_MARKERS,
    README_KEY,
    ProjectType,
)
from auto_readme.file_manipulation import list_entries
from auto_readme.logging import logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from auto_readme.file_manipulation import Entry


class Classification(BaseModel):
    """What the root directory alone tells about a project.

    Attributes:
        project_type: the ecosystem of the first marker found.
        language_tags: base language plus frameworks detected in the manifest.
        contents: manifest, README and LICENSE text under their canonical keys.
        canonical_sources: canonical key -> root-relative path it was read from.
    """

    project_type: ProjectType = ProjectType.UNKNOWN
    language_tags: list[str] = Field(default_factory=list)
    contents: dict[str, str] = Field(default_factory=dict)
    canonical_sources: dict[str, str] = Field(default_factory=dict)

    def add_tag(self, tag: str) -> None:
        if tag not in self.language_tags:
            self.language_tags.append(tag)


def node_manifest_tags(manifest: dict[str, Any]) -> list[str]:
    """Collect framework tags from the runtime and dev dependencies of a ``package.json``.

    Args:
        manifest (dict[str, Any]): the parsed manifest

    Returns:
        list[str]: tags in ``NODE_FRAMEWORK_TAGS`` order, without duplicates
    """
    names: set[str] = set()
    for group in ("dependencies", "devDependencies"):
        deps = manifest.get(group)
        if isinstance(deps, dict):
            names.update(str(k) for k in deps)
    tags: list[str] = []
    for dep, tag in NODE_FRAMEWORK_TAGS.items():
        if dep in names and tag not in tags:
            tags.append(tag)
    return tags


def classify_project(root: Path, entries: Sequence[Entry] | None = None) -> Classification:
    """Infer the project type from the root's immediate files.

    Markers are checked in ``PROJECT_MARKERS`` order and the first one present
    wins. The matched manifest, an existing README and a license file are
    captured under canonical keys, capped like any other important file. A
    Docker file at the root adds a ``docker`` tag to a recognised project. Any
    error degrades the result instead of propagating.

    Args:
        root (Path): the project root
        entries (Sequence[Entry] | None, optional): an existing listing of
            ``root``. Defaults to None, which lists it.

    Returns:
        Classification: project type, tags and captured root documents
    """
    result = Classification()
    if entries is None:
        listing = list_entries(root)
        if not listing.ok or listing.value is None:
            logger.warning("Cannot list project root %s: %s", root, listing.detail)
            return result
        entries = listing.value

    by_name = {e.name.lower(): e for e in entries if e.is_file}

    for marker, ptype in PROJECT_MARKERS:
        entry = by_name.get(marker)
        if entry is None:
            continue
        result.project_type = ptype
        result.add_tag(BASE_LANGUAGE_TAG[ptype])
        text = read_capped(entry.path, IMPORTANT_FILE_CEILING)
        if not text.ok or text.value is None:
            logger.warning("Cannot read manifest %s: %s", entry.name, text.failure)
            result.project_type = ProjectType.UNKNOWN
            result.language_tags.clear()
            break
        key = CANONICAL_MANIFEST_NAMES[marker]
        result.contents[key] = text.value
        result.canonical_sources[key] = entry.name
        if ptype is ProjectType.NODE:
            try:
                manifest = json.loads(text.value)
            except json.JSONDecodeError as e:
                logger.warning("Error parsing %s: %s", entry.name, e)
            else:
                if isinstance(manifest, dict):
                    for tag in node_manifest_tags(manifest):
                        result.add_tag(tag)
        break

    if result.project_type is not ProjectType.UNKNOWN and any(name in by_name for name in DOCKER_FILE_NAMES):
        result.add_tag(DOCKER_TAG)

    readme = by_name.get("readme.md")
    licenses = sorted(name for name in by_name if name.startswith("license"))
    captured = [(README_KEY, readme), (LICENSE_KEY, by_name[licenses[0]] if licenses else None)]
    for key, entry in captured:
        if entry is None:
            continue
        text = read_capped(entry.path, IMPORTANT_FILE_CEILING)
        if not text.ok or text.value is None:
            logger.warning("Cannot read %s: %s", entry.name, text.failure)
            continue
        result.contents[key] = text.value
        result.canonical_sources[key] = entry.name

    logger.info(
        "Project classified",
        project_type=str(result.project_type),
        language_tags=result.language_tags,
    )
    return result
