from pathlib import Path

import pytest

from auto_readme.config import ProjectType
from auto_readme.output_construction import (
    build_prompt,
    find_content_key,
    format_excerpts,
    important_files_for_project_type,
)
from auto_readme.selector import Excerpt
from auto_readme.walker import ScanResult


def _result(tmp_path: Path) -> ScanResult:
    return ScanResult(
        root=tmp_path,
        files=["package.json", "README.md", "src/index.js"],
        directories=["src"],
        contents={
            "package.json": '{"name": "demo"}',
            "README.md": "# Old",
            "src/index.js": "console.log(1)",
        },
        project_type=ProjectType.NODE,
        language_tags=["javascript", "react"],
    )


@pytest.mark.unit
def test_important_files_for_project_type() -> None:
    assert important_files_for_project_type(ProjectType.RUST) == [
        "LICENSE",
        "CONTRIBUTING.md",
        "CODE_OF_CONDUCT.md",
        "Cargo.toml",
    ]
    assert important_files_for_project_type(ProjectType.UNKNOWN) == ["LICENSE", "CONTRIBUTING.md", "CODE_OF_CONDUCT.md"]


@pytest.mark.unit
def test_find_content_key_matches_nested_and_case_insensitive() -> None:
    contents = {"docs/contributing.md": "c", "go.mod": "m"}

    assert find_content_key(contents, "CONTRIBUTING.md") == "docs/contributing.md"
    assert find_content_key(contents, "go.mod") == "go.mod"
    assert find_content_key(contents, "go.sum") is None


@pytest.mark.unit
def test_format_excerpts_uses_fences_with_language() -> None:
    text = format_excerpts([Excerpt(path="src/app.py", content="print(1)")])

    assert text == "Source code (src/app.py):\n```python\nprint(1)\n```\n\n"


@pytest.mark.unit
def test_build_prompt_contains_all_sections(tmp_path: Path) -> None:
    result = _result(tmp_path)
    excerpts = [Excerpt(path="src/index.js", content="console.log(1)")]

    prompt = build_prompt(result, excerpts, "  A demo app.  ")

    assert "Project Type: node" in prompt
    assert "Main Languages/Frameworks: javascript, react" in prompt
    assert "Project Files:\npackage.json\nREADME.md\nsrc/index.js" in prompt
    assert "Project Directories:\nsrc" in prompt
    assert 'package.json content:\n{"name": "demo"}' in prompt
    assert "Existing README.md content (for reference):\n# Old" in prompt
    assert "Source code (src/index.js):" in prompt
    assert "Additional context from the user:\nA demo app." in prompt
    assert "7. Any other relevant sections based on the project structure" in prompt


@pytest.mark.unit
def test_build_prompt_does_not_quote_a_file_twice(tmp_path: Path) -> None:
    result = _result(tmp_path)
    excerpts = [Excerpt(path="README.md", content="# Old")]

    prompt = build_prompt(result, excerpts)

    assert prompt.count("# Old") == 1
