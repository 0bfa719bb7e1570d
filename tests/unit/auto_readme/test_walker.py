import json
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from auto_readme import walker
from auto_readme.budget import (
    IMPORTANT_FILE_CEILING,
    SOURCE_FILE_CEILING,
    TRUNCATION_MARKER,
    max_content_files,
)
from auto_readme.config import ProjectType, ScanOptions
from auto_readme.exceptions import ScanRootError
from auto_readme.file_manipulation import FailureKind, Outcome
from auto_readme.walker import ScanResult, scan


def _write(path: Path, text: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
def test_scan_typescript_project(tmp_path: Path) -> None:
    _write(tmp_path / "package.json", json.dumps({"devDependencies": {"typescript": "^5.0.0"}}))
    _write(tmp_path / "src" / "index.ts", "export const x = 1;\n")

    result = scan(tmp_path)

    assert result.project_type is ProjectType.NODE
    assert "typescript" in result.language_tags
    assert "src/index.ts" in result.files
    assert result.directories == ["src"]
    assert result.contents["src/index.ts"] == "export const x = 1;\n"


@pytest.mark.unit
def test_scan_root_with_only_ignored_directory_is_empty(tmp_path: Path) -> None:
    _write(tmp_path / "node_modules" / "left-pad" / "index.js", "module.exports = 1;")

    result = scan(tmp_path)

    assert result.files == []
    assert result.directories == []
    assert result.contents == {}


@pytest.mark.unit
def test_scan_never_enters_default_ignored_directories(tmp_path: Path) -> None:
    _write(tmp_path / ".git" / "config", "[core]")
    _write(tmp_path / ".git" / "hooks" / "pre-commit.py", "print()")
    _write(tmp_path / "dist" / "bundle.js", "x")
    _write(tmp_path / "coverage" / "report.html", "<html/>")
    _write(tmp_path / "main.py", "print('hi')")

    result = scan(tmp_path)

    assert result.files == ["main.py"]
    assert result.directories == []
    assert all(not p.startswith((".git", "dist", "coverage")) for p in [*result.files, *result.contents])


@pytest.mark.unit
def test_scan_honours_caller_ignores(tmp_path: Path) -> None:
    _write(tmp_path / "vendor" / "lib.py", "x = 1")
    _write(tmp_path / "secret.txt", "hunter2")
    _write(tmp_path / "app.py", "print()")

    result = scan(tmp_path, extra_ignored_directories=["vendor"], extra_ignored_files=["secret.txt"])

    assert result.files == ["app.py"]
    assert "vendor" not in result.directories


@pytest.mark.unit
def test_scan_skips_files_that_are_neither_important_nor_source(tmp_path: Path) -> None:
    _write(tmp_path / "logo.png", "png")
    _write(tmp_path / "archive.zip", "zip")

    result = scan(tmp_path)

    assert result.files == []


@pytest.mark.unit
def test_scan_depth_is_bounded(tmp_path: Path) -> None:
    deepest = tmp_path / "a" / "b" / "c" / "d" / "e"
    _write(deepest / "level5.md", "five")
    _write(deepest / "f" / "level6.md", "six")

    result = scan(tmp_path)

    assert "a/b/c/d/e/level5.md" in result.files
    assert "a/b/c/d/e" in result.directories
    assert "a/b/c/d/e/f" not in result.directories
    assert "a/b/c/d/e/f/level6.md" not in result.files
    assert max(p.count("/") + 1 for p in result.directories) == ScanOptions().max_depth


@pytest.mark.unit
def test_scan_content_quota_lists_but_does_not_read(tmp_path: Path) -> None:
    total = 60
    for i in range(total):
        _write(tmp_path / f"doc{i:02d}.md", f"doc {i}")

    result = scan(tmp_path)

    assert result.project_type is ProjectType.UNKNOWN
    assert len(result.files) == total
    assert len(result.contents) == max_content_files(ProjectType.UNKNOWN)
    assert set(result.contents) <= set(result.files)


@pytest.mark.unit
def test_scan_after_quota_lists_important_files_and_drops_source_only(
    tmp_path: Path,
    mocker: MockerFixture,
) -> None:
    _write(tmp_path / "package.json", "{}")
    _write(tmp_path / "index.js", "1")
    _write(tmp_path / "App.jsx", "2")
    mocker.patch.object(walker, "max_content_files", return_value=1)

    result = scan(tmp_path)

    assert sorted(result.files) == ["index.js", "package.json"]
    assert list(result.contents) == ["package.json"]


@pytest.mark.unit
def test_scan_truncates_important_file_one_byte_over_ceiling(tmp_path: Path) -> None:
    _write(tmp_path / "GUIDE.md", "g" * (IMPORTANT_FILE_CEILING + 1))

    result = scan(tmp_path)

    content = result.contents["GUIDE.md"]
    assert content.endswith(TRUNCATION_MARKER)
    assert content[: -len(TRUNCATION_MARKER)] == "g" * IMPORTANT_FILE_CEILING


@pytest.mark.unit
def test_scan_reads_source_only_files_under_smaller_ceiling(tmp_path: Path) -> None:
    _write(tmp_path / "package.json", "{}")
    _write(tmp_path / "ui" / "App.jsx", "j" * (SOURCE_FILE_CEILING + 10))

    result = scan(tmp_path)

    assert "ui/App.jsx" in result.files
    content = result.contents["ui/App.jsx"]
    assert len(content) - len(TRUNCATION_MARKER) == SOURCE_FILE_CEILING


@pytest.mark.unit
def test_scan_does_not_reread_manifest(tmp_path: Path, mocker: MockerFixture) -> None:
    _write(tmp_path / "package.json", "{}")
    _write(tmp_path / "README.md", "# hi")
    _write(tmp_path / "index.js", "1")
    spy = mocker.spy(walker, "read_capped")

    result = scan(tmp_path)

    read_names = [call.args[0].name for call in spy.call_args_list]
    assert read_names == ["index.js"]
    assert "package.json" in result.files
    assert "README.md" in result.files
    assert list(result.contents).count("package.json") == 1


@pytest.mark.unit
def test_scan_skips_unreadable_file_and_continues(tmp_path: Path, mocker: MockerFixture) -> None:
    _write(tmp_path / "bad.py", "broken")
    _write(tmp_path / "good.py", "fine")
    real = walker.read_capped

    def flaky(path: Path, ceiling: int) -> Outcome[str]:
        if path.name == "bad.py":
            return Outcome(failure=FailureKind.PERMISSION_DENIED, detail="denied")
        return real(path, ceiling)

    mocker.patch.object(walker, "read_capped", side_effect=flaky)

    result = scan(tmp_path)

    assert set(result.files) == {"bad.py", "good.py"}
    assert result.contents == {"good.py": "fine"}


@pytest.mark.unit
def test_scan_directory_listing_failure_skips_subtree(tmp_path: Path, mocker: MockerFixture) -> None:
    _write(tmp_path / "locked" / "inner.py", "x")
    _write(tmp_path / "open" / "inner.py", "y")
    real = walker.list_entries

    def flaky(directory: Path) -> Outcome:
        if directory.name == "locked":
            return Outcome(failure=FailureKind.PERMISSION_DENIED, detail="denied")
        return real(directory)

    mocker.patch.object(walker, "list_entries", side_effect=flaky)

    result = scan(tmp_path)

    assert result.directories == ["open"]
    assert result.files == ["open/inner.py"]


@pytest.mark.unit
def test_scan_is_idempotent(tmp_path: Path) -> None:
    _write(tmp_path / "requirements.txt", "requests\n")
    _write(tmp_path / "pkg" / "__init__.py", "")
    _write(tmp_path / "pkg" / "core.py", "def f(): ...\n")
    _write(tmp_path / "docs" / "index.md", "# docs")

    first = scan(tmp_path)
    second = scan(tmp_path)

    assert first.files == second.files
    assert first.directories == second.directories
    assert list(first.contents.items()) == list(second.contents.items())


@pytest.mark.unit
def test_scan_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(ScanRootError):
        scan(tmp_path / "nope")


@pytest.mark.unit
def test_scan_file_root_raises(tmp_path: Path) -> None:
    f = _write(tmp_path / "file.txt")

    with pytest.raises(ScanRootError):
        scan(f)


@pytest.mark.unit
def test_walk_stops_beyond_max_depth(tmp_path: Path) -> None:
    _write(tmp_path / "a.md", "a")
    result = ScanResult(root=tmp_path)

    walker.walk(tmp_path, ScanOptions(), result, depth=ScanOptions().max_depth + 1)

    assert result.files == []


@pytest.mark.unit
def test_scan_truncates_root_readme_and_manifest_one_byte_over_ceiling(tmp_path: Path) -> None:
    _write(tmp_path / "README.md", "r" * (IMPORTANT_FILE_CEILING + 1))
    _write(tmp_path / "requirements.txt", "q" * (IMPORTANT_FILE_CEILING + 1))

    result = scan(tmp_path)

    for key, char in (("README.md", "r"), ("requirements.txt", "q")):
        content = result.contents[key]
        assert content.endswith(TRUNCATION_MARKER)
        assert content[: -len(TRUNCATION_MARKER)] == char * IMPORTANT_FILE_CEILING


@pytest.mark.unit
def test_scan_lists_root_once(tmp_path: Path, mocker: MockerFixture) -> None:
    _write(tmp_path / "package.json", "{}")
    _write(tmp_path / "src" / "index.js", "1")
    spy = mocker.spy(walker, "list_entries")

    scan(tmp_path)

    listed = [call.args[0] for call in spy.call_args_list]
    assert listed.count(tmp_path.resolve()) == 1
