import json
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from auto_readme import cli
from auto_readme.settings import GEMINI_API_KEY_ENV


@pytest.mark.integration
def test_main_generate_uses_selected_backend(
    tmp_path: Path,
    mocker: MockerFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv(GEMINI_API_KEY_ENV, raising=False)
    (tmp_path / "go.mod").write_text("module example.com/demo\n", encoding="utf-8")
    (tmp_path / "cmd").mkdir()
    (tmp_path / "cmd" / "main.go").write_text("package main\n", encoding="utf-8")
    generate = mocker.patch.object(cli.OllamaGenerator, "generate", return_value="# demo\n")

    exit_code = cli.main(["generate", "--root", str(tmp_path), "--model", "qwen2", "--context", "CLI tool"])

    assert exit_code == 0
    assert (tmp_path / "README.md").read_text(encoding="utf-8") == "# demo\n"
    prompt = generate.call_args.args[0]
    assert "Project Type: go" in prompt
    assert "Source code (cmd/main.go):" in prompt
    assert "go.mod content:\nmodule example.com/demo" in prompt


@pytest.mark.integration
def test_main_scan_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "package.json").write_text('{"dependencies": {"vue": "3"}}', encoding="utf-8")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.js").write_text("createApp()\n", encoding="utf-8")

    exit_code = cli.main(["scan", "--root", str(tmp_path)])

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["project_type"] == "node"
    assert data["language_tags"] == ["javascript", "vue"]
    assert data["directories"] == ["src"]
    assert data["contents"]["src/main.js"] == "createApp()\n"
    assert data["excerpts"][0] == "src/main.js"


@pytest.mark.integration
def test_main_reports_missing_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main(["scan", "--root", str(tmp_path / "missing")])

    assert exit_code == 1
    assert "does not exist" in capsys.readouterr().err
