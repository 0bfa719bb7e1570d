"""auto-readme: scan a project and generate its README with a language model.

Usage
-----
Run ``auto-readme --help`` for full options. Common examples:
    - Inspect what the scanner collected:
        auto-readme scan --root path/to/project

    - Print the prompt that would be sent to the model:
        auto-readme context --root . --context "A CLI for ..."

    - Generate README.md with a local Ollama model:
        auto-readme generate --provider ollama --model llama3.2:latest

    - Generate with Gemini, overwriting an existing README:
        GEMINI_API_KEY=... auto-readme generate --provider gemini --force
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from auto_readme import __version__
from auto_readme.exceptions import AutoReadmeError, ReadmeExistsError
from auto_readme.file_manipulation import write_readme
from auto_readme.generation import GeminiGenerator, Generator, OllamaGenerator
from auto_readme.logging import logger, setup_logging
from auto_readme.output_construction import build_prompt
from auto_readme.selector import Excerpt, select_excerpts
from auto_readme.settings import build_settings
from auto_readme.walker import ScanResult, scan

if TYPE_CHECKING:
    from collections.abc import Sequence

    from auto_readme.settings import Settings


def _add_scan_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--root", type=str, default=None, help="Project root (default: current directory).")
    p.add_argument(
        "--ignore-dir",
        dest="ignore_directories",
        action="append",
        default=None,
        help="Extra directory name to skip (repeatable).",
    )
    p.add_argument(
        "--ignore-file",
        dest="ignore_files",
        action="append",
        default=None,
        help="Extra file name to skip (repeatable).",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="auto-readme",
        description="Scan a project and generate its README with a language model.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", type=str, default=None, help="YAML config file (default: .auto-readme.yaml).")
    p.add_argument("--log-file", type=str, default=None, help="Log file path.")
    sub = p.add_subparsers(dest="command", required=True)

    scan_p = sub.add_parser("scan", help="Print the scan result as JSON.")
    _add_scan_arguments(scan_p)
    scan_p.add_argument(
        "--paths-only",
        action="store_true",
        help="List content keys instead of full contents.",
    )

    ctx_p = sub.add_parser("context", help="Print the generation prompt.")
    _add_scan_arguments(ctx_p)
    ctx_p.add_argument("--context", dest="user_context", type=str, default=None, help="Free-text project context.")

    gen_p = sub.add_parser("generate", help="Generate and write the README.")
    _add_scan_arguments(gen_p)
    gen_p.add_argument("--context", dest="user_context", type=str, default=None, help="Free-text project context.")
    gen_p.add_argument("--provider", choices=["ollama", "gemini"], default=None, help="Generation backend.")
    gen_p.add_argument("--model", type=str, default=None, help="Model name for the chosen backend.")
    gen_p.add_argument("--endpoint", dest="ollama_endpoint", type=str, default=None, help="Ollama base URL.")
    gen_p.add_argument("--api-key", dest="gemini_api_key", type=str, default=None, help="Gemini API key.")
    gen_p.add_argument("--output", type=str, default=None, help="README path (default: README.md in root).")
    gen_p.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds.")
    gen_p.add_argument(
        "--force",
        dest="overwrite",
        action="store_true",
        default=None,
        help="Overwrite an existing README.",
    )
    return p


def parse_args(argv: Sequence[str] | None = None) -> tuple[str, Settings, dict[str, Any]]:
    """Parse the command line into a command name, settings and command flags."""
    args = vars(build_parser().parse_args(argv))
    command = args.pop("command")
    config = args.pop("config")
    model = args.pop("model", None)
    flags = {"paths_only": args.pop("paths_only", False)}
    if args.get("output") is not None:
        args["output"] = Path(args["output"])

    settings = build_settings(args, config_file=Path(config) if config else None)
    if model:
        field = "gemini_model" if settings.provider == "gemini" else "ollama_model"
        settings = settings.model_copy(update={field: model})
    return command, settings, flags


def run_scan(settings: Settings) -> tuple[ScanResult, list[Excerpt]]:
    result = scan(settings.root, settings.ignore_directories, settings.ignore_files)
    excerpts = select_excerpts(result.contents, result.project_type, result.language_tags)
    return result, excerpts


def make_generator(settings: Settings) -> Generator:
    """Instantiate the backend selected in the settings."""
    if settings.provider == "gemini":
        return GeminiGenerator(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.timeout,
        )
    return OllamaGenerator(
        endpoint=settings.ollama_endpoint,
        model=settings.ollama_model,
        timeout=settings.timeout,
    )


def generate_readme(settings: Settings, generator: Generator | None = None) -> Path:
    """Scan, prompt the backend and write the README.

    The overwrite check runs before the backend is called so a refusal costs
    no generation.

    Args:
        settings (Settings): merged settings
        generator (Generator | None, optional): backend to use instead of the
            one selected by ``settings``. Defaults to None.

    Raises:
        ReadmeExistsError: if the README exists and overwriting was not requested.

    Returns:
        Path: the written README path
    """
    target = settings.readme_path
    if target.exists() and not settings.overwrite:
        raise ReadmeExistsError(path=target)
    result, excerpts = run_scan(settings)
    prompt = build_prompt(result, excerpts, settings.user_context)
    backend = generator or make_generator(settings)
    text = backend.generate(prompt)
    return write_readme(target, text, overwrite=settings.overwrite)


def scan_to_json(result: ScanResult, excerpts: Sequence[Excerpt], *, paths_only: bool) -> str:
    data = result.model_dump(mode="json")
    if paths_only:
        data["contents"] = list(result.contents)
    data["excerpts"] = [ex.path for ex in excerpts]
    return json.dumps(data, indent=2, ensure_ascii=False)


def main(argv: Sequence[str] | None = None) -> int:
    try:
        command, settings, flags = parse_args(argv)
        if settings.log_file:
            setup_logging(settings.log_file)

        if command == "scan":
            result, excerpts = run_scan(settings)
            print(scan_to_json(result, excerpts, paths_only=flags["paths_only"]))
        elif command == "context":
            result, excerpts = run_scan(settings)
            print(build_prompt(result, excerpts, settings.user_context))
        else:
            path = generate_readme(settings)
            print(f"Wrote {path}")
    except AutoReadmeError as e:
        logger.error("auto-readme failed: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
