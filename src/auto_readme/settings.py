from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from auto_readme.config import CONFIG_FILE_NAME
from auto_readme.exceptions import ConfigFileError
from auto_readme.file_manipulation import describe_failure
from auto_readme.generation import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_ENDPOINT,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_TIMEOUT,
)

ENV_FILE = find_dotenv(usecwd=True)
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"

# Editor-style keys accepted in config files.
CONFIG_ALIASES: dict[str, str] = {
    "aiProvider": "provider",
    "ollamaModel": "ollama_model",
    "ollamaEndpoint": "ollama_endpoint",
    "geminiModel": "gemini_model",
    "geminiApiKey": "gemini_api_key",
    "ignoreDirectories": "ignore_directories",
    "ignoreFiles": "ignore_files",
}


class Settings(BaseModel):
    """Configuration settings for the auto_readme package."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    root: Path = Field(default_factory=Path.cwd, description="Project root to scan.")
    output: Path = Field(default=Path("README.md"), description="README path, relative to root.")
    provider: Literal["ollama", "gemini"] = Field(default="ollama", description="Generation backend.")
    ollama_model: str = Field(default=DEFAULT_OLLAMA_MODEL, description="Ollama model name.")
    ollama_endpoint: str = Field(default=DEFAULT_OLLAMA_ENDPOINT, description="Ollama base URL.")
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL, description="Gemini model name.")
    gemini_api_key: str = Field(default="", description="Gemini API key.")
    ignore_directories: list[str] = Field(default_factory=list, description="Extra directory names to skip.")
    ignore_files: list[str] = Field(default_factory=list, description="Extra file names to skip.")
    user_context: str = Field(default="", description="Free text describing the project.")
    overwrite: bool = Field(default=False, description="Overwrite an existing README.")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds.")
    log_file: str = Field(default="", description="Log file path.")

    @property
    def readme_path(self) -> Path:
        return self.output if self.output.is_absolute() else self.root / self.output


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into ``Settings`` field names.

    Args:
        path (Path): the YAML file to read

    Raises:
        ConfigFileError: if the file cannot be read, is not valid YAML, or is
            not a mapping.

    Returns:
        dict[str, Any]: the values keyed by ``Settings`` field names
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigFileError(path=path, message=describe_failure(e)) from e
    except yaml.YAMLError as e:
        raise ConfigFileError(path=path, message=f"invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigFileError(path=path, message="expected a mapping at the top level")
    return {CONFIG_ALIASES.get(str(k), str(k)): v for k, v in data.items()}


def build_settings(
    overrides: dict[str, Any],
    config_file: Path | None = None,
) -> Settings:
    """Merge defaults, config file, environment and explicit overrides.

    Precedence, lowest first: field defaults, the YAML config file (``config_file``
    or ``.auto-readme.yaml`` in the root), ``GEMINI_API_KEY`` from the environment
    or a ``.env`` file, then ``overrides`` whose value is not None. Ignore lists
    from the command line extend those of the config file.

    Args:
        overrides (dict[str, Any]): values from the command line
        config_file (Path | None, optional): explicit config file. Defaults to None.

    Raises:
        ConfigFileError: if the config file is invalid.

    Returns:
        Settings: the merged settings
    """
    if ENV_FILE:
        load_dotenv(ENV_FILE, override=False)

    explicit = {k: v for k, v in overrides.items() if v is not None}
    root = Path(explicit.get("root") or Path.cwd())

    values: dict[str, Any] = {}
    candidate = config_file if config_file is not None else root / CONFIG_FILE_NAME
    if config_file is not None or candidate.is_file():
        values.update(load_config_file(candidate))

    env_key = os.environ.get(GEMINI_API_KEY_ENV)
    if env_key:
        values["gemini_api_key"] = env_key

    for key in ("ignore_directories", "ignore_files"):
        if key in explicit and isinstance(values.get(key), list):
            explicit[key] = [*values[key], *explicit[key]]

    values.update(explicit)
    values["root"] = root
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigFileError(path=candidate, message=str(e)) from e
