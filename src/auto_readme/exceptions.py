from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AutoReadmeError(Exception):
    """Base exception for errors in the auto_readme package."""


@dataclass(frozen=True)
class ScanRootError(AutoReadmeError):
    """Raised when the scan root does not exist or is not a directory."""

    root: Path
    message: str = "The scan root does not exist or is not a directory."

    def __str__(self) -> str:
        return f"{self.message} ({self.root})"


@dataclass(frozen=True)
class ConfigFileError(AutoReadmeError):
    """Raised when a configuration file cannot be read or parsed."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class ReadmeExistsError(AutoReadmeError):
    """Raised when the README already exists and overwriting was not requested."""

    path: Path
    message: str = "README already exists. Pass --force to overwrite it."

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(frozen=True)
class FileAccessError(AutoReadmeError):
    """Raised when a file the user asked for cannot be read or written."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(frozen=True)
class GenerationError(AutoReadmeError):
    """Raised when a generation backend fails; ``message`` is user-facing."""

    provider: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OllamaError(GenerationError):
    """Raised when the local Ollama endpoint fails."""

    provider: str = "ollama"
    message: str = "Error connecting to Ollama."


@dataclass(frozen=True)
class GeminiError(GenerationError):
    """Raised when the Gemini API fails."""

    provider: str = "gemini"
    message: str = "Gemini API error."
