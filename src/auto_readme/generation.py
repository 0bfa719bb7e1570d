"""Generation backends turning a prompt into README text.

Two backends are supported: a locally hosted Ollama server and the Gemini
cloud API. Both are plain HTTP calls made with ``httpx``; failures are turned
into ``GenerationError`` subclasses carrying a user-facing message.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from auto_readme.exceptions import GeminiError, OllamaError
from auto_readme.logging import logger

DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2:latest"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
GEMINI_MODELS: tuple[str, ...] = ("gemini-2.0-flash", "gemini-1.5-flash", "gemini-1.5-pro")
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 120.0


def error_detail(response: httpx.Response, default: str) -> str:
    """Pull the error text out of a JSON error body of any shape.

    Handles ``{"error": "..."}``, ``{"error": {"message": "..."}}`` and bodies
    that are not JSON objects at all.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or default
    error = body.get("error") if isinstance(body, dict) else body
    if isinstance(error, dict):
        error = error.get("message")
    if isinstance(error, str) and error:
        return error
    return response.text or default


def describe_ollama_error(exc: Exception) -> str:
    """Turn an httpx failure from Ollama into a message a user can act on."""
    if isinstance(exc, httpx.ConnectError):
        return "Could not connect to Ollama. Make sure Ollama is running on your machine."
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == httpx.codes.NOT_FOUND:
            return "The specified Ollama model was not found. Please check if the model is installed."
        if status == httpx.codes.BAD_REQUEST:
            return "Bad request to Ollama API. Please check your inputs."
        return f"Ollama API error: {status} - {error_detail(exc.response, 'Unknown error')}"
    if isinstance(exc, (httpx.TimeoutException, httpx.RemoteProtocolError)):
        return "No response from Ollama. Please check if Ollama is running correctly."
    return f"Error connecting to Ollama: {exc}"


def describe_gemini_error(message: str) -> str:
    """Map a Gemini error message onto the matching user-facing explanation."""
    low = message.lower()
    if "api key" in low:
        return "Invalid Gemini API key. Please check your API key and try again."
    if "quota" in low:
        return "Gemini API quota exceeded. Please try again later or check your API usage limits."
    if "model" in low:
        return "The specified Gemini model is not available. Please try a different model."
    if "content" in low:
        return "The content sent to Gemini API was rejected. It may contain prohibited content."
    return f"Gemini API error: {message}"


class Generator(ABC):
    """A backend that produces README text from a prompt."""

    provider: str

    @abstractmethod
    def generate(self, prompt: str) -> str:
        pass


class OllamaGenerator(Generator):
    provider = "ollama"

    def __init__(
        self,
        endpoint: str = DEFAULT_OLLAMA_ENDPOINT,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self._client = client or httpx.Client(timeout=timeout)

    def generate(self, prompt: str) -> str:
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        logger.info("Generating README with Ollama", model=self.model, endpoint=self.endpoint)
        try:
            response = self._client.post(f"{self.endpoint}/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Ollama request failed: %s", e)
            raise OllamaError(message=describe_ollama_error(e)) from e
        except ValueError as e:
            raise OllamaError(message=f"Ollama returned an invalid response: {e}") from e
        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise OllamaError(message="Ollama returned no generated text.")
        return text


class GeminiGenerator(Generator):
    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
        base_url: str = GEMINI_BASE_URL,
    ):
        if not api_key:
            raise GeminiError(message="Gemini API key is required.")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    @staticmethod
    def _extract_text(data: Any) -> str:  # noqa: ANN401
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            feedback = data.get("promptFeedback", {}) if isinstance(data, dict) else {}
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            if reason:
                raise GeminiError(message=describe_gemini_error(f"content blocked: {reason}"))
            raise GeminiError(message="Gemini API error: no candidates returned")
        first = candidates[0] if isinstance(candidates, list) and isinstance(candidates[0], dict) else {}
        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        text = "".join(p.get("text", "") for p in parts or () if isinstance(p, dict))
        if not text.strip():
            reason = first.get("finishReason", "no text")
            raise GeminiError(message=describe_gemini_error(f"content returned without text: {reason}"))
        return text

    def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        logger.info("Generating README with Gemini", model=self.model)
        try:
            response = self._client.post(url, json=payload, headers={"x-goog-api-key": self.api_key})
        except httpx.HTTPError as e:
            logger.error("Gemini request failed: %s", e)
            raise GeminiError(message=describe_gemini_error(str(e))) from e
        if response.is_error:
            message = error_detail(response, f"HTTP {response.status_code}")
            logger.error("Gemini returned %s: %s", response.status_code, message)
            raise GeminiError(message=describe_gemini_error(message))
        try:
            data = response.json()
        except ValueError as e:
            raise GeminiError(message=f"Gemini API error: invalid response ({e})") from e
        return self._extract_text(data)
