"""Ollama API client for local LLM inference."""

import json
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class OllamaError(Exception):
    """Error communicating with Ollama."""

    pass


class OllamaClient:
    """Client for Ollama local LLM API."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 11434,
        model: str = "mistral",
        timeout: float = 300.0,
    ):
        self.base_url = f"http://{host}:{port}"
        self.model = model
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout)

    def generate(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.0,
        schema: dict | None = None,
    ) -> str:
        """Generate a completion from the model.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            temperature: Sampling temperature (lower = more deterministic)
            schema: Optional JSON schema for structured output

        Returns:
            The model's response text
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": 8192,  # Reports can hold a few hundred sale lines
                "num_ctx": 16384,
            },
        }

        if system:
            payload["system"] = system

        if schema:
            payload["format"] = schema

        logger.debug(
            f"Ollama request: model={self.model}, prompt_len={len(prompt)}, "
            f"system_len={len(system) if system else 0}, schema={'yes' if schema else 'no'}"
        )

        try:
            response = self._client.post(
                f"{self.base_url}/api/generate",
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama HTTP error: {e.response.status_code}")
            raise OllamaError(f"Ollama HTTP error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Ollama connection error: {e}")
            raise OllamaError(f"Failed to connect to Ollama: {e}") from e

        data = response.json()
        result = data.get("response", "")

        # Durations are reported in nanoseconds
        total_ns = data.get("total_duration", 0)
        eval_ns = data.get("eval_duration", 0)

        logger.debug(
            f"Ollama response: len={len(result)}, "
            f"prompt_tokens={data.get('prompt_eval_count')}, eval_tokens={data.get('eval_count')}, "
            f"total={total_ns/1e9:.2f}s (eval={eval_ns/1e9:.2f}s)"
        )

        return result

    def generate_structured(
        self,
        prompt: str,
        response_model: type[T],
        system: str | None = None,
        temperature: float = 0.0,
    ) -> T:
        """Generate a structured response matching a Pydantic model.

        Args:
            prompt: The user prompt
            response_model: Pydantic model class for the response
            system: Optional system prompt
            temperature: Sampling temperature

        Returns:
            Validated Pydantic model instance
        """
        schema = response_model.model_json_schema()

        response = self.generate(
            prompt=prompt,
            system=system,
            temperature=temperature,
            schema=schema,
        )

        try:
            data = json.loads(response)
            return response_model.model_validate(data)
        except json.JSONDecodeError as e:
            logger.error(f"JSON parse error: {e}, response preview: {response[:200]}")
            raise OllamaError(f"Failed to parse JSON response: {e}") from e
        except ValueError as e:
            logger.error(f"Validation error: {e}, response preview: {response[:200]}")
            raise OllamaError(f"Failed to validate response: {e}") from e

    def check_connection(self) -> bool:
        """Check if Ollama is running and accessible."""
        try:
            response = self._client.get(f"{self.base_url}/api/tags")
            return response.status_code == 200
        except httpx.RequestError:
            return False

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "OllamaClient":
        return self

    def __exit__(self, *_) -> None:
        self.close()
