"""
OllamaCategorizer - group file paths into logical categories with a local LLM.

Uses Ollama's /api/generate endpoint in JSON mode. This is the only
network-facing component of repograph; its failures are surfaced as
CategorizationError / TimeoutError and recovered by the caller.

License: MIT
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx
import structlog

from ..config import RepographSettings
from ..exceptions import CategorizationError, TimeoutError, ValidationError
from ..models import CategorizationResult
from .base import coerce_result

logger = structlog.get_logger(__name__)


CATEGORIZATION_PROMPT = """You are a helpful assistant that categorizes files in a software project.
You will be given a list of file paths.
Group them into logical categories (e.g., "Components", "Services", "Utils", \
"Configuration", "Tests").

Return a JSON object with two keys:
1. "categories": an array of unique category names you created.
2. "assignments": an object mapping each file path to one of the category names.
Ensure every file path provided is in the assignments.

FILES:
{files}

IMPORTANT: Return ONLY the JSON object, no other text or explanation.

JSON:"""


class OllamaCategorizer:
    """
    Categorization adapter backed by an Ollama model.

    Attributes:
        base_url: Ollama API URL (e.g., "http://localhost:11434")
        model_name: Model used for generation
        timeout: Request timeout in seconds
        max_retries: Retries for timeouts and connection errors
        temperature: Generation temperature (low for stable groupings)

    Example:
        ```python
        async with OllamaCategorizer(model_name="llama3.1:8b") as categorizer:
            result = await categorizer.categorize(["src/App.tsx", "src/api.ts"])
        ```
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model_name: str = "llama3.1:8b",
        timeout: int = 120,
        max_retries: int = 2,
        temperature: float = 0.1,
    ) -> None:
        """
        Initialize OllamaCategorizer.

        Raises:
            ValidationError: If base_url is invalid or timeout <= 0
        """
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError(
                message=f"Invalid base_url format: {base_url}",
                error_code="VAL_004",
                details={"base_url": base_url},
            )

        if timeout <= 0:
            raise ValidationError(
                message=f"timeout must be positive, got {timeout}",
                error_code="VAL_003",
                details={"timeout": timeout},
            )

        if max_retries < 0:
            raise ValidationError(
                message=f"max_retries must be >= 0, got {max_retries}",
                error_code="VAL_003",
                details={"max_retries": max_retries},
            )

        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.timeout = timeout
        self.max_retries = max_retries
        self.temperature = temperature

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=2, max_connections=4),
        )

        logger.info(
            "ollama_categorizer_initialized",
            base_url=self.base_url,
            model=model_name,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: RepographSettings) -> "OllamaCategorizer":
        return cls(
            base_url=settings.categorizer_base_url,
            model_name=settings.categorizer_model,
            timeout=settings.categorizer_timeout,
            max_retries=settings.categorizer_max_retries,
        )

    async def categorize(self, filepaths: List[str]) -> CategorizationResult:
        """
        Ask the model to group ``filepaths`` into categories.

        Args:
            filepaths: Node filepaths in graph order

        Returns:
            Validated CategorizationResult

        Raises:
            CategorizationError: If the request fails or the response is malformed
            TimeoutError: If the request keeps timing out after retries
        """
        if not filepaths:
            return CategorizationResult()

        prompt = CATEGORIZATION_PROMPT.format(files="\n".join(filepaths))
        response = await self._generate(prompt)

        try:
            payload = self._parse_json_object(response)
        except ValueError as exc:
            logger.warning(
                "categorization_parse_failed",
                error=str(exc),
                response_preview=response[:200],
            )
            raise CategorizationError(
                message="Categorization model returned invalid JSON",
                error_code="CAT_002",
                details={"response_preview": response[:200]},
                original_exception=exc,
            )

        result = coerce_result(payload)
        logger.info(
            "files_categorized",
            file_count=len(filepaths),
            category_count=len(result.categories),
            assigned_count=len(result.assignments),
        )
        return result

    async def _generate(self, prompt: str, retry_count: int = 0) -> str:
        try:
            response = await self.client.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model_name,
                    "prompt": prompt,
                    "stream": False,
                    "format": "json",
                    "options": {"temperature": self.temperature},
                },
            )
        except httpx.TimeoutException as exc:
            if retry_count < self.max_retries:
                await self._backoff("ollama_categorizer_timeout_retry", retry_count)
                return await self._generate(prompt, retry_count + 1)
            raise TimeoutError(
                message=f"Categorization request timed out after {self.max_retries} retries",
                error_code="TIMEOUT_002",
                details={"retries": retry_count},
                original_exception=exc,
            )
        except (httpx.ConnectError, httpx.NetworkError) as exc:
            if retry_count < self.max_retries:
                await self._backoff("ollama_categorizer_connection_retry", retry_count)
                return await self._generate(prompt, retry_count + 1)
            raise CategorizationError(
                message=f"Ollama connection failed after {self.max_retries} retries: {exc}",
                details={"retries": retry_count, "error": str(exc)},
                original_exception=exc,
            )

        if response.status_code == 404:
            raise CategorizationError(
                message=f"Model '{self.model_name}' not found. Run: ollama pull {self.model_name}",
                error_code="CAT_003",
                details={"model": self.model_name},
            )

        if response.status_code != 200:
            raise CategorizationError(
                message=f"Ollama API error: {response.status_code}",
                details={"status_code": response.status_code, "response": response.text[:500]},
            )

        data = response.json()
        if "response" not in data:
            raise CategorizationError(
                message="Invalid Ollama response: missing 'response' field",
                error_code="CAT_002",
                details={"keys": sorted(data)},
            )
        return str(data["response"])

    async def _backoff(self, event: str, retry_count: int) -> None:
        wait_time = 2**retry_count
        logger.warning(
            event,
            retry=retry_count + 1,
            max_retries=self.max_retries,
            wait_time=wait_time,
        )
        await asyncio.sleep(wait_time)

    def _parse_json_object(self, response: str) -> Dict[str, Any]:
        """
        Parse a JSON object from an LLM response.

        Tolerates markdown code fences and text around the object.

        Raises:
            ValueError: If no JSON object can be parsed
        """
        text = response.strip()

        if "```" in text:
            text = re.sub(r"```(?:json)?\s*", "", text)

        match = re.search(r"\{[\s\S]*\}", text)
        if match:
            text = match.group(0)

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Failed to parse JSON: {exc}")

        if not isinstance(result, dict):
            raise ValueError(f"Expected a JSON object, got {type(result).__name__}")
        return result

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "OllamaCategorizer":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        await self.aclose()
