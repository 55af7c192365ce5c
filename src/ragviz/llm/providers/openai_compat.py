"""Generator backed by an OpenAI-compatible chat completions endpoint."""

from typing import Any

import httpx
from loguru import logger

from ...core.chunk import Chunk
from ...core.sql import SqlTranslation
from ...errors import ConfigurationError, GenerationError, classify_http_error, wrap_exception
from ...utils.json_extract import extract_json
from ..base import PLACEHOLDER_EXPLANATION, PLACEHOLDER_SQL, BaseGenerator
from ..prompts import build_grounded_prompt, build_mock_rows_prompt, build_sql_prompt

NO_RESPONSE = "No response generated."


class OpenAICompatibleGenerator(BaseGenerator):
    """
    Talks to ``{base_url}/chat/completions`` with one request per call.

    httpx is used directly rather than an SDK so any OpenAI-compatible
    server (OpenAI, vLLM, Ollama, LM Studio) works with the same code, and
    so tests can swap the transport for ``httpx.MockTransport``.

    Args:
        base_url: API base URL, e.g. "https://api.openai.com/v1"
        api_key: Bearer token (optional for local servers)
        model: Model for answers and mock rows
        sql_model: Model for text-to-SQL (defaults to ``model``)
        timeout: Request timeout in seconds
        client: Pre-built ``httpx.AsyncClient`` (owned by the caller)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        sql_model: str | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        if not base_url:
            raise ConfigurationError("base_url is required for the openai generator")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.sql_model = sql_model or model
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _complete(self, prompt: str, model: str, json_mode: bool = False) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            resp = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise wrap_exception(e, context=f"chat completion ({model})") from e

        if resp.status_code >= 400:
            raise classify_http_error(resp.status_code, resp.text[:500])

        try:
            data = resp.json()
            return data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationError(
                "Malformed chat completion response",
                details={"model": model},
                original_error=e,
            ) from e

    async def answer_with_context(self, query: str, context: list[Chunk]) -> str:
        prompt = build_grounded_prompt(query, context)
        text = await self._complete(prompt, self.model)
        return text or NO_RESPONSE

    async def translate_to_sql(self, query: str, schema_description: str) -> SqlTranslation:
        prompt = build_sql_prompt(query, schema_description)
        raw = await self._complete(prompt, self.sql_model, json_mode=True)

        data = extract_json(raw)
        if not isinstance(data, dict) or not isinstance(data.get("sql"), str):
            logger.warning(f"[OpenAICompatibleGenerator] Unparsable SQL response: {raw[:200]}")
            return SqlTranslation(sql=PLACEHOLDER_SQL, explanation=PLACEHOLDER_EXPLANATION)

        return SqlTranslation(sql=data["sql"], explanation=str(data.get("explanation", "")))

    async def synthesize_mock_rows(self, sql: str) -> list[dict[str, Any]]:
        raw = await self._complete(build_mock_rows_prompt(sql), self.model, json_mode=True)

        data = extract_json(raw)
        # JSON mode forces an object, so arrays tend to arrive wrapped: {"rows": [...]}
        if isinstance(data, dict):
            data = next((v for v in data.values() if isinstance(v, list)), None)
        if not isinstance(data, list):
            logger.warning(f"[OpenAICompatibleGenerator] Unparsable rows response: {raw[:200]}")
            return []

        return [row for row in data if isinstance(row, dict)]

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
