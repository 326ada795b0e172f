"""Chat-completion client used to invoke the summarization model."""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from httpx import HTTPStatusError, TimeoutException

from pdf_summarizer.core.config import LLMSettings
from pdf_summarizer.core.exceptions import UpstreamError, UpstreamUnavailableError
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Generated text plus the wall-clock time of the call."""

    text: str
    model: str
    elapsed_ms: int


class ChatCompletionClient:
    """Client for OpenAI-compatible ``/chat/completions`` endpoints.

    One ``invoke`` is exactly one HTTP request. Failures are raised to the
    caller unchanged in kind and are never retried here.
    """

    def __init__(
        self,
        llm_settings: LLMSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            llm_settings: Backend credentials, endpoint and generation defaults
            transport: Optional httpx transport (used to stub the provider)
        """
        self.settings = llm_settings
        self.api_url = llm_settings.api_url
        self.timeout = llm_settings.request_timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    async def invoke(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> InvocationResult:
        """Send one prompt to the model and return its reply.

        Args:
            prompt: Full prompt text, sent as a single user message
            model: Model identifier (defaults to the configured model)
            temperature: Sampling temperature (defaults to 0.3)
            max_output_tokens: Cap on generated tokens (defaults to 2000)

        Returns:
            InvocationResult with the generated text and elapsed time

        Raises:
            UpstreamUnavailableError: If the API key is unset or rejected
            UpstreamError: If the request fails or the response is malformed
        """
        if not self.is_configured:
            raise UpstreamUnavailableError(
                "OpenAI API key is not configured. Set OPENAI_API_KEY in environment."
            )

        model_name = model or self.settings.default_model
        payload: Dict[str, Any] = {
            "model": model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.temperature if temperature is None else temperature,
            "max_tokens": max_output_tokens or self.settings.max_output_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

        LOGGER.debug(
            f"Calling chat completion API: {self.api_url}",
            extra={"model": model_name, "prompt_chars": len(prompt), "timeout": self.timeout},
        )

        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, headers=headers, json=payload)
                response.raise_for_status()
                body = response.json()
        except HTTPStatusError as e:
            raise self._map_status_error(e) from e
        except TimeoutException as e:
            LOGGER.warning(f"Model request timed out after {self.timeout}s", extra={"model": model_name})
            raise UpstreamError(f"Model request timed out after {self.timeout}s", original_error=e) from e
        except httpx.HTTPError as e:
            LOGGER.warning(f"Model request failed: {e}", extra={"model": model_name})
            raise UpstreamError(f"Model request failed: {e}", original_error=e) from e
        except httpx.InvalidURL as e:
            LOGGER.error(f"Invalid model API URL {self.api_url!r}: {e}")
            raise UpstreamError(f"Invalid model API URL: {e}", original_error=e) from e
        except ValueError as e:
            raise UpstreamError("Invalid JSON in model response", original_error=e) from e

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        text = self._extract_text(body)

        LOGGER.debug(f"Model replied in {elapsed_ms}ms", extra={"model": model_name, "chars": len(text)})
        return InvocationResult(text=text, model=model_name, elapsed_ms=elapsed_ms)

    def _map_status_error(self, error: HTTPStatusError) -> Exception:
        status_code = error.response.status_code
        message = self._provider_message(error.response)

        LOGGER.warning(
            f"Model API HTTP {status_code}: {message}",
            extra={"url": self.api_url, "status_code": status_code},
        )

        if status_code in (401, 403):
            return UpstreamUnavailableError(f"Model API rejected credentials: {message}", original_error=error)
        return UpstreamError(f"Model API error {status_code}: {message}", original_error=error)

    @staticmethod
    def _provider_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str):
                return error
        return response.text or response.reason_phrase

    @staticmethod
    def _extract_text(body: Any) -> str:
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            LOGGER.error(f"Unexpected chat completion response format: {body}")
            raise UpstreamError("Invalid response format from model API", original_error=e) from e

        if content is None:
            LOGGER.warning("Empty response from model API")
            return ""
        return str(content)
