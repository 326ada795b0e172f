"""Connectivity probe for the model backend."""

from pdf_summarizer.core.config import LLMSettings
from pdf_summarizer.core.exceptions import AppError
from pdf_summarizer.services.summarization.prompts import CONNECTION_TEST_PROMPT
from pdf_summarizer.services.summarization.result_types import ConnectionStatus
from pdf_summarizer.services.summarization.strategies import ModelInvoker
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

PROBE_MAX_OUTPUT_TOKENS = 10
PREVIEW_LENGTH = 50


class ConnectivityProbe:
    """Checks that the model endpoint is configured and answering.

    Used only by the status endpoint, never on the summarization path.
    """

    def __init__(self, invoker: ModelInvoker, llm_settings: LLMSettings):
        self.invoker = invoker
        self.settings = llm_settings

    async def test_connection(self) -> ConnectionStatus:
        """Send a tiny prompt and report the outcome without raising."""
        if not self.settings.is_configured:
            return ConnectionStatus(success=False, error="API key not configured")

        try:
            result = await self.invoker.invoke(
                CONNECTION_TEST_PROMPT,
                model=self.settings.default_model,
                max_output_tokens=PROBE_MAX_OUTPUT_TOKENS,
            )
        except AppError as e:
            LOGGER.warning(f"Model connectivity check failed: {e}")
            return ConnectionStatus(success=False, model=self.settings.default_model, error=str(e))

        return ConnectionStatus(
            success=True,
            model=self.settings.default_model,
            response_preview=result.text[:PREVIEW_LENGTH],
        )
