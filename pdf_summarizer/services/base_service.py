"""Shared execution flow for the application services."""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

from pdf_summarizer.core.exceptions import AppError
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseService(ABC):
    """Base class for services whose operations are dispatched by action name.

    Subclasses map action names to handlers in ``handlers()``; public methods
    call ``execute(action, **kwargs)``. Coroutine handlers are awaited on the
    event loop. Plain handlers touch the record store or hash passwords, so
    they run in a worker thread.
    """

    def __init__(self):
        self.logger = LOGGER

    @abstractmethod
    def handlers(self) -> Dict[str, Callable[..., Any]]:
        """Return the action name to handler mapping."""

    def validate(self, action: str, **kwargs) -> None:
        """Check the inputs of ``action`` before its handler runs.

        Raises:
            AppError: Any subclass, to reject the call
        """

    async def execute(self, action: str, **kwargs) -> Any:
        """Validate, then run the handler registered for ``action``.

        Raises:
            AppError: Handler errors pass through; anything else is wrapped
        """
        try:
            self.validate(action, **kwargs)
            return await self._dispatch(action, **kwargs)

        except AppError:
            raise

        except Exception as e:
            self.logger.error(
                f"Service execution failed: {str(e)}",
                exc_info=True,
                extra={"service": self.__class__.__name__, "action": action},
            )
            raise AppError(f"Service execution failed: {str(e)}", original_error=e) from e

    async def _dispatch(self, action: str, **kwargs) -> Any:
        handler = self.handlers().get(action)
        if handler is None:
            raise AppError(f"Unknown action: {action}")

        if inspect.iscoroutinefunction(handler):
            return await handler(**kwargs)
        return await asyncio.to_thread(handler, **kwargs)
