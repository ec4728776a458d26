"""Service for executing API calls with automatic retries.

Implements exponential backoff for rate limited calls only. Every other
error is propagated to the caller on the attempt it occurs.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Coroutine, Optional

from megaverse.domain.events.api_events import ApiCallFailed, RetryScheduled
from megaverse.domain.exceptions import MaxRetryError, RateLimitedError
from megaverse.domain.models.common import RetryPolicy

logger = logging.getLogger(__name__)


# --- Retry Service ---

class ApiRetryService:
    """Handles API call execution with retries on rate limiting."""

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initializes the ApiRetryService.

        Args:
            policy: Attempt count and backoff delays. Defaults to 3 attempts,
                0.5s base delay, doubling.
            sleep: Coroutine used to wait between attempts (injectable for tests).
        """
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self.retryable_exceptions = (RateLimitedError,)

        logger.info(
            f"ApiRetryService initialized: max_attempts={self.policy.max_attempts}, "
            f"initial_backoff={self.policy.base_delay_s}s, factor={self.policy.backoff_multiplier}"
        )

    async def execute_with_retry(
        self,
        func: Callable[..., Coroutine[Any, Any, Any]],
        *args: Any,
        endpoint_name: Optional[str] = None,
        **kwargs: Any
    ) -> Any:
        """Executes an async function, retrying it while it is rate limited.

        Args:
            func: The async function (API call) to execute.
            *args: Positional arguments for the function.
            endpoint_name: Name of the endpoint called, for logging.
            **kwargs: Keyword arguments for the function.

        Returns:
            The result of the function call.

        Raises:
            MaxRetryError: If every attempt was rate limited.
            Exception: Any non rate limit error, unchanged.
        """
        effective_endpoint = endpoint_name or getattr(func, "__name__", repr(func))
        max_attempts = self.policy.max_attempts

        def dispatch_event(event: Any) -> None:
            logger.debug(f"EVENT: {event}")

        for attempt in range(max_attempts):
            try:
                return await func(*args, **kwargs)
            except self.retryable_exceptions as e:
                if attempt == max_attempts - 1:
                    logger.error(f"Max attempts ({max_attempts}) reached for {effective_endpoint}. Last error: {e}")
                    dispatch_event(ApiCallFailed(endpoint=effective_endpoint, error_type=type(e).__name__, error_message=str(e)))
                    raise MaxRetryError(e, max_attempts) from e

                delay = self.policy.delay_for(attempt)
                logger.warning(
                    f"Rate limited calling {effective_endpoint} on attempt {attempt + 1}/{max_attempts}. "
                    f"Retrying in {delay * 1000:.0f}ms..."
                )
                dispatch_event(RetryScheduled(endpoint=effective_endpoint, attempt_number=attempt + 1, delay_seconds=delay))
                await self._sleep(delay)
            except Exception as e:
                logger.debug(f"Non-retryable error calling {effective_endpoint} on attempt {attempt + 1}: {type(e).__name__}")
                dispatch_event(ApiCallFailed(endpoint=effective_endpoint, error_type=type(e).__name__, error_message=str(e)))
                raise

        # Unreachable: the loop either returns or raises.
        raise RuntimeError(f"Retry loop for {effective_endpoint} ended without a result")
