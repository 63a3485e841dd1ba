"""Retrying transport with bounded exponential backoff.

Every request is retried, whatever its method: GraphQL reads and writes are
both sent as POST, and the envelope body can be replayed as-is.

| Outcome | Retried |
|---------|---------|
| Network error (connect, read, TLS, ...) | yes |
| 429 Too Many Requests | yes, honouring Retry-After |
| 5xx except 501 | yes (503 honours Retry-After) |
| anything else | no |

A request carrying a CallContext under ``CALL_CONTEXT_EXTENSION`` stops
retrying once the context is cancelled or past its deadline. Its waits end
early when the cancel event is set.

## Example

```python
import httpx

from graphql_client_core.transport.retry import RetryPolicy, RetryTransport

transport = RetryTransport(
    wrapped_transport=httpx.HTTPTransport(),
    policy=RetryPolicy(max_retries=5, min_wait=1.0, max_wait=30.0),
)

with httpx.Client(transport=transport) as client:
    response = client.post("https://api.example.com/graphql", json={...})
```
"""

import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from graphql_client_core.execution import CallContext

logger = logging.getLogger(__name__)

# Request extension carrying the CallContext of the call being sent
CALL_CONTEXT_EXTENSION = "graphql_client_core.call_context"


def _abandoned(context: "CallContext | None") -> bool:
    return context is not None and context.cancelled


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds for transport-level retries.

    Attributes:
        max_retries: Retries after the first attempt; total attempts is
            ``max_retries + 1``.
        min_wait: Wait before the first retry, in seconds.
        max_wait: Cap on any single wait, in seconds.
    """

    max_retries: int = 10
    min_wait: float = 1.0
    max_wait: float = 10.0

    def delay(self, retry_number: int) -> float:
        """Exponential backoff capped at max_wait.

        Uses formula: min(min_wait * (2 ** (retry_number - 1)), max_wait)
        Default sequence: 1, 2, 4, 8, 10, 10, ... seconds

        Args:
            retry_number: Current retry attempt (1-indexed)
        """
        base = max(self.min_wait, 0.0)
        return min(base * (2 ** (retry_number - 1)), max(self.max_wait, 0.0))


class RetryTransport(httpx.BaseTransport):
    """Transport that retries transient failures of the wrapped transport.

    Waits never decrease from one retry to the next. When retries run out,
    the last response is returned, or the last network error re-raised, so
    the caller sees an ordinary HTTP outcome.
    """

    RETRY_AFTER_STATUS_CODES: frozenset[int] = frozenset([429, 503])

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.policy = policy or RetryPolicy()

    def __enter__(self):
        self._wrapped_transport.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return self._wrapped_transport.__exit__(exc_type, exc_val, exc_tb)

    def close(self) -> None:
        self._wrapped_transport.close()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        context = request.extensions.get(CALL_CONTEXT_EXTENSION)
        retries = 0
        last_delay = 0.0

        while True:
            self._bound_timeout(request, context)
            try:
                response = self._wrapped_transport.handle_request(request)
            except httpx.TransportError as e:
                if retries >= self.policy.max_retries or _abandoned(context):
                    raise

                retries += 1
                last_delay = self._next_delay(retries, last_delay)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e!r}, "
                    f"retrying in {last_delay}s (attempt {retries}/{self.policy.max_retries})"
                )
                if not self._wait(last_delay, context):
                    logger.debug(f"Request {request.method} {request.url} abandoned while waiting to retry")
                    raise
                continue

            if retries >= self.policy.max_retries or not self._should_retry(response) or _abandoned(context):
                return response

            retries += 1
            last_delay = self._next_delay(retries, last_delay, self._parse_retry_after(response))
            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {last_delay}s (attempt {retries}/{self.policy.max_retries})"
            )
            if not self._wait(last_delay, context):
                logger.debug(f"Request {request.method} {request.url} abandoned while waiting to retry")
                return response
            response.close()

    @staticmethod
    def _wait(delay: float, context: "CallContext | None") -> bool:
        """Sleep before the next attempt. Returns False if the call was abandoned meanwhile."""
        if context is None:
            time.sleep(delay)
            return True
        remaining = context.remaining()
        if remaining is not None:
            delay = min(delay, remaining)
        if context.cancel_event is not None:
            context.cancel_event.wait(delay)
        else:
            time.sleep(delay)
        return not context.cancelled

    @staticmethod
    def _bound_timeout(request: httpx.Request, context: "CallContext | None") -> None:
        # No single attempt may outlive the call's deadline
        remaining = context.remaining() if context is not None else None
        if remaining is None:
            return
        timeout = request.extensions.get("timeout") or {}
        request.extensions["timeout"] = {
            name: remaining if value is None else min(value, remaining) for name, value in timeout.items()
        }

    @staticmethod
    def _should_retry(response: httpx.Response) -> bool:
        status = response.status_code
        if status == 429:
            return True
        return 500 <= status < 600 and status != 501

    def _next_delay(self, retry_number: int, last_delay: float, retry_after: float | None = None) -> float:
        delay = self.policy.delay(retry_number)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return min(max(delay, last_delay), max(self.policy.max_wait, 0.0))

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse the Retry-After header of a 429 or 503 response.

        Supports both formats:
        - Delay-seconds: "120" (integer seconds)
        - HTTP-date: "Wed, 21 Oct 2015 07:28:00 GMT"

        Returns:
            Delay in seconds, or None if the header is missing, invalid or
            in the past
        """
        if response.status_code not in self.RETRY_AFTER_STATUS_CODES:
            return None

        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = int(retry_after)
            return float(delay) if delay >= 0 else None
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after)
            delay = (retry_date - datetime.now(UTC)).total_seconds()
            return delay if delay >= 0 else None
        except (ValueError, TypeError):
            return None
