"""Client for the remote arithmetic service (mathjs compatible).

Some integer ranges document their upper bound as an expression such as
``(30000000*8)``. Those are sent to ``GET <math_api_url>?expr=<expression>``
whose body is a decimal number.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Protocol

import httpx
from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .errors import EvaluatorUnreachableError
from .net import get_http_client
from .settings import EvaluatorConfiguration

LOGGER = logging.getLogger(__name__)

__all__ = ["ExpressionEvaluator", "MathEvaluator", "parse_number"]


class ExpressionEvaluator(Protocol):
    """Anything able to turn an arithmetic expression into an integer."""

    def evaluate(self, expression: str) -> int:  # pragma: no cover - protocol
        ...


def parse_number(body: str) -> int:
    """Parse a decimal response body, truncating toward zero.

    Raises:
        EvaluatorUnreachableError: If the body is not a finite number.

    Examples:
        >>> parse_number("240000000")
        240000000
        >>> parse_number("2.4e+8")
        240000000
    """

    text = body.strip()
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise EvaluatorUnreachableError(
            f"arithmetic service answered with a non-number: {text!r}", text=text
        ) from exc
    if not value.is_finite():
        raise EvaluatorUnreachableError(
            f"arithmetic service answered with a non-finite number: {text!r}", text=text
        )
    return int(value)


class MathEvaluator:
    """Evaluate expressions through the configured HTTP endpoint.

    Attributes:
        config: Endpoint URL and retry budget.
        client: Optional dedicated client; the shared client is used otherwise.
    """

    def __init__(
        self,
        config: Optional[EvaluatorConfiguration] = None,
        *,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config or EvaluatorConfiguration()
        self.client = client

    def _request(self, expression: str) -> str:
        client = self.client or get_http_client()
        response = client.get(self.config.math_api_url, params={"expr": expression})
        response.raise_for_status()
        return response.text

    def evaluate(self, expression: str) -> int:
        """Return the integer value of ``expression``.

        Args:
            expression: Arithmetic expression such as ``30000000*8``.

        Returns:
            Integer result, truncated toward zero.

        Raises:
            EvaluatorUnreachableError: On transport failure or unparsable output.
        """

        LOGGER.debug("evaluating expression", extra={"expression": expression})
        retrying = Retrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(multiplier=self.config.backoff_sec, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=before_sleep_log(LOGGER, logging.WARNING),
            reraise=True,
        )
        try:
            body = retrying(self._request, expression)
        except (httpx.HTTPError, RetryError) as exc:
            raise EvaluatorUnreachableError(
                f"arithmetic service failed for {expression!r}: {exc}", text=expression
            ) from exc
        return parse_number(body)
