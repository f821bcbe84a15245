"""Domain service contract: Payment Gateway.

``PaymentGateway`` is the port checkout charges through. A declined
charge is a normal ``PaymentResult``; an unreachable or misbehaving
provider raises ``PaymentGatewayError``.

``TimeoutPaymentGateway`` bounds every call to a provider so a hung
request cannot keep stock reserved indefinitely.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent import futures
from dataclasses import dataclass

from marketplace.domain.exceptions import PaymentGatewayError
from marketplace.domain.model.order import PaymentMethod
from marketplace.domain.model.value_objects import Money

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    transaction_id: str | None = None
    error: str | None = None

    @staticmethod
    def approved(transaction_id: str) -> PaymentResult:
        return PaymentResult(success=True, transaction_id=transaction_id)

    @staticmethod
    def declined(reason: str) -> PaymentResult:
        return PaymentResult(success=False, error=reason)


class PaymentGateway(ABC):

    @abstractmethod
    def charge(self, method: PaymentMethod, amount: Money) -> PaymentResult:
        """Charge *amount*; return approved or declined."""

    @abstractmethod
    def refund(self, transaction_id: str, amount: Money) -> None:
        """Refund a completed charge. Raises PaymentGatewayError on failure."""


class TimeoutPaymentGateway(PaymentGateway):
    """Decorates another gateway with a per-call deadline.

    A charge that misses the deadline is reported as declined. The
    underlying call cannot be interrupted, so if it later completes
    successfully it is refunded straight away.
    """

    def __init__(
        self,
        inner: PaymentGateway,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_workers: int = 4,
    ) -> None:
        if timeout <= 0:
            raise ValueError("Payment timeout must be positive")
        self._inner = inner
        self._timeout = timeout
        self._executor = futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="payment"
        )

    def charge(self, method: PaymentMethod, amount: Money) -> PaymentResult:
        future = self._executor.submit(self._inner.charge, method, amount)
        try:
            return future.result(timeout=self._timeout)
        except futures.TimeoutError:
            logger.warning("Charge of %s timed out after %.1fs", amount, self._timeout)
            future.add_done_callback(self._refund_if_charged(amount))
            return PaymentResult.declined("Payment gateway timed out")

    def refund(self, transaction_id: str, amount: Money) -> None:
        future = self._executor.submit(self._inner.refund, transaction_id, amount)
        try:
            future.result(timeout=self._timeout)
        except futures.TimeoutError as exc:
            raise PaymentGatewayError(
                f"Refund of {transaction_id} timed out after {self._timeout}s"
            ) from exc

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    def _refund_if_charged(self, amount: Money):
        def callback(future: futures.Future) -> None:
            if future.cancelled() or future.exception() is not None:
                return
            result = future.result()
            if not result.success:
                return
            logger.warning(
                "Late charge %s completed after timeout; refunding", result.transaction_id
            )
            try:
                self._inner.refund(result.transaction_id, amount)
            except PaymentGatewayError:
                logger.exception("Refund of late charge %s failed", result.transaction_id)

        return callback
