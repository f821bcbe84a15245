"""Simulated payment provider for local runs.

Approves a configurable share of charges after an optional delay and
hands out ``pay_<ms>_<random>`` transaction ids. Refunds always succeed.
"""

from __future__ import annotations

import logging
import random
import secrets
import string
import time

from marketplace.domain.model.order import PaymentMethod
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.payment_gateway import PaymentGateway, PaymentResult

logger = logging.getLogger(__name__)

_ALPHABET = string.ascii_lowercase + string.digits


class SimulatedPaymentGateway(PaymentGateway):

    def __init__(
        self,
        success_rate: float = 0.9,
        delay: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self._success_rate = success_rate
        self._delay = delay
        self._rng = rng or random.Random()

    def charge(self, method: PaymentMethod, amount: Money) -> PaymentResult:
        if self._delay:
            time.sleep(self._delay)

        if self._rng.random() >= self._success_rate:
            logger.info("Simulated %s charge of %s declined", method.value, amount)
            return PaymentResult.declined("Payment processing failed")

        transaction_id = (
            f"pay_{int(time.time() * 1000)}_"
            + "".join(secrets.choice(_ALPHABET) for _ in range(9))
        )
        logger.info("Simulated %s charge of %s approved", method.value, amount)
        return PaymentResult.approved(transaction_id)

    def refund(self, transaction_id: str, amount: Money) -> None:
        logger.info("Simulated refund of %s for %s", amount, transaction_id)
