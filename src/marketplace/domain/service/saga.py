"""Saga: forward steps paired with compensating actions.

Used where one business operation writes to several independent stores
and no shared transaction is available. Each successful step records how
to undo itself; on any failure the recorded compensations run in reverse
order.

    with Saga("checkout") as saga:
        reservation = saga.step("reserve", lambda: ledger.reserve(pid, 2),
                                compensation=ledger.release_reservation)
        ...

Leaving the ``with`` block by exception compensates and re-raises.
Leaving it normally commits (forgets every compensation).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Saga:

    def __init__(self, name: str) -> None:
        self.name = name
        self._compensations: list[tuple[str, Callable[[], Any]]] = []
        self.compensations_run = 0
        self.compensations_failed = 0

    def step(
        self,
        description: str,
        action: Callable[[], T],
        compensation: Callable[[T], Any] | None = None,
    ) -> T:
        """Run *action*; on success remember ``compensation(result)``."""
        result = action()
        if compensation is not None:
            self._compensations.append((description, partial(compensation, result)))
        return result

    def compensate(self) -> None:
        """Undo every recorded step, newest first.

        A failing compensation is logged and the rest still run.
        """
        while self._compensations:
            description, undo = self._compensations.pop()
            try:
                undo()
                self.compensations_run += 1
                logger.info("[%s] compensated: %s", self.name, description)
            except Exception:
                self.compensations_failed += 1
                logger.exception("[%s] compensation failed: %s", self.name, description)

    def commit(self) -> None:
        self._compensations.clear()

    @property
    def pending(self) -> int:
        return len(self._compensations)

    def __enter__(self) -> Saga:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            logger.info("[%s] rolling back after %s", self.name, exc_type.__name__)
            self.compensate()
        return False
