"""Application settings read from environment variables.

Every setting has a default suitable for local use. ``settings`` is the
process-wide instance; tests build their own ``Settings`` instead.
"""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings:
    """Marketplace settings with validation."""

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        env = os.environ if environ is None else environ

        self.DATA_DIR: Path = Path(env.get("MARKETPLACE_DATA_DIR", str(_DEFAULT_DATA_DIR)))

        # One authoritative price policy for cart previews and checkout.
        self.TAX_RATE: Decimal = _decimal(env.get("MARKETPLACE_TAX_RATE", "0.085"), "MARKETPLACE_TAX_RATE")
        self.SHIPPING_FEE: Decimal = _decimal(env.get("MARKETPLACE_SHIPPING_FEE", "10.00"), "MARKETPLACE_SHIPPING_FEE")
        self.FREE_SHIPPING_THRESHOLD: Decimal = _decimal(
            env.get("MARKETPLACE_FREE_SHIPPING_THRESHOLD", "50.00"),
            "MARKETPLACE_FREE_SHIPPING_THRESHOLD",
        )

        # Payment gateway
        self.PAYMENT_TIMEOUT: float = float(env.get("MARKETPLACE_PAYMENT_TIMEOUT", "10"))
        self.PAYMENT_SUCCESS_RATE: float = float(env.get("MARKETPLACE_PAYMENT_SUCCESS_RATE", "0.9"))

        # Logging
        self.LOG_LEVEL: str = env.get("MARKETPLACE_LOG_LEVEL", "WARNING").upper()

    def validate(self) -> None:
        """Raise ValueError describing the first out-of-range setting."""
        if not Decimal("0") <= self.TAX_RATE < Decimal("1"):
            raise ValueError(f"MARKETPLACE_TAX_RATE must be in [0, 1), got {self.TAX_RATE}")
        if self.SHIPPING_FEE < 0 or self.FREE_SHIPPING_THRESHOLD < 0:
            raise ValueError("Shipping fee and free-shipping threshold cannot be negative")
        if self.PAYMENT_TIMEOUT <= 0:
            raise ValueError("MARKETPLACE_PAYMENT_TIMEOUT must be positive")
        if not 0.0 <= self.PAYMENT_SUCCESS_RATE <= 1.0:
            raise ValueError("MARKETPLACE_PAYMENT_SUCCESS_RATE must be between 0 and 1")
        if self.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown MARKETPLACE_LOG_LEVEL: {self.LOG_LEVEL}")


def _decimal(raw: str, name: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a decimal number, got {raw!r}") from exc


settings = Settings()
