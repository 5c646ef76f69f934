"""Domain service: Payment Simulation.

There is no payment gateway.  A payment is approved or refused by a draw
from a fixed distribution, after an artificial processing delay.  Every
refusal is retryable; retrying is always the customer's decision.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

APPROVED_MESSAGE = "Payment processed successfully"

# (approved, message, probability); probabilities sum to 1.
OUTCOMES: tuple[tuple[bool, str, float], ...] = (
    (True, APPROVED_MESSAGE, 0.85),
    (False, "Card declined", 0.10),
    (False, "Insufficient funds", 0.03),
    (False, "Connection error", 0.02),
)

DEFAULT_DELAY_SECONDS = 2.0


@dataclass(frozen=True)
class PaymentOutcome:

    approved: bool
    message: str


class PaymentSimulator:

    def __init__(
        self,
        rng: random.Random | None = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._rng = rng or random.Random()
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    def process(self) -> PaymentOutcome:
        """Wait out the processing delay, then draw an outcome."""
        if self._delay_seconds > 0:
            self._sleep(self._delay_seconds)
        return self.draw()

    def draw(self) -> PaymentOutcome:
        roll = self._rng.random()
        cumulative = 0.0
        for approved, message, probability in OUTCOMES:
            cumulative += probability
            if roll <= cumulative:
                logger.info("[PAYMENT] Simulated outcome: %s", message)
                return PaymentOutcome(approved=approved, message=message)
        # Float rounding can leave the sum a hair under 1.0.
        return PaymentOutcome(approved=True, message=APPROVED_MESSAGE)
