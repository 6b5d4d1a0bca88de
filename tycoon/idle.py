"""Idle and offline income.

Both paths use the same per-tick income so a stretch of offline time pays
exactly what the same number of simulated ticks would.
"""

import logging
import time
from dataclasses import dataclass

from tycoon.catalog import PROPERTIES_BY_ID, TICKS_PER_SECOND
from tycoon.economy import Economy, prestige_bonus
from tycoon.fmt import format_currency
from tycoon.state import PlayerState

logger = logging.getLogger(__name__)

OFFLINE_MIN_SECONDS = 10.0


def flex_bonus(state: PlayerState) -> float:
    return sum(a.flex_multiplier for a in state.assets.values())


def global_multiplier(state: PlayerState) -> float:
    return prestige_bonus(state.tycoon_level) * (1 + flex_bonus(state))


def income_per_tick(state: PlayerState) -> float:
    base = sum(
        owned.income / TICKS_PER_SECOND
        for pid, owned in state.properties.items()
        if pid in PROPERTIES_BY_ID
    )
    return base * global_multiplier(state)


def offline_earnings(state: PlayerState, elapsed_seconds: float) -> float:
    return income_per_tick(state) * elapsed_seconds


@dataclass
class OfflineGains:
    seconds: float
    amount: float


class IdleAccumulator:
    def __init__(self, economy: Economy, min_offline_seconds: float = OFFLINE_MIN_SECONDS):
        self.economy = economy
        self.min_offline_seconds = min_offline_seconds
        self.pending_offline_gains: OfflineGains | None = None

    def tick(self) -> float:
        with self.economy.lock:
            amount = income_per_tick(self.economy.state)
            if amount > 0:
                self.economy.add_cash(amount)
        return amount

    def apply_offline(self, now: float | None = None) -> OfflineGains | None:
        """Credit income earned since the last save. Run once at startup."""
        now = time.time() if now is None else now
        with self.economy.lock:
            elapsed = now - self.economy.state.last_updated
            if elapsed < self.min_offline_seconds:
                return None
            earned = offline_earnings(self.economy.state, elapsed)
            self.economy.state.last_updated = now
            if earned <= 0:
                return None
            self.economy.add_cash(earned)
            self.economy.add_activity(
                f"Welcome back! Earned {format_currency(earned)} while away.", "gain",
            )
        logger.info("Offline for %.0fs, earned %.2f", elapsed, earned)
        self.pending_offline_gains = OfflineGains(seconds=elapsed, amount=earned)
        return self.pending_offline_gains

    def acknowledge(self) -> OfflineGains | None:
        """Return and clear the one-shot offline notification."""
        gains, self.pending_offline_gains = self.pending_offline_gains, None
        return gains
