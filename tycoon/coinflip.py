"""Coin Flip. Call heads or tails; a win pays 1.95x the stake.

The result is drawn when the bet is placed and only revealed after the
flip delay, so waiting cannot change it.
"""

import random
import threading
from enum import Enum

from tycoon.casino import pay_out, place_bet, record_loss
from tycoon.economy import Economy
from tycoon.fmt import format_currency

SIDES = ("heads", "tails")
PAYOUT = 1.95
FLIP_DELAY = 3.0


class CoinFlipPhase(str, Enum):
    BETTING = "betting"
    FLIPPING = "flipping"
    SETTLED = "settled"


class CoinFlipGame:
    def __init__(self, economy: Economy, rng: random.Random | None = None,
                 scheduler=None, delay: float = FLIP_DELAY, min_bet: float = 1.0):
        self.economy = economy
        self.rng = rng or random.Random()
        self.scheduler = scheduler
        self.delay = delay
        self.min_bet = min_bet
        self.lock = threading.Lock()

        self.phase = CoinFlipPhase.BETTING
        self.bet = 0.0
        self.choice: str | None = None
        self.result: str | None = None
        self.winnings = 0.0

    @property
    def won(self) -> bool:
        return self.phase == CoinFlipPhase.SETTLED and self.choice == self.result

    def flip(self, bet, choice: str) -> bool:
        if choice not in SIDES:
            return False
        with self.lock:
            if self.phase == CoinFlipPhase.FLIPPING:
                return False
            placed = place_bet(
                self.economy, bet, self.min_bet,
                lambda b: f"Bet {format_currency(b)} on {choice} in Coin Flip.",
            )
            if placed is None:
                return False
            self.bet = placed
            self.choice = choice
            self.result = "heads" if self.rng.random() < 0.5 else "tails"
            self.winnings = 0.0
            self.phase = CoinFlipPhase.FLIPPING
        if self.scheduler is not None:
            self.scheduler.later("coinflip", self.delay, self.settle)
        return True

    def settle(self) -> bool:
        """Reveal the stored result and pay out. No-op unless mid-flip."""
        with self.lock:
            if self.phase != CoinFlipPhase.FLIPPING:
                return False
            self.phase = CoinFlipPhase.SETTLED
            if self.choice == self.result:
                self.winnings = self.bet * PAYOUT
                pay_out(self.economy, self.winnings,
                        f"Won {format_currency(self.winnings)} in Coin Flip!")
            else:
                record_loss(self.economy, self.bet, "Coin Flip")
            return True

    def reset(self) -> None:
        with self.lock:
            if self.phase != CoinFlipPhase.FLIPPING:
                self.phase = CoinFlipPhase.BETTING
                self.choice = None
                self.result = None
