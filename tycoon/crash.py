"""Crash: a multiplier climbs until a hidden crash point; cash out first."""

import random
import threading
import time
from enum import Enum
from typing import Callable

from tycoon.casino import pay_out, place_bet, record_loss
from tycoon.economy import Economy
from tycoon.fmt import format_currency, format_number

GROWTH = 1.04  # multiplier per second
MIN_CRASH = 1.01
SKEW = 1.1  # >1 pushes crash points low
FRAME_INTERVAL = 1 / 30


class CrashPhase(str, Enum):
    BETTING = "betting"
    RUNNING = "running"
    CRASHED = "crashed"


class CrashGame:
    def __init__(self, economy: Economy, rng: random.Random | None = None,
                 clock: Callable[[], float] = time.monotonic, min_bet: float = 100.0,
                 scheduler=None):
        self.economy = economy
        self.rng = rng or random.Random()
        self.clock = clock
        self.min_bet = min_bet
        self.scheduler = scheduler
        self.lock = threading.Lock()

        self.phase = CrashPhase.BETTING
        self.bet = 0.0
        self.crash_point = 1.0
        self.multiplier = 1.0
        self.start_time = 0.0
        self.cashed_out = False
        self.winnings = 0.0

    def draw_crash_point(self) -> float:
        r = self.rng.random() ** SKEW
        return max(MIN_CRASH, 1 / (1 - r))

    def multiplier_at(self, elapsed: float) -> float:
        return GROWTH ** elapsed

    def start(self, bet) -> bool:
        with self.lock:
            if self.phase == CrashPhase.RUNNING:
                return False
            placed = place_bet(
                self.economy, bet, self.min_bet,
                lambda b: f"Placed a {format_currency(b)} bet on Crash.",
            )
            if placed is None:
                return False
            self.bet = placed
            self.crash_point = self.draw_crash_point()
            self.multiplier = 1.0
            self.cashed_out = False
            self.winnings = 0.0
            self.start_time = self.clock()
            self.phase = CrashPhase.RUNNING
        if self.scheduler is not None:
            self.scheduler.every("crash", FRAME_INTERVAL, self.update)
        return True

    def _advance(self) -> None:
        if self.phase != CrashPhase.RUNNING:
            return
        m = self.multiplier_at(self.clock() - self.start_time)
        if m < self.crash_point:
            self.multiplier = m
            return
        self.multiplier = self.crash_point
        self.phase = CrashPhase.CRASHED
        if not self.cashed_out:
            self.economy.add_activity(f"Crashed! Lost {format_currency(self.bet)}.", "loss")
        if self.scheduler is not None:
            self.scheduler.cancel("crash")

    def update(self) -> float:
        """One animation frame. Returns the multiplier now on screen."""
        with self.lock:
            self._advance()
            return self.multiplier

    def cash_out(self) -> float:
        with self.lock:
            self._advance()
            if self.phase != CrashPhase.RUNNING or self.cashed_out:
                return 0.0
            self.cashed_out = True
            self.winnings = self.bet * self.multiplier
            pay_out(self.economy, self.winnings,
                    f"Cashed out {format_currency(self.winnings)} at {format_number(self.multiplier)}x from Crash!")
            return self.winnings

    def forfeit(self) -> None:
        """End a running round now. A bet not yet cashed out is lost."""
        with self.lock:
            if self.phase != CrashPhase.RUNNING:
                return
            self.phase = CrashPhase.CRASHED
            if not self.cashed_out:
                record_loss(self.economy, self.bet, "Crash")
        if self.scheduler is not None:
            self.scheduler.cancel("crash")

    def reset(self) -> None:
        with self.lock:
            if self.phase != CrashPhase.RUNNING:
                self.phase = CrashPhase.BETTING
