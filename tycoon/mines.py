"""Mines — pick gems on a 25-cell grid, cash out before you hit a mine.

Every gem multiplies the stake by 1 + (mines / 25) * k. This is a simple
geometric curve, not the hypergeometric fair-odds payout.
"""

import random
import threading
from enum import Enum

from tycoon.casino import pay_out, place_bet, record_loss
from tycoon.catalog import MINES_GRID_SIZE, MINES_MAX, MINES_MIN
from tycoon.economy import Economy
from tycoon.fmt import format_currency

GEM = "gem"
MINE = "mine"


class MinesPhase(str, Enum):
    CONFIGURING = "configuring"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class MinesGame:
    def __init__(self, economy: Economy, rng: random.Random | None = None,
                 multiplier_factor: float = 1.0, min_bet: float = 1.0):
        self.economy = economy
        self.rng = rng or random.Random()
        self.multiplier_factor = multiplier_factor
        self.min_bet = min_bet
        self.lock = threading.Lock()

        self.phase = MinesPhase.CONFIGURING
        self.grid: list[str] = []
        self.revealed: list[bool] = []
        self.mines = MINES_MIN
        self.bet = 0.0
        self.multiplier = 1.0
        self.winnings = 0.0

    # -- board ---------------------------------------------------------------

    def _generate_grid(self, mines: int) -> list[str]:
        """Rejection sampling: draw cells until `mines` distinct ones are set."""
        grid = [GEM] * MINES_GRID_SIZE
        placed = 0
        while placed < mines:
            idx = self.rng.randrange(MINES_GRID_SIZE)
            if grid[idx] == GEM:
                grid[idx] = MINE
                placed += 1
        return grid

    @property
    def step_multiplier(self) -> float:
        return 1 + (self.mines / MINES_GRID_SIZE) * self.multiplier_factor

    @property
    def gems_revealed(self) -> int:
        return sum(1 for i, shown in enumerate(self.revealed) if shown and self.grid[i] == GEM)

    @property
    def next_payout(self) -> float:
        return self.bet * self.multiplier * self.step_multiplier

    @property
    def can_cash_out(self) -> bool:
        return self.phase == MinesPhase.PLAYING and self.gems_revealed > 0

    # -- actions -------------------------------------------------------------

    def start(self, bet, mines: int = MINES_MIN) -> bool:
        if not isinstance(mines, int) or not MINES_MIN <= mines <= MINES_MAX:
            return False
        with self.lock:
            if self.phase == MinesPhase.PLAYING:
                return False
            placed = place_bet(
                self.economy, bet, self.min_bet,
                lambda b: f"Started Mines with a {format_currency(b)} bet.",
            )
            if placed is None:
                return False
            self.mines = mines
            self.bet = placed
            self.grid = self._generate_grid(mines)
            self.revealed = [False] * MINES_GRID_SIZE
            self.multiplier = 1.0
            self.winnings = 0.0
            self.phase = MinesPhase.PLAYING
        return True

    def reveal(self, index: int) -> str | None:
        """Reveal one cell. Returns GEM or MINE, None if the click is ignored."""
        with self.lock:
            if self.phase != MinesPhase.PLAYING:
                return None
            if isinstance(index, bool) or not isinstance(index, int):
                return None
            if not 0 <= index < MINES_GRID_SIZE or self.revealed[index]:
                return None
            self.revealed[index] = True
            if self.grid[index] == MINE:
                self.phase = MinesPhase.LOST
                self.economy.add_activity(f"Hit a mine! Lost {format_currency(self.bet)}.", "loss")
                return MINE
            self.multiplier *= self.step_multiplier
            return GEM

    def cash_out(self) -> float:
        with self.lock:
            if not self.can_cash_out:
                return 0.0
            self.winnings = self.bet * self.multiplier
            self.phase = MinesPhase.WON
            pay_out(self.economy, self.winnings,
                    f"Cashed out {format_currency(self.winnings)} from Mines!")
            return self.winnings

    def abandon(self) -> None:
        """Leave mid-round. The stake is forfeited."""
        with self.lock:
            if self.phase == MinesPhase.PLAYING:
                self.phase = MinesPhase.LOST
                record_loss(self.economy, self.bet, "Mines")

    def reset(self) -> None:
        with self.lock:
            if self.phase != MinesPhase.PLAYING:
                self.phase = MinesPhase.CONFIGURING
                self.grid = []
                self.revealed = []
