"""Bet handling shared by the casino mini-games.

Cash leaves the wallet only when a valid bet is accepted and comes back only
at settlement. Those two calls are the games' sole contact with the economy.
"""

import math

from tycoon.economy import Economy
from tycoon.fmt import format_currency


def parse_bet(raw, cash: float, min_bet: float = 0.0) -> float | None:
    """Validate a bet. Returns None for anything the player may not stake."""
    if isinstance(raw, bool):
        return None
    try:
        bet = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(bet) or bet <= 0 or bet < min_bet or bet > cash:
        return None
    return bet


def place_bet(economy: Economy, raw, min_bet: float, describe) -> float | None:
    """Deduct a valid bet and log it. `describe(bet)` builds the feed text."""
    with economy.lock:
        bet = parse_bet(raw, economy.cash, min_bet)
        if bet is None or not economy.remove_cash(bet):
            return None
        economy.add_activity(describe(bet), "neutral")
    return bet


def pay_out(economy: Economy, amount: float, text: str, kind: str = "gain") -> None:
    with economy.lock:
        economy.add_cash(amount)
        economy.add_activity(text, kind)


def record_loss(economy: Economy, bet: float, game: str) -> None:
    economy.add_activity(f"Lost {format_currency(bet)} in {game}.", "loss")
