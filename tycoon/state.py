"""Player state records and the initial-state factory."""

import time
import uuid
from dataclasses import dataclass, field

from tycoon.catalog import (
    CRYPTOS,
    HISTORY_LENGTH,
    START_CASH,
    STOCKS,
    initial_crypto_price,
)

ACTIVITY_KINDS = ("gain", "loss", "neutral", "prestige")


@dataclass
class OwnedProperty:
    level: int
    income: float
    value: float


@dataclass
class Holding:
    """Crypto coins or stock shares of one catalog asset."""

    id: str
    amount: float = 0.0
    price: float = 0.0
    value: float = 0.0
    price_history: list[float] = field(default_factory=list)

    def record_price(self, price: float) -> None:
        """Set the current price, roll the history window and revalue."""
        self.price = price
        self.price_history = (self.price_history + [price])[-HISTORY_LENGTH:]
        self.revalue()

    def revalue(self) -> None:
        self.value = self.amount * self.price


@dataclass
class OwnedAsset:
    id: str
    value: float
    flex_multiplier: float


@dataclass
class Activity:
    text: str
    kind: str = "neutral"  # "gain" | "loss" | "neutral" | "prestige"
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


@dataclass
class PlayerState:
    cash: float = START_CASH
    click_level: int = 1
    tycoon_level: int = 0
    properties: dict[str, OwnedProperty] = field(default_factory=dict)
    crypto_holdings: dict[str, Holding] = field(default_factory=dict)
    stock_holdings: dict[str, Holding] = field(default_factory=dict)
    assets: dict[str, OwnedAsset] = field(default_factory=dict)
    activity_feed: list[Activity] = field(default_factory=list)
    daily_reward_streak: int = 0
    last_claimed_daily_reward: float | None = None
    last_updated: float = field(default_factory=time.time)


def seed_holding(asset_id: str, price: float) -> Holding:
    return Holding(id=asset_id, price=price, price_history=[price] * HISTORY_LENGTH)


def initial_crypto_holdings() -> dict[str, Holding]:
    return {c.id: seed_holding(c.id, initial_crypto_price(c)) for c in CRYPTOS}


def initial_stock_holdings() -> dict[str, Holding]:
    return {s.id: seed_holding(s.id, s.base_price) for s in STOCKS}


def initial_state(now: float | None = None) -> PlayerState:
    """Fresh game: starting cash, seeded holdings and a welcome entry."""
    return PlayerState(
        crypto_holdings=initial_crypto_holdings(),
        stock_holdings=initial_stock_holdings(),
        activity_feed=[Activity("Welcome to Tycoon Aurora!", "neutral")],
        last_updated=time.time() if now is None else now,
    )
