"""Economy engine — owns the player state and every mutation of it.

All operations take the engine lock, check affordability or ownership first,
and return False instead of raising when the check fails. Listeners get a
deep-copied snapshot after each successful change.
"""

import copy
import logging
import math
import threading
import time
from datetime import datetime, timedelta
from typing import Callable

from tycoon.catalog import (
    ACTIVITY_FEED_CAP,
    ASSETS_BY_ID,
    CLICK_UPGRADES,
    CRYPTOS_BY_ID,
    PRESTIGE_RATE,
    PRESTIGE_REQUIREMENT,
    PROPERTIES_BY_ID,
    PROPERTY_COST_GROWTH,
    PROPERTY_INCOME_BONUS,
    STOCKS_BY_ID,
    ClickUpgrade,
)
from tycoon.fmt import format_currency, format_quantity
from tycoon.state import Activity, OwnedAsset, OwnedProperty, PlayerState, initial_state

logger = logging.getLogger(__name__)

Listener = Callable[[PlayerState], None]


def _valid_quantity(qty) -> bool:
    return isinstance(qty, (int, float)) and math.isfinite(qty) and qty > 0


def property_cost(property_id: str, level: int) -> float:
    """Price of the next level when `level` levels are already owned."""
    return PROPERTIES_BY_ID[property_id].base_cost * PROPERTY_COST_GROWTH ** level


def property_income(property_id: str, level: int) -> float:
    return PROPERTIES_BY_ID[property_id].base_income * level * PROPERTY_INCOME_BONUS ** (level - 1)


def property_value(property_id: str, level: int) -> float:
    return PROPERTIES_BY_ID[property_id].base_cost * PROPERTY_COST_GROWTH ** (level - 1)


def prestige_bonus(tycoon_level: int) -> float:
    return 1 + tycoon_level * PRESTIGE_RATE


def compute_net_worth(state: PlayerState) -> float:
    return (
        state.cash
        + sum(p.value for p in state.properties.values())
        + sum(h.value for h in state.crypto_holdings.values())
        + sum(h.value for h in state.stock_holdings.values())
        + sum(a.value for a in state.assets.values())
    )


class Economy:
    def __init__(self, state: PlayerState | None = None, daily_reward_base: float = 1000.0):
        self.state = state if state is not None else initial_state()
        self.daily_reward_base = daily_reward_base
        self.lock = threading.RLock()
        self._listeners: list[Listener] = []

    # -- observers -----------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    def snapshot(self) -> PlayerState:
        with self.lock:
            return copy.deepcopy(self.state)

    def replace_state(self, state: PlayerState) -> None:
        """Swap in a restored state, e.g. after loading a save."""
        with self.lock:
            self.state = state
        self._notify()

    # -- primitives ----------------------------------------------------------

    def _log(self, text: str, kind: str) -> None:
        feed = [Activity(text, kind)] + self.state.activity_feed
        self.state.activity_feed = feed[:ACTIVITY_FEED_CAP]

    def add_activity(self, text: str, kind: str = "neutral") -> None:
        with self.lock:
            self._log(text, kind)
        self._notify()

    def add_cash(self, amount: float) -> None:
        with self.lock:
            self.state.cash += amount
        self._notify()

    def remove_cash(self, amount: float) -> bool:
        """Deduct `amount` if it is affordable. Returns False otherwise."""
        with self.lock:
            if not _valid_quantity(amount) or amount > self.state.cash:
                return False
            self.state.cash -= amount
        self._notify()
        return True

    @property
    def cash(self) -> float:
        return self.state.cash

    def net_worth(self) -> float:
        with self.lock:
            return compute_net_worth(self.state)

    def prestige_bonus(self) -> float:
        return prestige_bonus(self.state.tycoon_level)

    # -- clicking ------------------------------------------------------------

    def click_value(self) -> float:
        tier = CLICK_UPGRADES[self.state.click_level - 1]
        return tier.click_value * self.prestige_bonus()

    def next_click_upgrade(self) -> ClickUpgrade | None:
        if self.state.click_level >= len(CLICK_UPGRADES):
            return None
        return CLICK_UPGRADES[self.state.click_level]

    def earn_by_click(self) -> float:
        with self.lock:
            earned = self.click_value()
            self.state.cash += earned
        self._notify()
        return earned

    def upgrade_click(self) -> bool:
        with self.lock:
            nxt = self.next_click_upgrade()
            if nxt is None or self.state.cash < nxt.cost:
                return False
            self.state.cash -= nxt.cost
            self.state.click_level += 1
            self._log(f"Upgraded click to Lvl {nxt.level}!", "gain")
        self._notify()
        return True

    # -- properties and luxury assets ----------------------------------------

    def property_cost(self, property_id: str) -> float | None:
        if property_id not in PROPERTIES_BY_ID:
            return None
        owned = self.state.properties.get(property_id)
        return property_cost(property_id, owned.level if owned else 0)

    def buy_or_upgrade_property(self, property_id: str) -> bool:
        prop = PROPERTIES_BY_ID.get(property_id)
        if prop is None:
            return False
        with self.lock:
            owned = self.state.properties.get(property_id)
            level = owned.level if owned else 0
            cost = property_cost(property_id, level)
            if self.state.cash < cost:
                return False
            self.state.cash -= cost
            new_level = level + 1
            self.state.properties[property_id] = OwnedProperty(
                level=new_level,
                income=property_income(property_id, new_level),
                value=property_value(property_id, new_level),
            )
            verb = "Upgraded" if owned else "Bought"
            self._log(f"{verb} {prop.name} to Lvl {new_level}", "gain")
        self._notify()
        return True

    def buy_asset(self, asset_id: str) -> bool:
        asset = ASSETS_BY_ID.get(asset_id)
        if asset is None:
            return False
        with self.lock:
            if asset_id in self.state.assets or self.state.cash < asset.cost:
                return False
            self.state.cash -= asset.cost
            self.state.assets[asset_id] = OwnedAsset(
                id=asset_id, value=asset.cost, flex_multiplier=asset.flex_multiplier,
            )
            self._log(f"Acquired {asset.name}!", "gain")
        self._notify()
        return True

    # -- trading -------------------------------------------------------------

    def _buy(self, book: str, asset_id: str, qty: float, ticker: str) -> bool:
        with self.lock:
            holding = getattr(self.state, book).get(asset_id)
            if holding is None or not _valid_quantity(qty) or holding.price <= 0:
                return False
            cost = qty * holding.price
            if self.state.cash < cost:
                return False
            self.state.cash -= cost
            holding.amount += qty
            holding.revalue()
            self._log(f"Bought {format_quantity(qty)} {ticker} for {format_currency(cost)}", "neutral")
        self._notify()
        return True

    def _sell(self, book: str, asset_id: str, qty: float, ticker: str) -> bool:
        with self.lock:
            holding = getattr(self.state, book).get(asset_id)
            if holding is None or not _valid_quantity(qty) or holding.amount < qty:
                return False
            gain = qty * holding.price
            self.state.cash += gain
            holding.amount -= qty
            if holding.amount < 1e-9:
                holding.amount = 0.0
            holding.revalue()
            self._log(f"Sold {format_quantity(qty)} {ticker} for {format_currency(gain)}", "neutral")
        self._notify()
        return True

    def buy_crypto(self, crypto_id: str, amount: float) -> bool:
        crypto = CRYPTOS_BY_ID.get(crypto_id)
        if crypto is None:
            return False
        return self._buy("crypto_holdings", crypto_id, amount, crypto.ticker)

    def sell_crypto(self, crypto_id: str, amount: float) -> bool:
        crypto = CRYPTOS_BY_ID.get(crypto_id)
        if crypto is None:
            return False
        return self._sell("crypto_holdings", crypto_id, amount, crypto.ticker)

    def buy_stock(self, stock_id: str, shares: float) -> bool:
        stock = STOCKS_BY_ID.get(stock_id)
        if stock is None:
            return False
        return self._buy("stock_holdings", stock_id, shares, stock.ticker)

    def sell_stock(self, stock_id: str, shares: float) -> bool:
        stock = STOCKS_BY_ID.get(stock_id)
        if stock is None:
            return False
        return self._sell("stock_holdings", stock_id, shares, stock.ticker)

    # -- market updates ------------------------------------------------------

    def _apply_prices(self, book: str, prices: dict[str, float]) -> None:
        with self.lock:
            for asset_id, price in prices.items():
                holding = getattr(self.state, book).get(asset_id)
                if holding is not None:
                    holding.record_price(price)
        self._notify()

    def apply_crypto_prices(self, prices: dict[str, float]) -> None:
        self._apply_prices("crypto_holdings", prices)

    def apply_stock_prices(self, prices: dict[str, float]) -> None:
        self._apply_prices("stock_holdings", prices)

    # -- prestige ------------------------------------------------------------

    def can_prestige(self) -> bool:
        return self.net_worth() >= PRESTIGE_REQUIREMENT

    def prestige(self) -> bool:
        with self.lock:
            worth = compute_net_worth(self.state)
            if worth < PRESTIGE_REQUIREMENT:
                return False
            level = self.state.tycoon_level + 1
            fresh = initial_state()
            fresh.tycoon_level = level
            bonus = level * PRESTIGE_RATE * 100
            fresh.activity_feed = [
                Activity(f"Went Tycoon! Level {level} reached! Prestige bonus is now +{bonus}%", "prestige"),
            ]
            self.state = fresh
        logger.info("Prestige to tycoon level %d at net worth %.2f", level, worth)
        self._notify()
        return True

    # -- daily reward --------------------------------------------------------

    def claim_daily_reward(self, now: datetime | None = None) -> float:
        """Claim today's reward. Returns the amount paid, 0 if already claimed."""
        now = now or datetime.now()
        today = now.date()
        with self.lock:
            last = self.state.last_claimed_daily_reward
            last_day = datetime.fromtimestamp(last).date() if last is not None else None
            if last_day == today:
                return 0.0
            if last_day is not None and last_day == today - timedelta(days=1):
                self.state.daily_reward_streak += 1
            else:
                self.state.daily_reward_streak = 1
            streak = self.state.daily_reward_streak
            reward = self.daily_reward_base * streak * (1 + self.state.tycoon_level)
            self.state.cash += reward
            self.state.last_claimed_daily_reward = now.timestamp()
            self._log(f"Daily reward: {format_currency(reward)} (streak {streak})", "gain")
        self._notify()
        return reward

    def touch(self, now: float | None = None) -> None:
        """Stamp `last_updated` for the offline-progress clock."""
        with self.lock:
            self.state.last_updated = time.time() if now is None else now
