"""Save slot for the player state.

Stores the whole PlayerState as JSON in one named file. Loading reconciles
the snapshot against the current catalogs so saves survive catalog changes.
"""

import json
import logging
import math
import os
import threading
import time
from dataclasses import asdict
from pathlib import Path

from tycoon.catalog import (
    ACTIVITY_FEED_CAP,
    ASSETS_BY_ID,
    CLICK_UPGRADES,
    CRYPTOS,
    HISTORY_LENGTH,
    PROPERTIES_BY_ID,
    START_CASH,
    STOCKS,
    initial_crypto_price,
)
from tycoon.economy import property_income, property_value
from tycoon.state import (
    ACTIVITY_KINDS,
    Activity,
    Holding,
    OwnedAsset,
    OwnedProperty,
    PlayerState,
    initial_state,
    seed_holding,
)

logger = logging.getLogger(__name__)


def _number(raw: dict, key: str, default: float, minimum: float | None = None) -> float:
    try:
        value = float(raw.get(key, default))
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    if minimum is not None and value < minimum:
        return minimum
    return value


def _mapping(raw: dict, key: str) -> dict:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def _history(raw_history, price: float) -> list[float]:
    history = [float(p) for p in (raw_history or []) if isinstance(p, (int, float))]
    history = history[-HISTORY_LENGTH:]
    fill = history[0] if history else price
    return [fill] * (HISTORY_LENGTH - len(history)) + history


def _holdings(raw: dict, catalog_ids_prices: list[tuple[str, float]]) -> dict[str, Holding]:
    holdings = {}
    for asset_id, default_price in catalog_ids_prices:
        entry = raw.get(asset_id)
        if not isinstance(entry, dict):
            holdings[asset_id] = seed_holding(asset_id, default_price)
            continue
        price = _number(entry, "price", default_price, minimum=0.0)
        holding = Holding(
            id=asset_id,
            amount=_number(entry, "amount", 0.0, minimum=0.0),
            price=price,
            price_history=_history(entry.get("price_history"), price),
        )
        holding.revalue()
        holdings[asset_id] = holding
    return holdings


def state_to_dict(state: PlayerState) -> dict:
    return asdict(state)


def state_from_dict(raw: dict) -> PlayerState:
    """Rebuild a PlayerState, dropping unknown ids and filling gaps."""
    state = initial_state()
    state.cash = _number(raw, "cash", START_CASH, minimum=0.0)
    state.click_level = min(int(_number(raw, "click_level", 1, minimum=1)), len(CLICK_UPGRADES))
    state.tycoon_level = int(_number(raw, "tycoon_level", 0, minimum=0))

    state.properties = {}
    for pid, entry in _mapping(raw, "properties").items():
        if pid not in PROPERTIES_BY_ID or not isinstance(entry, dict):
            continue
        level = int(_number(entry, "level", 1, minimum=1))
        state.properties[pid] = OwnedProperty(
            level=level,
            income=property_income(pid, level),
            value=property_value(pid, level),
        )

    state.crypto_holdings = _holdings(
        _mapping(raw, "crypto_holdings"),
        [(c.id, initial_crypto_price(c)) for c in CRYPTOS],
    )
    state.stock_holdings = _holdings(
        _mapping(raw, "stock_holdings"),
        [(s.id, s.base_price) for s in STOCKS],
    )

    state.assets = {}
    for aid in _mapping(raw, "assets"):
        asset = ASSETS_BY_ID.get(aid)
        if asset is not None:
            state.assets[aid] = OwnedAsset(id=aid, value=asset.cost, flex_multiplier=asset.flex_multiplier)

    feed = []
    raw_feed = raw.get("activity_feed")
    if not isinstance(raw_feed, list):
        raw_feed = []
    for entry in raw_feed[:ACTIVITY_FEED_CAP]:
        if not isinstance(entry, dict) or "text" not in entry:
            continue
        kind = entry.get("kind") if entry.get("kind") in ACTIVITY_KINDS else "neutral"
        activity = Activity(str(entry["text"]), kind)
        if entry.get("id"):
            activity.id = str(entry["id"])
        feed.append(activity)
    if feed:
        state.activity_feed = feed

    state.daily_reward_streak = int(_number(raw, "daily_reward_streak", 0, minimum=0))
    last_claim = raw.get("last_claimed_daily_reward")
    state.last_claimed_daily_reward = (
        float(last_claim) if isinstance(last_claim, (int, float)) else None
    )
    state.last_updated = _number(raw, "last_updated", time.time())
    return state


class SaveStore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, state: PlayerState, now: float | None = None) -> bool:
        data = state_to_dict(state)
        data["last_updated"] = time.time() if now is None else now
        tmp = self.path.with_suffix(".tmp")
        with self._lock:
            try:
                os.makedirs(self.path.parent, exist_ok=True)
                with open(tmp, "w") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp, self.path)
            except OSError as exc:
                logger.warning("Save to %s failed: %s", self.path, exc)
                return False
        logger.debug("Saved game to %s", self.path)
        return True

    def load(self) -> PlayerState:
        """Return the saved state, or a fresh one if missing or corrupt."""
        with self._lock:
            try:
                with open(self.path) as f:
                    raw = json.load(f)
            except FileNotFoundError:
                return initial_state()
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Save %s unreadable, starting fresh: %s", self.path, exc)
                return initial_state()
        if not isinstance(raw, dict):
            logger.warning("Save %s has no state object, starting fresh", self.path)
            return initial_state()
        logger.info("Loaded save from %s", self.path)
        return state_from_dict(raw)

    def delete(self) -> None:
        with self._lock:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass
