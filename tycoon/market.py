"""Market simulator: crypto, stock and trend timers.

Real coins take the external feed price when it has one. The synthetic coin
follows a trend-biased random walk; stocks follow a slightly upward-biased
walk of their own. Every update rolls each asset's price history.
"""

import logging
import random
from enum import Enum

from tycoon.catalog import CRYPTOS, STOCKS
from tycoon.config import MarketConfig
from tycoon.economy import Economy
from tycoon.scheduler import Scheduler

logger = logging.getLogger(__name__)

SYNTHETIC_FLOOR = 0.01
STOCK_FLOOR = 1.0
TREND_BIAS = 0.75  # fraction of volatility added (bull) or removed (bear)


class Trend(str, Enum):
    BULL = "bull"
    BEAR = "bear"
    STABLE = "stable"


class MarketSimulator:
    def __init__(self, economy: Economy, feed=None, config: MarketConfig | None = None,
                 rng: random.Random | None = None):
        self.economy = economy
        self.feed = feed
        self.config = config or MarketConfig()
        self.rng = rng or random.Random()
        self.trend = Trend.STABLE
        self.scheduler: Scheduler | None = None

    # -- price rules ---------------------------------------------------------

    def trend_bias(self) -> float:
        v = self.config.crypto_volatility
        if self.trend == Trend.BULL:
            return TREND_BIAS * v
        if self.trend == Trend.BEAR:
            return -TREND_BIAS * v
        return 0.0

    def next_synthetic_price(self, price: float) -> float:
        v = self.config.crypto_volatility
        delta = self.rng.uniform(-v / 2, v / 2) + self.trend_bias()
        return max(SYNTHETIC_FLOOR, price * (1 + delta))

    def next_stock_price(self, price: float) -> float:
        delta = self.rng.uniform(-0.49, 0.51) * self.config.stock_volatility
        return max(STOCK_FLOOR, price * (1 + delta))

    # -- updates -------------------------------------------------------------

    def update_crypto(self) -> dict[str, float]:
        """One crypto tick. Network fetch runs outside the economy lock."""
        external = {}
        if self.feed is not None:
            external = self.feed.fetch_prices([c.id for c in CRYPTOS if not c.synthetic])

        with self.economy.lock:
            holdings = self.economy.state.crypto_holdings
            prices = {}
            for crypto in CRYPTOS:
                holding = holdings.get(crypto.id)
                if holding is None:
                    continue
                if external.get(crypto.id):
                    prices[crypto.id] = external[crypto.id]
                elif crypto.synthetic:
                    prices[crypto.id] = self.next_synthetic_price(holding.price)
                else:
                    prices[crypto.id] = holding.price
            self.economy.apply_crypto_prices(prices)
        return prices

    def update_stocks(self) -> dict[str, float]:
        with self.economy.lock:
            holdings = self.economy.state.stock_holdings
            prices = {
                s.id: self.next_stock_price(holdings[s.id].price)
                for s in STOCKS if s.id in holdings
            }
            self.economy.apply_stock_prices(prices)
        return prices

    def resample_trend(self) -> Trend:
        self.trend = self.rng.choice(list(Trend))
        return self.trend

    # -- scheduling ----------------------------------------------------------

    def start(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler
        self._arm_crypto()
        scheduler.every("stocks", self.config.stock_interval, self.update_stocks, run_now=True)
        scheduler.every("trend", self.config.trend_interval, self._on_trend_timer)

    def _arm_crypto(self) -> None:
        self.scheduler.every("crypto", self.config.crypto_interval, self.update_crypto, run_now=True)

    def _on_trend_timer(self) -> None:
        old = self.trend
        new = self.resample_trend()
        if new != old:
            logger.info("Crypto trend %s -> %s", old.value, new.value)
            if self.scheduler is not None:
                self._arm_crypto()

    def stop(self) -> None:
        if self.scheduler is not None:
            for name in ("crypto", "stocks", "trend"):
                self.scheduler.cancel(name)
