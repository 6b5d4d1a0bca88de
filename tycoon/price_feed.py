"""Real-world crypto prices from an exchange via ccxt (sync, no auth)."""

import logging
import time

import ccxt

from tycoon.catalog import CRYPTOS, Crypto

logger = logging.getLogger(__name__)

RETRY_INTERVAL = 30.0


class PriceFeed:
    """Batched ticker fetch for the non-synthetic catalog coins.

    Returns {crypto_id: last_price}. Any failure returns an empty mapping,
    which callers treat as "no data" for every coin.
    """

    def __init__(self, exchange_id: str = "binance", timeout_ms: int = 5000,
                 cryptos: list[Crypto] = CRYPTOS):
        self.exchange_id = exchange_id
        self.timeout_ms = timeout_ms
        self.pairs = {c.pair: c.id for c in cryptos if c.pair and not c.synthetic}
        self.exchange = None
        self.online = False
        self.last_retry = 0.0
        self._init_exchange()

    def _init_exchange(self):
        self.last_retry = time.time()
        try:
            exchange_class = getattr(ccxt, self.exchange_id)
            self.exchange = exchange_class({
                "enableRateLimit": True,
                "timeout": self.timeout_ms,
            })
        except (AttributeError, ccxt.BaseError) as exc:
            logger.warning("Price feed %r unavailable: %s", self.exchange_id, exc)
            self.exchange = None
            self.online = False

    def fetch_prices(self, ids: list[str] | None = None) -> dict[str, float]:
        wanted = {pair: cid for pair, cid in self.pairs.items() if ids is None or cid in ids}
        if not wanted:
            return {}
        if not self.exchange:
            if time.time() - self.last_retry < RETRY_INTERVAL:
                return {}
            self._init_exchange()
            if not self.exchange:
                return {}

        try:
            tickers = self.exchange.fetch_tickers(list(wanted))
        except Exception as exc:
            logger.warning("Price fetch failed: %s", exc)
            self.online = False
            return {}

        prices = {}
        for pair, cid in wanted.items():
            ticker = tickers.get(pair) or {}
            last = ticker.get("last")
            if last:
                prices[cid] = float(last)
        self.online = True
        logger.debug("Fetched %d prices", len(prices))
        return prices
