"""Tycoon Aurora — session wiring and headless runner."""

import argparse
import logging
import sys
import threading
from pathlib import Path

from tycoon.advice import AdviceService
from tycoon.blackjack import BlackjackGame
from tycoon.catalog import TICK_RATE_MS
from tycoon.coinflip import CoinFlipGame
from tycoon.config import AppConfig, load_config
from tycoon.crash import CrashGame
from tycoon.economy import Economy
from tycoon.fmt import format_currency
from tycoon.idle import IdleAccumulator, OfflineGains
from tycoon.market import MarketSimulator
from tycoon.mines import MinesGame
from tycoon.persistence import SaveStore
from tycoon.price_feed import PriceFeed
from tycoon.scheduler import Scheduler

logger = logging.getLogger(__name__)


class TycoonSession:
    """One player's game from load to final save.

    Owns the economy, the timers and the casino tables. Nothing here is
    global; callers hold the session and pass it where it is needed.
    """

    def __init__(self, config: AppConfig, store: SaveStore | None = None,
                 feed: PriceFeed | None = None, advisor: AdviceService | None = None):
        self.config = config
        self.store = store or SaveStore(config.save.path)
        self.economy = Economy(self.store.load(), daily_reward_base=config.game.daily_reward_base)
        self.scheduler = Scheduler()
        self.market = MarketSimulator(self.economy, feed, config.market)
        self.idle = IdleAccumulator(self.economy, config.game.offline_min_seconds)
        self.advisor = advisor or AdviceService(
            api_key=config.advice.api_key,
            model=config.advice.model,
            temperature=config.advice.temperature,
            timeout=config.advice.timeout,
        )

        casino = config.casino
        self.mines = MinesGame(self.economy, multiplier_factor=casino.mines_multiplier_factor)
        self.crash = CrashGame(self.economy, min_bet=casino.crash_min_bet, scheduler=self.scheduler)
        self.blackjack = BlackjackGame(self.economy, min_bet=casino.blackjack_min_bet)
        self.coinflip = CoinFlipGame(self.economy, scheduler=self.scheduler, delay=casino.coinflip_delay)

        self.tick_count = 0
        self.running = False

    def start(self) -> OfflineGains | None:
        """Credit offline income, then start the idle and market timers."""
        gains = self.idle.apply_offline()
        self.running = True
        self.scheduler.every("idle", TICK_RATE_MS / 1000, self._tick)
        self.market.start(self.scheduler)
        return gains

    def _tick(self):
        self.idle.tick()
        self.tick_count += 1
        if self.tick_count % self.config.game.autosave_ticks == 0:
            self.save()

    def save(self) -> bool:
        self.economy.touch()
        return self.store.save(self.economy.snapshot())

    def close_tables(self):
        """Resolve every open casino round so no placed bet is left hanging."""
        self.coinflip.settle()
        self.crash.forfeit()
        self.mines.abandon()
        self.blackjack.stand()

    def stop(self):
        """Settle the tables, cancel every timer, then write a final save."""
        self.running = False
        self.close_tables()
        self.scheduler.cancel_all()
        self.save()

    def advice(self) -> str:
        return self.advisor.get_advice(self.economy.cash, self.economy.net_worth())

    def status_line(self) -> str:
        state = self.economy.snapshot()
        line = (
            f"cash {format_currency(state.cash)} | "
            f"net worth {format_currency(self.economy.net_worth())} | "
            f"tycoon lvl {state.tycoon_level} | trend {self.market.trend.value}"
        )
        if self.market.feed is not None:
            line += f" | prices {'live' if self.market.feed.online else 'offline'}"
        return line


def main():
    parser = argparse.ArgumentParser(description="Tycoon Aurora headless session")
    parser.add_argument("--config", default="config.yaml", help="Config file path")
    parser.add_argument("--save", default=None, help="Save file path (overrides config)")
    parser.add_argument("--duration", type=float, default=None,
                        help="Seconds to run before saving and exiting")
    parser.add_argument("--offline", action="store_true", help="Do not fetch real prices")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path(args.config))
    store = SaveStore(Path(args.save)) if args.save else None
    feed = None if args.offline else PriceFeed(config.market.exchange, config.market.timeout_ms)

    session = TycoonSession(config, store=store, feed=feed)
    gains = session.start()
    if gains:
        print(f"Welcome back! {format_currency(gains.amount)} earned in {gains.seconds:.0f}s away.")
        session.idle.acknowledge()
    print(session.status_line())

    try:
        threading.Event().wait(args.duration)
    except KeyboardInterrupt:
        print("\nSaving...")
    finally:
        session.stop()
        print(session.status_line())
    sys.exit(0)


if __name__ == "__main__":
    main()
