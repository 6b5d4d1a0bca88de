"""Config loader — YAML to dataclasses."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class GameConfig:
    autosave_ticks: int = 100  # 10s at 10 ticks per second
    daily_reward_base: float = 1000.0
    offline_min_seconds: float = 10.0


@dataclass
class MarketConfig:
    crypto_interval: float = 60.0
    stock_interval: float = 30.0
    trend_interval: float = 300.0
    crypto_volatility: float = 0.05
    stock_volatility: float = 0.04
    exchange: str = "binance"
    timeout_ms: int = 5000


@dataclass
class CasinoConfig:
    mines_multiplier_factor: float = 1.0
    coinflip_delay: float = 3.0
    crash_min_bet: float = 100.0
    blackjack_min_bet: float = 500.0


@dataclass
class SaveConfig:
    directory: str = "~/.tycoon-aurora"
    slot: str = "tycoon-aurora-save"

    @property
    def path(self) -> Path:
        return Path(os.path.expanduser(self.directory)) / f"{self.slot}.json"


@dataclass
class AdviceConfig:
    api_key: str | None = None
    model: str = "gemini-2.5-flash"
    temperature: float = 0.9
    timeout: float = 15.0


@dataclass
class AppConfig:
    game: GameConfig = field(default_factory=GameConfig)
    market: MarketConfig = field(default_factory=MarketConfig)
    casino: CasinoConfig = field(default_factory=CasinoConfig)
    save: SaveConfig = field(default_factory=SaveConfig)
    advice: AdviceConfig = field(default_factory=AdviceConfig)


def load_config(path: Path) -> AppConfig:
    """Load config from YAML file. A missing file gives all defaults."""
    if not path.exists():
        return AppConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    game = GameConfig(**(raw.get("game") or {}))
    market = MarketConfig(**(raw.get("market") or {}))
    casino = CasinoConfig(**(raw.get("casino") or {}))
    save = SaveConfig(**(raw.get("save") or {}))
    advice = AdviceConfig(**(raw.get("advice") or {}))

    return AppConfig(game=game, market=market, casino=casino, save=save, advice=advice)
