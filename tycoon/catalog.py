"""Static game catalogs and tuning constants.

Everything here is immutable and loaded once; none of it is saved.
"""

from dataclasses import dataclass

# -- timing ------------------------------------------------------------------
TICK_RATE_MS = 100
TICKS_PER_SECOND = 1000 // TICK_RATE_MS

# -- economy -----------------------------------------------------------------
START_CASH = 10.0
PRESTIGE_REQUIREMENT = 10e9  # $10 Billion
PRESTIGE_RATE = 1  # +100% per tycoon level
PROPERTY_COST_GROWTH = 1.15
PROPERTY_INCOME_BONUS = 1.05
HISTORY_LENGTH = 30
ACTIVITY_FEED_CAP = 50

# -- casino ------------------------------------------------------------------
MINES_GRID_SIZE = 25
MINES_MIN = 3
MINES_MAX = 20


@dataclass(frozen=True)
class ClickUpgrade:
    level: int
    cost: float
    click_value: float


@dataclass(frozen=True)
class Property:
    id: str
    name: str
    location: str
    base_cost: float
    base_income: float


@dataclass(frozen=True)
class Crypto:
    id: str
    name: str
    ticker: str
    is_volatile: bool = True
    synthetic: bool = False  # in-game coin, never in the external feed
    pair: str | None = None  # exchange symbol for the price feed


@dataclass(frozen=True)
class Stock:
    id: str
    name: str
    ticker: str
    base_price: float


@dataclass(frozen=True)
class LuxuryAsset:
    id: str
    name: str
    cost: float
    flex_multiplier: float  # 0.05 == +5% global income


CLICK_UPGRADES = [
    ClickUpgrade(1, 0, 1),
    ClickUpgrade(2, 50, 2),
    ClickUpgrade(3, 250, 5),
    ClickUpgrade(4, 1000, 10),
    ClickUpgrade(5, 5000, 25),
    ClickUpgrade(6, 20000, 75),
    ClickUpgrade(7, 100000, 250),
    ClickUpgrade(8, 500000, 1000),
    ClickUpgrade(9, 2.5e6, 5000),
    ClickUpgrade(10, 10e6, 25000),
]

PROPERTIES = [
    Property("apt", "Studio Apartment", "City Center", 1000, 1),
    Property("house", "Suburban House", "Maple Street", 25000, 20),
    Property("office", "Office Building", "Financial District", 500000, 350),
    Property("skyscraper", "Skyscraper", "Downtown", 10e6, 5000),
    Property("island", "Private Island", "The Tropics", 500e6, 150000),
]

CRYPTOS = [
    Crypto("bitcoin", "Bitcoin", "BTC", pair="BTC/USDT"),
    Crypto("ethereum", "Ethereum", "ETH", pair="ETH/USDT"),
    Crypto("dogecoin", "Dogecoin", "DOGE", pair="DOGE/USDT"),
    Crypto("tycooncoin", "TycoonCoin", "TYC", synthetic=True),
]

STOCKS = [
    Stock("aurora", "Aurora Dynamics", "AURA", 120.0),
    Stock("quantum", "Quantum Retail", "QRTL", 45.0),
    Stock("helios", "Helios Energy", "HELI", 80.0),
    Stock("nimbus", "Nimbus Cloud", "NMBS", 250.0),
    Stock("atlas", "Atlas Logistics", "ATLS", 30.0),
]

LUXURY_ASSETS = [
    LuxuryAsset("supercar", "Supercar", 1e6, 0.05),
    LuxuryAsset("yacht", "Mega Yacht", 25e6, 0.10),
    LuxuryAsset("jet", "Private Jet", 100e6, 0.15),
    LuxuryAsset("masterpiece", "Art Masterpiece", 1e9, 0.20),
    LuxuryAsset("space", "Space Mission", 10e9, 0.50),
]

PROPERTIES_BY_ID = {p.id: p for p in PROPERTIES}
CRYPTOS_BY_ID = {c.id: c for c in CRYPTOS}
STOCKS_BY_ID = {s.id: s for s in STOCKS}
ASSETS_BY_ID = {a.id: a for a in LUXURY_ASSETS}


def initial_crypto_price(crypto: Crypto) -> float:
    """Synthetic coins start at 1; real coins wait for the first feed update."""
    return 1.0 if crypto.synthetic else 0.0
