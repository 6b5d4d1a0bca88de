"""Tests for the economy engine — clicks, purchases, trading, prestige, rewards."""

from datetime import datetime

import pytest

from tycoon.catalog import PRESTIGE_REQUIREMENT
from tycoon.economy import Economy
from tycoon.state import OwnedProperty


def make_economy(cash: float = 10.0) -> Economy:
    economy = Economy()
    economy.state.cash = cash
    return economy


def test_earn_by_click_applies_prestige_bonus():
    economy = make_economy(10)
    assert economy.earn_by_click() == 1
    economy.state.tycoon_level = 2
    assert economy.earn_by_click() == 3
    assert economy.cash == 14


def test_upgrade_click_requires_next_tier_cost():
    economy = make_economy(49)
    assert economy.upgrade_click() is False
    assert economy.state.click_level == 1

    economy.state.cash = 60
    assert economy.upgrade_click() is True
    assert economy.state.click_level == 2
    assert economy.cash == 10
    assert economy.state.activity_feed[0].text == "Upgraded click to Lvl 2!"


def test_upgrade_click_stops_at_top_tier():
    economy = make_economy(1e12)
    for _ in range(20):
        economy.upgrade_click()
    assert economy.state.click_level == 10
    assert economy.next_click_upgrade() is None


def test_buy_property_charges_cost_and_sets_level():
    economy = make_economy(1000)
    assert economy.buy_or_upgrade_property("apt") is True
    owned = economy.state.properties["apt"]
    assert economy.cash == 0
    assert (owned.level, owned.income, owned.value) == (1, 1, 1000)


def test_upgrade_property_uses_geometric_cost_and_income_bonus():
    economy = make_economy(1000 + 1150 + 1)
    economy.buy_or_upgrade_property("apt")
    assert economy.buy_or_upgrade_property("apt") is True
    owned = economy.state.properties["apt"]
    assert owned.level == 2
    assert owned.income == pytest.approx(2 * 1.05)
    assert owned.value == pytest.approx(1150)
    assert economy.cash == pytest.approx(1)


def test_buy_property_unaffordable_is_noop():
    economy = make_economy(999.99)
    assert economy.buy_or_upgrade_property("apt") is False
    assert economy.state.properties == {}
    assert economy.cash == 999.99


def test_buy_unknown_property_is_noop():
    economy = make_economy(1e9)
    assert economy.buy_or_upgrade_property("castle") is False
    assert economy.cash == 1e9


def test_buy_asset_is_idempotent():
    economy = make_economy(3e6)
    assert economy.buy_asset("supercar") is True
    assert economy.buy_asset("supercar") is False
    assert economy.cash == 2e6
    assert list(economy.state.assets) == ["supercar"]
    assert economy.state.assets["supercar"].flex_multiplier == 0.05


def test_buy_asset_unaffordable():
    economy = make_economy(999_999)
    assert economy.buy_asset("supercar") is False
    assert economy.state.assets == {}


def test_crypto_buy_and_sell_at_current_price():
    economy = make_economy(1000)
    economy.apply_crypto_prices({"bitcoin": 100.0})

    assert economy.buy_crypto("bitcoin", 2.5) is True
    holding = economy.state.crypto_holdings["bitcoin"]
    assert economy.cash == 750
    assert holding.amount == 2.5
    assert holding.value == 250

    assert economy.sell_crypto("bitcoin", 3) is False
    assert economy.sell_crypto("bitcoin", 2.5) is True
    assert economy.cash == 1000
    assert holding.amount == 0
    assert holding.value == 0


def test_crypto_trade_rejects_bad_quantities():
    economy = make_economy(1000)
    economy.apply_crypto_prices({"bitcoin": 100.0})
    for qty in (0, -1, float("nan"), float("inf")):
        assert economy.buy_crypto("bitcoin", qty) is False
    assert economy.buy_crypto("bitcoin", 11) is False
    assert economy.cash == 1000


def test_crypto_buy_needs_a_known_price():
    economy = make_economy(1000)
    assert economy.state.crypto_holdings["bitcoin"].price == 0
    assert economy.buy_crypto("bitcoin", 1) is False


def test_stock_buy_and_sell():
    economy = make_economy(1000)
    price = economy.state.stock_holdings["aurora"].price
    assert economy.buy_stock("aurora", 5) is True
    assert economy.cash == pytest.approx(1000 - 5 * price)
    assert economy.sell_stock("aurora", 6) is False
    assert economy.sell_stock("aurora", 5) is True
    assert economy.cash == pytest.approx(1000)
    assert economy.buy_stock("nosuch", 1) is False


def test_price_update_rolls_history_and_revalues():
    economy = make_economy(1000)
    economy.apply_crypto_prices({"bitcoin": 10.0})
    economy.buy_crypto("bitcoin", 3)
    economy.apply_crypto_prices({"bitcoin": 20.0})
    holding = economy.state.crypto_holdings["bitcoin"]
    assert holding.value == 60
    assert len(holding.price_history) == 30
    assert holding.price_history[-2:] == [10.0, 20.0]


def test_net_worth_sums_every_asset_class():
    economy = make_economy(100)
    economy.state.properties["apt"] = OwnedProperty(level=1, income=1, value=1000)
    economy.apply_crypto_prices({"bitcoin": 10.0})
    economy.state.crypto_holdings["bitcoin"].amount = 2
    economy.state.crypto_holdings["bitcoin"].revalue()
    economy.state.stock_holdings["atlas"].amount = 1
    economy.state.stock_holdings["atlas"].revalue()
    atlas = economy.state.stock_holdings["atlas"].price
    assert economy.net_worth() == pytest.approx(100 + 1000 + 20 + atlas)


def test_prestige_at_exact_requirement_succeeds():
    economy = make_economy(PRESTIGE_REQUIREMENT)
    economy.state.click_level = 5
    economy.state.properties["apt"] = OwnedProperty(level=1, income=1, value=0)
    assert economy.prestige() is True
    state = economy.state
    assert state.tycoon_level == 1
    assert state.cash == 10
    assert state.click_level == 1
    assert state.properties == {}
    assert len(state.activity_feed) == 1
    assert state.activity_feed[0].kind == "prestige"


def test_prestige_one_cent_below_fails():
    economy = make_economy(PRESTIGE_REQUIREMENT - 0.01)
    assert economy.prestige() is False
    assert economy.state.tycoon_level == 0
    assert economy.cash == PRESTIGE_REQUIREMENT - 0.01


def test_prestige_counts_non_cash_wealth():
    economy = make_economy(PRESTIGE_REQUIREMENT - 1000)
    economy.state.properties["apt"] = OwnedProperty(level=1, income=1, value=1000)
    assert economy.can_prestige() is True
    assert economy.prestige() is True


def test_daily_reward_same_day_is_noop():
    economy = make_economy(0)
    morning = datetime(2026, 3, 10, 9, 0)
    assert economy.claim_daily_reward(morning) == 1000
    assert economy.claim_daily_reward(datetime(2026, 3, 10, 23, 59)) == 0
    assert economy.cash == 1000
    assert economy.state.daily_reward_streak == 1


def test_daily_reward_streak_grows_on_consecutive_days():
    economy = make_economy(0)
    economy.claim_daily_reward(datetime(2026, 3, 10, 23, 0))
    assert economy.claim_daily_reward(datetime(2026, 3, 11, 1, 0)) == 2000
    assert economy.state.daily_reward_streak == 2


def test_daily_reward_gap_resets_streak():
    economy = make_economy(0)
    economy.claim_daily_reward(datetime(2026, 3, 10, 12, 0))
    economy.claim_daily_reward(datetime(2026, 3, 11, 12, 0))
    assert economy.claim_daily_reward(datetime(2026, 3, 14, 12, 0)) == 1000
    assert economy.state.daily_reward_streak == 1


def test_daily_reward_scales_with_tycoon_level():
    economy = make_economy(0)
    economy.state.tycoon_level = 2
    assert economy.claim_daily_reward(datetime(2026, 3, 10, 12, 0)) == 3000


def test_activity_feed_is_capped_newest_first():
    economy = make_economy()
    for i in range(60):
        economy.add_activity(f"event {i}")
    feed = economy.state.activity_feed
    assert len(feed) == 50
    assert feed[0].text == "event 59"


def test_remove_cash_refuses_overdraft():
    economy = make_economy(50)
    assert economy.remove_cash(51) is False
    assert economy.remove_cash(50) is True
    assert economy.cash == 0


def test_listeners_get_snapshots():
    economy = make_economy(10)
    seen = []
    economy.subscribe(seen.append)
    economy.earn_by_click()
    assert seen[-1].cash == 11
    seen[-1].cash = 0
    assert economy.cash == 11

    economy.unsubscribe(seen.append)
    economy.earn_by_click()
    assert len(seen) == 1
