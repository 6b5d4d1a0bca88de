"""Tests for the ccxt price feed (exchange mocked, no network)."""

from unittest.mock import MagicMock, patch


def make_feed():
    from tycoon.price_feed import PriceFeed

    with patch("tycoon.price_feed.ccxt") as mock_ccxt:
        mock_ccxt.BaseError = Exception
        feed = PriceFeed("binance")
    feed.exchange = MagicMock()
    return feed


def test_pairs_skip_synthetic_coins():
    feed = make_feed()
    assert feed.pairs == {
        "BTC/USDT": "bitcoin",
        "ETH/USDT": "ethereum",
        "DOGE/USDT": "dogecoin",
    }


def test_fetch_prices_maps_last_price_to_ids():
    feed = make_feed()
    feed.exchange.fetch_tickers.return_value = {
        "BTC/USDT": {"last": 64000.5},
        "ETH/USDT": {"last": "3050"},
        "DOGE/USDT": {"last": None},
    }
    prices = feed.fetch_prices()
    assert prices == {"bitcoin": 64000.5, "ethereum": 3050.0}
    assert feed.online is True


def test_fetch_prices_only_requested_ids():
    feed = make_feed()
    feed.exchange.fetch_tickers.return_value = {"BTC/USDT": {"last": 1.0}}
    feed.fetch_prices(["bitcoin"])
    feed.exchange.fetch_tickers.assert_called_once_with(["BTC/USDT"])


def test_fetch_prices_unknown_ids_skip_network():
    feed = make_feed()
    assert feed.fetch_prices(["tycooncoin"]) == {}
    feed.exchange.fetch_tickers.assert_not_called()


def test_fetch_prices_failure_returns_empty():
    feed = make_feed()
    feed.exchange.fetch_tickers.side_effect = RuntimeError("network down")
    assert feed.fetch_prices() == {}
    assert feed.online is False


def test_no_exchange_waits_before_retry():
    feed = make_feed()
    feed.exchange = None
    with patch.object(feed, "_init_exchange") as init:
        assert feed.fetch_prices() == {}
        init.assert_not_called()
