"""Tests for the Mines game — board, payouts, losses."""

import random

import pytest

from tycoon.economy import Economy


def make_game(cash=1000.0, seed=42, factor=1.0):
    from tycoon.mines import MinesGame

    economy = Economy()
    economy.state.cash = cash
    return economy, MinesGame(economy, rng=random.Random(seed), multiplier_factor=factor)


@pytest.mark.parametrize("mines", [3, 10, 20])
def test_grid_has_exact_mine_count(mines):
    from tycoon.mines import MINE

    _, game = make_game()
    assert game.start(10, mines)
    assert len(game.grid) == 25
    assert game.grid.count(MINE) == mines


def test_invalid_mine_counts_are_rejected():
    economy, game = make_game()
    for mines in (2, 21, 3.5, "3"):
        assert game.start(10, mines) is False
    assert economy.cash == 1000


def test_start_deducts_bet_and_logs():
    from tycoon.mines import MinesPhase

    economy, game = make_game()
    assert game.start(100, 5)
    assert economy.cash == 900
    assert game.phase == MinesPhase.PLAYING
    assert economy.state.activity_feed[0].text == "Started Mines with a $100.00 bet."


def test_unaffordable_bet_is_rejected():
    economy, game = make_game(cash=50)
    assert game.start(51) is False
    assert economy.cash == 50


def test_reveal_all_gems_then_cash_out():
    from tycoon.mines import GEM, MinesPhase

    economy, game = make_game()
    game.start(100, 3)
    gems = [i for i, cell in enumerate(game.grid) if cell == GEM]
    for i in gems:
        assert game.reveal(i) == GEM

    expected = 100 * (1 + 3 / 25) ** 22
    assert game.multiplier == pytest.approx((1 + 3 / 25) ** 22)
    assert game.cash_out() == pytest.approx(expected)
    assert game.phase == MinesPhase.WON
    assert economy.cash == pytest.approx(900 + expected)
    assert economy.state.activity_feed[0].kind == "gain"


def test_multiplier_factor_scales_step():
    _, game = make_game(factor=0.5)
    game.start(10, 5)
    assert game.step_multiplier == pytest.approx(1.1)


def test_hitting_a_mine_loses_the_bet():
    from tycoon.mines import MINE, MinesPhase

    economy, game = make_game()
    game.start(100, 3)
    mine = game.grid.index(MINE)
    assert game.reveal(mine) == MINE
    assert game.phase == MinesPhase.LOST
    assert game.cash_out() == 0
    assert economy.cash == 900
    assert economy.state.activity_feed[0].text == "Hit a mine! Lost $100.00."


def test_cash_out_needs_a_gem():
    economy, game = make_game()
    game.start(100, 3)
    assert game.can_cash_out is False
    assert game.cash_out() == 0
    assert economy.cash == 900


def test_reveal_ignores_repeats_and_bad_indexes():
    from tycoon.mines import GEM

    _, game = make_game()
    game.start(100, 3)
    gem = game.grid.index(GEM)
    assert game.reveal(gem) == GEM
    assert game.reveal(gem) is None
    assert game.reveal(-1) is None
    assert game.reveal(25) is None
    assert game.gems_revealed == 1


def test_no_new_round_while_playing():
    economy, game = make_game()
    game.start(100, 3)
    assert game.start(100, 3) is False
    assert economy.cash == 900


def test_abandon_forfeits_bet():
    from tycoon.mines import MinesPhase

    economy, game = make_game()
    game.start(100, 3)
    game.abandon()
    assert game.phase == MinesPhase.LOST
    assert economy.state.activity_feed[0].text == "Lost $100.00 in Mines."
    game.reset()
    assert game.phase == MinesPhase.CONFIGURING


def test_next_payout_previews_one_more_gem():
    from tycoon.mines import GEM

    _, game = make_game()
    game.start(100, 5)
    assert game.next_payout == pytest.approx(120)
    game.reveal(game.grid.index(GEM))
    assert game.next_payout == pytest.approx(100 * 1.2 ** 2)


@pytest.mark.parametrize("index", ["3", 2.0, None, True])
def test_reveal_ignores_non_integer_index(index):
    from tycoon.mines import MinesPhase

    _, game = make_game()
    game.start(100, 3)
    assert game.reveal(index) is None
    assert game.phase == MinesPhase.PLAYING
    assert not any(game.revealed)
