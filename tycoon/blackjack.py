"""Blackjack, one player hand against the dealer from a fresh 52-card shoe."""

import random
import threading
from enum import Enum
from typing import NamedTuple

from tycoon.casino import pay_out, place_bet, record_loss
from tycoon.economy import Economy
from tycoon.fmt import format_currency

SUITS = ["spade", "heart", "diamond", "club"]
RANKS = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
RANK_VALUES = {
    "2": 2, "3": 3, "4": 4, "5": 5, "6": 6, "7": 7, "8": 8, "9": 9,
    "10": 10, "J": 10, "Q": 10, "K": 10, "A": 11,
}
DEALER_STANDS_ON = 17
BLACKJACK_PAYOUT = 2.5
WIN_PAYOUT = 2.0


class Card(NamedTuple):
    rank: str
    suit: str


def new_shoe(rng: random.Random) -> list[Card]:
    shoe = [Card(rank, suit) for suit in SUITS for rank in RANKS]
    rng.shuffle(shoe)
    return shoe


def hand_value(cards: list[Card]) -> int:
    """Sum with aces as 11, dropping 10 per ace while the hand is over 21."""
    value = sum(RANK_VALUES[c.rank] for c in cards)
    aces = sum(1 for c in cards if c.rank == "A")
    while value > 21 and aces:
        value -= 10
        aces -= 1
    return value


def is_natural(cards: list[Card]) -> bool:
    return len(cards) == 2 and hand_value(cards) == 21


class BlackjackPhase(str, Enum):
    BETTING = "betting"
    PLAYER_TURN = "player_turn"
    DEALER_TURN = "dealer_turn"
    SETTLED = "settled"


class BlackjackGame:
    def __init__(self, economy: Economy, rng: random.Random | None = None, min_bet: float = 500.0):
        self.economy = economy
        self.rng = rng or random.Random()
        self.min_bet = min_bet
        self.lock = threading.RLock()

        self.phase = BlackjackPhase.BETTING
        self.shoe: list[Card] = []
        self.player: list[Card] = []
        self.dealer: list[Card] = []
        self.bet = 0.0
        self.outcome: str | None = None  # blackjack | win | lose | bust | push
        self.payout = 0.0

    @property
    def player_value(self) -> int:
        return hand_value(self.player)

    @property
    def dealer_value(self) -> int:
        return hand_value(self.dealer)

    def start(self, bet) -> bool:
        with self.lock:
            if self.phase not in (BlackjackPhase.BETTING, BlackjackPhase.SETTLED):
                return False
            placed = place_bet(
                self.economy, bet, self.min_bet,
                lambda b: f"Bet {format_currency(b)} on Blackjack.",
            )
            if placed is None:
                return False
            self.bet = placed
            self.outcome = None
            self.payout = 0.0
            self.shoe = new_shoe(self.rng)
            self.player = [self.shoe.pop(), self.shoe.pop()]
            self.dealer = [self.shoe.pop(), self.shoe.pop()]
            self.phase = BlackjackPhase.PLAYER_TURN
            if is_natural(self.player):
                self.stand()
        return True

    def hit(self) -> Card | None:
        with self.lock:
            if self.phase != BlackjackPhase.PLAYER_TURN or not self.shoe:
                return None
            card = self.shoe.pop()
            self.player.append(card)
            if self.player_value > 21:
                self.outcome = "bust"
                self.phase = BlackjackPhase.SETTLED
                self.economy.add_activity(f"Bust! Lost {format_currency(self.bet)}.", "loss")
            return card

    def stand(self) -> None:
        with self.lock:
            if self.phase != BlackjackPhase.PLAYER_TURN:
                return
            self.phase = BlackjackPhase.DEALER_TURN
            self._play_dealer()
            self._settle()

    def _play_dealer(self) -> None:
        while self.dealer_value < DEALER_STANDS_ON and self.shoe:
            self.dealer.append(self.shoe.pop())

    def _settle(self) -> None:
        player, dealer = self.player_value, self.dealer_value
        player_natural = is_natural(self.player)

        if player_natural and is_natural(self.dealer):
            self._push()
        elif player_natural:
            self.outcome = "blackjack"
            self.payout = self.bet * BLACKJACK_PAYOUT
            pay_out(self.economy, self.payout, f"Blackjack! Won {format_currency(self.payout)}!")
        elif dealer > 21 or player > dealer:
            self.outcome = "win"
            self.payout = self.bet * WIN_PAYOUT
            pay_out(self.economy, self.payout, f"Won {format_currency(self.payout)} in Blackjack!")
        elif dealer > player:
            self.outcome = "lose"
            record_loss(self.economy, self.bet, "Blackjack")
        else:
            self._push()
        self.phase = BlackjackPhase.SETTLED

    def _push(self) -> None:
        self.outcome = "push"
        self.payout = self.bet
        pay_out(self.economy, self.bet, "Pushed in Blackjack. Bet returned.", kind="neutral")
