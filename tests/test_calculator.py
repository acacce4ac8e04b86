"""Tests for the equity oracle."""

import random

import pytest
from pokeradvisor.calculator import calculate_equity, equity_oracle, evaluate_odds
from pokeradvisor.card import card
from pokeradvisor.errors import InputError


def cards(s: str):
    return [card(c) for c in s.split()]


class TestEquityCalculator:
    def test_aces_vs_one_random_hand(self):
        """AA vs a random hand wins roughly 85% of the time."""
        result = calculate_equity(cards("As Ah"), num_players=2, num_simulations=2000, rng=random.Random(7))
        assert result.win_rate > 0.78
        assert result.win_rate + result.tie_rate + result.lose_rate == pytest.approx(1.0)

    def test_more_players_reduces_win_rate(self):
        heads_up = evaluate_odds(cards("As Ah"), [], 2, 1500, random.Random(1))
        six_way = evaluate_odds(cards("As Ah"), [], 6, 1500, random.Random(1))
        assert heads_up > six_way

    def test_unbeatable_river(self):
        """A royal flush on the river can't lose or tie."""
        p = evaluate_odds(cards("Ah Kh"), cards("Qh Jh Th 2c 3d"), 4, 200, random.Random(0))
        assert p == 1.0

    def test_board_plays_for_everyone(self):
        result = calculate_equity(
            cards("2c 3d"), cards("Ah Kh Qh Jh Th"), num_players=3, num_simulations=200
        )
        assert result.win_rate == 0.0
        assert result.tie_rate == 1.0

    def test_hand_distribution(self):
        result = calculate_equity(cards("As Ah"), num_simulations=500, rng=random.Random(3))
        assert sum(result.hand_distribution.values()) == 500
        assert "High Card" not in result.hand_distribution  # a pocket pair is at least a pair

    def test_seeded_runs_repeat(self):
        a = evaluate_odds(cards("9s 8s"), cards("7s 6d 2h"), 3, 500, random.Random(42))
        b = evaluate_odds(cards("9s 8s"), cards("7s 6d 2h"), 3, 500, random.Random(42))
        assert a == b

    def test_oracle_factory(self):
        oracle = equity_oracle(num_simulations=100, seed=5)
        p = oracle(cards("Ah Kh"), cards("Qh Jh Th 2c 3d"), 2)
        assert p == 1.0


class TestEquityValidation:
    def test_one_hole_card(self):
        with pytest.raises(InputError):
            calculate_equity(cards("As"))

    def test_bad_board_size(self):
        with pytest.raises(InputError):
            calculate_equity(cards("As Ah"), cards("2c 3d"))

    def test_duplicate_cards(self):
        with pytest.raises(InputError):
            calculate_equity(cards("As Ah"), cards("As 3d 4h"))

    def test_needs_an_opponent(self):
        with pytest.raises(InputError):
            calculate_equity(cards("As Ah"), num_players=1)

    def test_too_many_players(self):
        with pytest.raises(InputError):
            calculate_equity(cards("As Ah"), num_players=24)

    def test_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            calculate_equity(cards("As Ah"), num_players=0)
