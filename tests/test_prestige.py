"""Tests for prestige credit thresholds and the prestige reset."""

import copy

import pytest

from idle_tycoon import prestige
from idle_tycoon.state import GameState


class TestCredits:
    def test_exactly_at_base_threshold(self):
        assert prestige.potential_credits(1_000_000, 0) == 1

    def test_just_below_base_threshold(self):
        assert prestige.potential_credits(999_999, 0) == 0
        assert prestige.total_credits_unlocked(999_999) == 0

    def test_already_banked_credits_are_subtracted(self):
        assert prestige.total_credits_unlocked(100_000_000) == 3
        assert prestige.potential_credits(100_000_000, 1) == 2

    def test_one_credit_per_decade(self):
        assert prestige.total_credits_unlocked(9_999_999) == 1
        assert prestige.total_credits_unlocked(10_000_000) == 2
        assert prestige.total_credits_unlocked(5e12) == 7

    def test_value_just_below_a_decade(self):
        assert prestige.total_credits_unlocked(9_999_999.999999998) == 1
        assert prestige.total_credits_unlocked(99_999_999.99999999) == 2
        assert prestige.potential_credits(9_999_999.999999998, 1) == 0

    def test_never_negative(self):
        assert prestige.potential_credits(2_000_000, 5) == 0

    def test_monotonic_in_lifetime(self):
        samples = [0, 1, 999_999, 1e6, 3e6, 1e7, 4.2e8, 1e9, 7.7e15]
        for banked in range(4):
            credits = [prestige.potential_credits(lifetime, banked) for lifetime in samples]
            assert credits == sorted(credits)

    def test_custom_base_threshold(self):
        assert prestige.potential_credits(1_000, 0, base_threshold=100) == 2


def test_prod_multiplier():
    assert prestige.prod_multiplier(0) == 1
    assert prestige.prod_multiplier(10) == pytest.approx(1.5)


class TestThresholdQueries:
    def test_below_base_returns_base(self):
        assert prestige.next_new_credit_threshold(10, 0) == 1_000_000
        assert prestige.next_credit_threshold_from_lifetime(10) == 1_000_000
        assert prestige.remaining_to_next_new_credit(250_000, 0) == 750_000

    def test_next_decade_after_current_band(self):
        assert prestige.next_credit_threshold_from_lifetime(5_000_000) == 10_000_000
        assert prestige.next_new_credit_threshold(5_000_000, 1) == 10_000_000
        assert prestige.remaining_to_next_new_credit(5_000_000, 1) == 5_000_000

    def test_banked_ahead_of_lifetime(self):
        assert prestige.next_new_credit_threshold(5_000_000, 3) == 1_000_000_000

    def test_negative_banked_treated_as_zero(self):
        assert prestige.next_new_credit_threshold(5_000_000, -4) == 10_000_000

    def test_remaining_never_negative(self):
        assert prestige.remaining_to_next_new_credit(5_000_000, 0) >= 0

    def test_summary(self):
        state = GameState.new()
        state.lifetime_earnings = 2_000_000
        state.prestige_credits = 4
        summary = prestige.summary(state)
        assert summary["available"] == 1
        assert summary["credits"] == 4
        assert summary["multiplier"] == pytest.approx(1.2)
        assert summary["next_target"] == 10_000_000
        assert summary["remaining"] == 8_000_000


class TestApplyReset:
    def test_noop_without_credits(self, two_level_campaign):
        state = GameState.new("a")
        state.earn(999_999)
        state.get_item_state("a1").quantity = 3
        before = copy.deepcopy(state)
        assert prestige.apply_reset(state, two_level_campaign) == 0
        assert state == before

    def test_campaign_reset(self, two_level_campaign):
        state = GameState.new("a")
        two_level_campaign.progress_to_next_level(state)
        state.earn(150_000_000)
        state.get_item_state("b2").quantity = 7

        assert prestige.apply_reset(state, two_level_campaign) == 3
        assert state.prestige_credits == 3
        assert state.prestige_credits_earned_historical == 3
        assert state.prestiges == 1
        assert state.current_level_id == "a"
        assert state.unlocked_levels == {"a"}
        assert state.money == 0
        assert [(st.item_id, st.quantity) for st in state.items] == [("a1", 1)]
        assert state.lifetime_earnings == 150_000_000

    def test_second_reset_is_noop(self, two_level_campaign):
        state = GameState.new("a")
        state.earn(50_000_000)
        assert prestige.apply_reset(state, two_level_campaign) == 2
        state.money = 42
        after_first = copy.deepcopy(state)
        assert prestige.apply_reset(state, two_level_campaign) == 0
        assert state == after_first

    def test_same_decade_never_pays_twice(self, two_level_campaign):
        state = GameState.new("a")
        state.earn(1_500_000)
        assert prestige.apply_reset(state, two_level_campaign) == 1
        state.earn(8_000_000)  # lifetime 9.5M, still in the first decade
        assert prestige.apply_reset(state, two_level_campaign) == 0
        state.earn(500_000)  # lifetime 10M
        assert prestige.apply_reset(state, two_level_campaign) == 1
        assert state.prestige_credits == 2
        assert state.prestiges == 2

    def test_simple_reset_without_campaign(self):
        state = GameState.new("a")
        state.unlocked_levels.add("b")
        state.current_level_id = "b"
        state.earn(1_000_000)
        state.get_item_state("b1").quantity = 2
        assert prestige.apply_reset(state) == 1
        assert state.money == 0
        assert state.items == []
        assert state.current_level_id == "b"
        assert state.unlocked_levels == {"a", "b"}
        assert state.prestiges == 1
