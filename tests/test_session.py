"""Tests for the game session that owns state mutation."""

import pytest

from idle_tycoon.errors import ItemNotFoundError
from idle_tycoon.persistence import Settings, try_load_game
from idle_tycoon.session import MAX_TICK_SECONDS, Session
from idle_tycoon.state import GameState


@pytest.fixture
def session(two_level_campaign, tmp_path) -> Session:
    return Session.new_game(two_level_campaign, Settings(autosave_seconds=0), tmp_path / "slot1.json")


def test_new_game_starts_on_first_level(session):
    assert session.level.id == "a"
    assert session.next_level.id == "b"
    assert [item.id for item in session.catalog] == ["a1", "a2"]
    assert session.production_per_second == 0


def test_collect_adds_click_income(session):
    session.collect()
    assert session.state.money == 1
    assert session.state.lifetime_earnings == 1


class TestTick:
    def test_produces_income(self, session):
        session.state.get_item_state("a2").quantity = 3
        assert session.tick(2.0) == pytest.approx(6.0)
        assert session.state.money == pytest.approx(6.0)

    def test_long_frames_are_clamped(self, session):
        session.state.get_item_state("a2").quantity = 1
        assert session.tick(3_600) == pytest.approx(MAX_TICK_SECONDS)

    def test_negative_dt_ignored(self, session):
        session.state.get_item_state("a2").quantity = 1
        assert session.tick(-1) == 0


class TestAutosave:
    def test_saves_after_interval(self, two_level_campaign, tmp_path):
        path = tmp_path / "slot1.json"
        session = Session.new_game(two_level_campaign, Settings(autosave_seconds=10), path)
        session.tick(4)
        session.tick(4)
        assert not path.exists()
        session.tick(4)
        assert path.exists()
        assert session.message == "Autosaved."
        assert session.autosave_timer == 0

    def test_disabled_when_zero(self, session):
        for _ in range(100):
            session.tick(5)
        assert not session.save_path.exists()


class TestPurchases:
    def test_buy_rejected_without_money(self, session):
        assert session.buy("a1") is False
        assert session.message == "Not enough money."
        assert session.state.quantity_of("a1") == 0

    def test_buy(self, session):
        session.state.money = 10
        assert session.buy("a1") is True
        assert session.state.quantity_of("a1") == 1
        assert session.message == "Bought 1 Alpha One for 10.00."
        assert session.price_of("a1") == pytest.approx(11.5)

    def test_buy_unknown_item_is_integrity_error(self, session):
        with pytest.raises(ItemNotFoundError):
            session.buy("b1")

    def test_upgrade_requires_ownership(self, session):
        session.state.money = 1_000
        assert session.upgrade("a1") is False
        assert session.state.money == 1_000

    def test_upgrade(self, session):
        session.state.get_item_state("a1").quantity = 1
        session.state.money = 60
        assert session.upgrade_price_of("a1") == pytest.approx(50)
        assert session.upgrade("a1") is True
        assert session.state.upgrade_level_of("a1") == 1
        assert session.state.money == pytest.approx(10)
        assert session.upgrade("a1") is False


class TestLevelAdvance:
    def test_requires_goal(self, session):
        session.state.money = 999
        assert session.advance_level() is False
        assert session.level.id == "a"

    def test_advance_switches_catalog_and_saves(self, session):
        session.state.earn(1_000)
        assert session.goal_reached
        assert session.advance_level() is True
        assert session.level.id == "b"
        assert [item.id for item in session.catalog] == ["b1", "b2"]
        assert session.production_per_second == pytest.approx(1.8)
        assert try_load_game(session.save_path) == session.state

    def test_declining_keeps_offer_available(self, session):
        session.state.earn(1_500)
        assert session.goal_reached
        session.tick(1)
        assert session.goal_reached

    def test_last_level_cannot_advance(self, session):
        session.state.earn(1_000)
        session.advance_level()
        session.state.earn(50_000)
        assert session.advance_level() is False
        assert session.level.id == "b"
        assert session.state.money == 50_000


class TestPrestige:
    def test_without_credits(self, session):
        session.state.earn(10_000)
        assert session.prestige() == 0
        assert session.state.money == 10_000
        assert not session.save_path.exists()

    def test_prestige_resets_to_first_level(self, two_level_campaign, tmp_path):
        state = GameState.new("b")
        state.unlocked_levels.add("a")
        state.earn(20_000_000)
        session = Session(state, two_level_campaign, Settings(autosave_seconds=0), tmp_path / "slot1.json")

        assert session.prestige() == 2
        assert session.level.id == "a"
        assert [item.id for item in session.catalog] == ["a1", "a2"]
        assert session.state.prestige_credits == 2
        assert session.production_per_second == pytest.approx(0.1 * 1.1)
        assert session.save_path.exists()

        summary = session.prestige_summary()
        assert summary["available"] == 0
        assert summary["next_target"] == 100_000_000


def test_manual_save_without_path(two_level_campaign):
    session = Session.new_game(two_level_campaign)
    session.manual_save()
    assert session.message == "Could not save the game."
