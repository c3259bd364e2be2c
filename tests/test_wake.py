"""
tests/test_wake.py — Wake-Up Order Tracker Tests
=================================================
"""

from __future__ import annotations

from datetime import date, time, timedelta
from decimal import Decimal

from streakboard.engine.ledger import Ledger, Month
from streakboard.engine.wake import WakeOrderTracker

D = date(2026, 1, 15)


class TestRegistration:
    def test_first_arrival(self, wake, ledger):
        res = wake.register_arrival("1", "Alice", D, time(6, 0))
        assert res.accepted
        assert res.is_first
        assert res.position == 1
        assert res.date == D
        assert res.time == time(6, 0)
        rec = ledger.get_record("1")
        assert rec.wake_first_current_streak == 1
        assert rec.wake_first_best_streak == 1
        assert rec.last_wake_first_date == D

    def test_later_arrivals_get_positions(self, wake):
        wake.register_arrival("1", "Alice", D, time(6, 0))
        res = wake.register_arrival("2", "Bob", D, time(6, 5))
        assert res.accepted
        assert not res.is_first
        assert res.position == 2

    def test_duplicate_keeps_original_position_and_time(self, wake):
        wake.register_arrival("1", "Alice", D, time(6, 0))
        wake.register_arrival("2", "Bob", D, time(6, 5))

        res = wake.register_arrival("1", "Alice", D, time(7, 30))

        assert not res.accepted
        assert res.position == 1
        assert res.time == time(6, 0)

    def test_non_first_arrival_creates_no_record(self, wake, ledger):
        wake.register_arrival("1", "Alice", D, time(6, 0))
        wake.register_arrival("2", "Bob", D, time(6, 5))
        assert ledger.get_record("2") is None
        assert len(ledger) == 1

    def test_wake_only_member_stays_out_of_payouts(self, wake, ledger):
        ledger.set_player_count(3)
        ledger.set_stake(Decimal("10"))
        ledger.award_daily_points("alice", "Alice", D - timedelta(days=1))
        ledger.award_daily_points("alice", "Alice", D)
        ledger.award_daily_points("bob", "Bob", D)
        wake.register_arrival("alice", "Alice", D, time(6, 0))
        wake.register_arrival("carl", "Carl", D, time(6, 20))

        plan = ledger.payout_plan()

        assert [(p.display_name, p.cents) for p in plan.payouts] == [
            ("Alice", 3000),
            ("Bob", 0),
        ]

    def test_summary_names_non_first_arrivals(self, wake):
        wake.register_arrival("1", "Alice", D, time(6, 0))
        wake.register_arrival("2", "Bob", D, time(6, 5))
        names = [a.display_name for a in wake.build_order_summary().arrivals]
        assert names == ["Alice", "Bob"]

    def test_new_day_clears_arrivals(self, wake):
        wake.register_arrival("1", "Alice", D, time(6, 0))
        wake.register_arrival("2", "Bob", D, time(6, 5))

        res = wake.register_arrival("2", "Bob", D + timedelta(days=1), time(5, 50))

        assert res.accepted
        assert res.is_first
        assert res.position == 1

    def test_consecutive_first_days_extend_streak(self, wake, ledger):
        for i in range(3):
            wake.register_arrival("1", "Alice", D + timedelta(days=i), time(6, 0))
        rec = ledger.get_record("1")
        assert rec.wake_first_current_streak == 3
        assert rec.wake_first_best_streak == 3

    def test_gap_resets_wake_streak(self, wake, ledger):
        wake.register_arrival("1", "Alice", D, time(6, 0))
        wake.register_arrival("1", "Alice", D + timedelta(days=1), time(6, 0))
        wake.register_arrival("2", "Bob", D + timedelta(days=2), time(6, 0))
        wake.register_arrival("1", "Alice", D + timedelta(days=3), time(6, 0))
        rec = ledger.get_record("1")
        assert rec.wake_first_current_streak == 1
        assert rec.wake_first_best_streak == 2

    def test_arrival_triggers_month_rollover(self, wake, ledger):
        ledger.set_points("1", "Alice", 30)
        wake.register_arrival("2", "Bob", date(2026, 2, 1), time(6, 0))
        assert ledger.current_month == Month(2026, 2)
        assert ledger.get_record("1").month_points == 0

    def test_wake_streak_survives_month_rollover(self):
        ledger = Ledger(today=date(2026, 1, 31))
        wake = WakeOrderTracker(ledger)
        wake.register_arrival("1", "Alice", date(2026, 1, 31), time(6, 0))
        wake.register_arrival("1", "Alice", date(2026, 2, 1), time(6, 0))
        assert ledger.get_record("1").wake_first_current_streak == 2


class TestIsLast:
    def test_without_roster_never_last(self, wake, ledger):
        ledger.set_player_count(1)
        res = wake.register_arrival("1", "Alice", D, time(6, 0))
        assert res.is_last is False

    def test_last_when_roster_complete(self, wake, ledger):
        ledger.set_player_count(2)
        wake.set_roster(["1", "2"])
        first = wake.register_arrival("1", "Alice", D, time(6, 0))
        second = wake.register_arrival("2", "Bob", D, time(6, 5))
        assert first.is_last is False
        assert second.is_last is True

    def test_threshold_is_smaller_of_count_and_roster(self, wake, ledger):
        ledger.set_player_count(5)
        wake.set_roster(["1", "2"])
        wake.register_arrival("1", "Alice", D, time(6, 0))
        assert wake.register_arrival("2", "Bob", D, time(6, 5)).is_last


class TestRoster:
    def test_set_roster_dedupes(self, wake):
        assert wake.set_roster(["1", "2", "1"]) == 2
        assert wake.roster() == ["1", "2"]

    def test_sleepers_exclude_caller(self, wake):
        wake.set_roster(["1", "2", "3"])
        assert wake.sleepers("2") == ["1", "3"]

    def test_expected_players_falls_back_to_player_count(self, wake, ledger):
        ledger.set_player_count(4)
        assert wake.expected_players() == 4
        wake.set_roster(["1", "2"])
        assert wake.expected_players() == 2


class TestOrderSummary:
    def test_none_without_arrivals(self, wake):
        assert wake.build_order_summary() is None

    def test_sorted_by_time(self, wake, ledger):
        wake.register_arrival("late", "Late", D, time(7, 0))
        wake.register_arrival("early", "Early", D, time(6, 30))

        summary = wake.build_order_summary()

        assert summary.date == D
        assert [a.user_id for a in summary.arrivals] == ["early", "late"]
        assert [a.position for a in summary.arrivals] == [1, 2]
        assert summary.first.display_name == "Early"

    def test_reports_first_holder_streaks(self, wake):
        wake.register_arrival("1", "Alice", D - timedelta(days=1), time(6, 0))
        wake.register_arrival("1", "Alice", D, time(6, 0))
        wake.register_arrival("2", "Bob", D, time(6, 10))

        summary = wake.build_order_summary()

        assert summary.first_current_streak == 2
        assert summary.first_best_streak == 2
