"""
tests/test_reports.py — Outbound Report Text Tests
===================================================
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from streakboard.constants import format_cents
from streakboard.engine.ledger import Month
from streakboard.services.reports import (
    NO_MONTH_PARTICIPANTS,
    NO_MONTH_POINTS,
    NO_STAKE,
    NO_WAKE_UPS,
    NO_YEAR_PARTICIPANTS,
    build_closed_period_reports,
    build_month_end_report,
    build_monthly_ranking_report,
    build_payouts_report,
    build_wake_order_report,
    build_year_end_report,
    build_yearly_ranking_report,
)


class TestFormatCents:
    def test_comma_separator(self):
        assert format_cents(1234) == "12,34 €"

    def test_small_and_negative(self):
        assert format_cents(5) == "0,05 €"
        assert format_cents(-150) == "-1,50 €"


class TestRankingReports:
    def test_empty_monthly(self, ledger):
        assert build_monthly_ranking_report(ledger.monthly_ranking()) == NO_MONTH_POINTS

    def test_monthly_lines(self, ledger):
        for i, name in enumerate(["Alice", "Bob", "Cara", "Dan"]):
            ledger.set_points(str(i), name, 40 - i * 10)
        ledger.set_streak("0", "Alice", 3)

        text = build_monthly_ranking_report(ledger.monthly_ranking())
        lines = text.splitlines()

        assert lines[0] == "\U0001f3c6 Current ranking (Jan 2026)"
        assert lines[1] == "\U0001f947 Alice — points: 40, streak: 3 (best: 3)"
        assert lines[4].startswith("4. Dan")

    def test_highscores_shown_when_set(self, ledger):
        ledger.set_points("1", "Alice", 30)
        ledger.rollover_to_period(Month(2026, 2))
        text = build_monthly_ranking_report(ledger.monthly_ranking())
        assert "month HS: 30" in text
        assert "year HS" not in text

    def test_yearly(self, ledger):
        ledger.award_daily_points("1", "Alice", date(2026, 1, 15))
        text = build_yearly_ranking_report(ledger.yearly_ranking())
        assert text.splitlines()[0] == "\U0001f3c6 Yearly ranking (2026)"
        assert "year points: 10, best streak: 1" in text


class TestPayoutReport:
    def test_not_configured(self):
        assert build_payouts_report(None) == NO_STAKE

    def test_too_few_players(self, ledger):
        ledger.set_player_count(3)
        ledger.set_stake(Decimal("10"))
        ledger.set_points("1", "Alice", 5)
        text = build_payouts_report(ledger.payout_plan())
        assert text == "Total stake: 30,00 € — no split (too few players)."

    def test_split(self, ledger):
        ledger.set_player_count(2)
        ledger.set_stake(Decimal("10"))
        ledger.set_points("1", "Alice", 5)
        ledger.set_points("2", "Bob", 3)
        lines = build_payouts_report(ledger.payout_plan()).splitlines()
        assert lines[0] == "\U0001f4b0 Pot: 20,00 € from 2 players (10,00 € each)"
        assert lines[1:] == ["1. Alice: 20,00 €", "2. Bob: 0,00 €"]


class TestPeriodReports:
    def test_month_end_without_participants(self, ledger):
        closed = ledger.rollover_to_period(Month(2026, 2))
        assert build_month_end_report(closed.monthly, closed.month, closed.payouts) == (
            NO_MONTH_PARTICIPANTS
        )

    def test_month_end(self, ledger):
        ledger.set_points("1", "Alice", 50)
        closed = ledger.rollover_to_period(Month(2026, 2))
        text = build_month_end_report(closed.monthly, closed.month, closed.payouts)
        assert text.startswith("\U0001f38a Winner of Jan 2026: Alice with 50 points!")
        assert NO_STAKE in text

    def test_year_end_calls_out_last(self, ledger):
        ledger.award_daily_points("1", "Alice", date(2026, 1, 15))
        ledger.set_points("2", "Bob", 0)
        closed = ledger.rollover_to_period(Month(2027, 1))

        reports = build_closed_period_reports(closed)

        assert len(reports) == 2
        assert reports[1].startswith("\U0001f38a Winner of 2026: Alice with 10 points!")
        assert reports[1].endswith("<@2> has to buy everyone a big meal.")

    def test_month_only_close_has_one_report(self, ledger):
        closed = ledger.rollover_to_period(Month(2026, 2))
        assert len(build_closed_period_reports(closed)) == 1

    def test_year_end_without_participants(self, ledger):
        closed = ledger.rollover_to_period(Month(2027, 1))
        assert build_year_end_report(closed.yearly, closed.year) == NO_YEAR_PARTICIPANTS


class TestWakeOrderReport:
    def test_empty(self):
        assert build_wake_order_report(None) == NO_WAKE_UPS

    def test_lines(self, wake):
        day = date(2026, 1, 15)
        wake.register_arrival("1", "Alice", day, time(6, 1, 2))
        wake.register_arrival("2", "Bob", day, time(6, 30))

        lines = build_wake_order_report(wake.build_order_summary()).splitlines()

        assert lines[0] == "⏰ Wake-up order for 2026-01-15"
        assert lines[1] == "1. Alice — 06:01:02"
        assert lines[2] == "2. Bob — 06:30:00"
        assert lines[-1] == "\U0001f426 Early bird: Alice — streak: 1 (best: 1)"
