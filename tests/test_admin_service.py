"""
tests/test_admin_service.py — Owner Command Tests
==================================================
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from streakboard.services.admin_service import (
    DENIED_MESSAGE,
    AdminService,
    CommandInputError,
    parse_stake,
)
OWNER_ID = "999"


@pytest.fixture
def admin(ledger, wake):
    return AdminService(ledger, wake, OWNER_ID)


class TestAuthorization:
    def test_non_owner_denied_without_mutation(self, admin, ledger):
        reply = admin.set_points("1", "2", "Bob", 30)
        assert reply.message == DENIED_MESSAGE
        assert reply.ephemeral
        assert not reply.applied
        assert len(ledger) == 0

    def test_denied_before_option_validation(self, admin):
        assert admin.set_stake("1", None).message == DENIED_MESSAGE
        assert admin.set_player_count("1", None).message == DENIED_MESSAGE
        assert admin.set_wake_roster("1", None).message == DENIED_MESSAGE
        assert admin.set_streak("1", None, None, None).message == DENIED_MESSAGE

    def test_owner_id_compared_as_string(self, ledger, wake):
        admin = AdminService(ledger, wake, 999)
        assert admin.is_owner("999")


class TestPointsAndStreaks:
    def test_set_points(self, admin, ledger):
        reply = admin.set_points(OWNER_ID, "2", "Bob", 30)
        assert reply.applied
        assert reply.message == "Points of Bob set to 30."
        assert ledger.get_record("2").month_points == 30

    def test_missing_member(self, admin):
        reply = admin.set_points(OWNER_ID, None, None, 30)
        assert reply.message == "Missing option: member"
        assert not reply.applied

    def test_missing_value(self, admin, ledger):
        reply = admin.set_points(OWNER_ID, "2", "Bob", None)
        assert reply.message == "Missing option: points"
        assert len(ledger) == 0

    def test_set_streak_clamps(self, admin):
        assert admin.set_streak(OWNER_ID, "2", "Bob", -4).message == "Streak of Bob set to 0."


class TestStake:
    def test_set_stake(self, admin, ledger):
        reply = admin.set_stake(OWNER_ID, "10,5")
        assert reply.message == "Stake per player set to 10,50 €."
        assert ledger.stake_per_player_cents == 1050

    def test_set_stake_from_float(self, admin, ledger):
        admin.set_stake(OWNER_ID, 7.25)
        assert ledger.stake_per_player_cents == 725

    def test_invalid_stake_leaves_state(self, admin, ledger):
        reply = admin.set_stake(OWNER_ID, "abc")
        assert not reply.applied
        assert reply.message.startswith("❌")
        assert ledger.stake_per_player_cents == 0

    def test_set_player_count(self, admin, ledger):
        assert admin.set_player_count(OWNER_ID, 4).message == "Player count set to 4."
        assert ledger.player_count == 4

    def test_missing_player_count(self, admin):
        assert admin.set_player_count(OWNER_ID, None).message == "Missing option: count"


class TestParseStake:
    def test_plain(self):
        assert parse_stake("12.34") == Decimal("12.34")

    def test_comma_decimal(self):
        assert parse_stake("0,5") == Decimal("0.5")

    def test_trailing_zeros_allowed(self):
        assert parse_stake("1.500") == Decimal("1.500")

    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", "nan", "-1", "1.234"])
    def test_rejected(self, raw):
        with pytest.raises(CommandInputError):
            parse_stake(raw)


class TestWakeRoster:
    def test_parses_mentions(self, admin, wake):
        reply = admin.set_wake_roster(OWNER_ID, "<@1> <@!2> hello <@1>")
        assert reply.message == "Wake-up players set: 2"
        assert wake.roster() == ["1", "2"]

    def test_empty_text_clears_roster(self, admin, wake):
        wake.set_roster(["1"])
        assert admin.set_wake_roster(OWNER_ID, "nobody").message == "Wake-up players set: 0"
        assert wake.roster() == []


class TestDesignate:
    def test_anyone_may_use_it(self, admin):
        assert admin.designate("5", "6").message == "<@6> is a servant."

    def test_backfires_on_owner(self, admin):
        assert admin.designate("5", OWNER_ID).message == "<@5> is a servant themself."

    def test_owner_may_target_self(self, admin):
        assert admin.designate(OWNER_ID, OWNER_ID).message == f"<@{OWNER_ID}> is a servant."

    def test_missing_target(self, admin):
        assert not admin.designate("5", None).applied
