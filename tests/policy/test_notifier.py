"""Tests for carnet.policy.notifier."""

from __future__ import annotations

import datetime

import pytest

from carnet.policy import describe_denial, describe_remaining, DenyReason, EditDecision, Locale


def allowed(**kwargs: float) -> EditDecision:
    return EditDecision.allow(remaining=datetime.timedelta(**kwargs))


class TestDescribeRemaining(object):
    @pytest.mark.parametrize(
        ("remaining", "expected"),
        [
            (datetime.timedelta(days=2), "2 jours restants"),
            (datetime.timedelta(days=1), "1 jour restant"),
            (datetime.timedelta(hours=5), "5 heures restantes"),
            (datetime.timedelta(hours=1), "1 heure restante"),
            (datetime.timedelta(minutes=12), "12 minutes restantes"),
            (datetime.timedelta(minutes=1), "1 minute restante"),
            (datetime.timedelta(0), "0 minute restante"),
        ],
    )
    def test_french(self, remaining: datetime.timedelta, expected: str) -> None:
        assert describe_remaining(EditDecision.allow(remaining=remaining)) == expected

    @pytest.mark.parametrize(
        ("remaining", "expected"),
        [
            (datetime.timedelta(days=29), "29 days remaining"),
            (datetime.timedelta(hours=1), "1 hour remaining"),
            (datetime.timedelta(minutes=59), "59 minutes remaining"),
            (datetime.timedelta(0), "0 minutes remaining"),
        ],
    )
    def test_english(self, remaining: datetime.timedelta, expected: str) -> None:
        assert describe_remaining(EditDecision.allow(remaining=remaining), Locale.English) == expected

    def test_rounds_to_unit(self) -> None:
        """Under an hour counts minutes, under a day hours, then days."""
        assert describe_remaining(allowed(minutes=59, seconds=40)) == "60 minutes restantes"
        assert describe_remaining(allowed(hours=47, minutes=59)) == "2 jours restants"
        assert describe_remaining(allowed(hours=5, minutes=20)) == "5 heures restantes"

    def test_unit_chosen_before_rounding(self) -> None:
        """Just under a unit boundary the smaller unit rounds up to the boundary."""
        assert describe_remaining(allowed(minutes=59, seconds=59)) == "60 minutes restantes"
        assert describe_remaining(allowed(hours=23, minutes=40)) == "24 heures restantes"
        assert describe_remaining(allowed(hours=23, minutes=40), Locale.English) == "24 hours remaining"

    def test_locked(self) -> None:
        decision = EditDecision.deny(DenyReason.WindowExpired, elapsed_over_by=datetime.timedelta(minutes=1))

        assert describe_remaining(decision) == "Verrouillé"
        assert describe_remaining(decision, Locale.English) == "Locked"

    def test_unlimited(self) -> None:
        assert describe_remaining(EditDecision.allow()) == "Modifiable sans limite de temps"
        assert describe_remaining(EditDecision.allow(), Locale.English) == "Editable without time limit"


class TestDescribeDenial(object):
    def test_allowed_has_no_explanation(self) -> None:
        assert describe_denial(allowed(hours=3)) is None

    def test_window_expired(self) -> None:
        decision = EditDecision.deny(DenyReason.WindowExpired, elapsed_over_by=datetime.timedelta(minutes=1))

        assert describe_denial(decision) == (
            "Modification verrouillée : le délai est dépassé depuis 1 minute. "
            "Seul un administrateur peut encore modifier cet élément."
        )
        assert describe_denial(decision, Locale.English) == (
            "Editing is locked: the window closed 1 minute ago. Only an administrator can still change this record."
        )

    def test_window_expired_days(self) -> None:
        decision = EditDecision.deny(DenyReason.WindowExpired, elapsed_over_by=datetime.timedelta(days=3, hours=2))

        explanation = describe_denial(decision, Locale.English)

        assert explanation is not None
        assert "3 days ago" in explanation

    def test_no_permission(self) -> None:
        decision = EditDecision.deny(DenyReason.NoPermission)

        assert describe_denial(decision) == "Vous n'avez pas les permissions pour modifier cet élément."
        assert describe_denial(decision, Locale.English) == "You do not have permission to edit this record."
