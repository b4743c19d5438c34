from __future__ import annotations

import pytest

from kurswatch.services.reconcile import (
    INSERTED,
    REPLACED,
    UNCHANGED,
    reconcile,
)

from conftest import make_snapshot, week


def test_empty_history_gets_first_snapshot():
    incoming = make_snapshot("2024-01-01", USD=15600)

    result = reconcile((), incoming)

    assert result.changed is True
    assert result.action == INSERTED
    assert result.history == (incoming,)
    assert result.evicted is None


@pytest.mark.parametrize("size", range(0, 7))
def test_new_day_appends_until_limit(size):
    history = week(count=size)
    incoming = make_snapshot("2024-02-01", USD=1.0)

    result = reconcile(history, incoming)

    assert len(result.history) == size + 1
    assert result.history[:-1] == history
    assert result.history[-1] is incoming
    assert result.evicted is None


def test_full_week_evicts_oldest_entry():
    history = week(1, 7)
    incoming = make_snapshot("2024-01-08", USD=15700)

    result = reconcile(history, incoming)

    assert result.changed is True
    assert [s.date.isoformat() for s in result.history] == [
        f"2024-01-{d:02d}" for d in range(2, 9)
    ]
    assert result.evicted is history[0]
    assert result.history[:-1] == history[1:]


def test_same_day_identical_rates_is_noop():
    history = week(1, 3)
    incoming = make_snapshot("2024-01-02", USD=history[1].rates["USD"])

    result = reconcile(history, incoming)

    assert result.changed is False
    assert result.action == UNCHANGED
    assert result.history is history
    assert all(a is b for a, b in zip(result.history, history))


def test_same_day_changed_rate_replaces_in_place():
    today = make_snapshot("2024-01-03", USD=15600)
    history = (make_snapshot("2024-01-01", USD=15500), make_snapshot("2024-01-02", USD=15550), today)
    incoming = make_snapshot("2024-01-03", USD=15650)

    result = reconcile(history, incoming)

    assert result.changed is True
    assert result.action == REPLACED
    assert len(result.history) == 3
    assert result.history[2] is incoming
    assert result.history[0] is history[0]
    assert result.history[1] is history[1]


def test_replace_in_middle_keeps_position():
    history = week(1, 5)
    incoming = make_snapshot("2024-01-03", USD=1.0, JPY=100.0)

    result = reconcile(history, incoming)

    assert result.history[2] == incoming
    assert result.history[:2] == history[:2]
    assert result.history[3:] == history[3:]


def test_extra_currency_counts_as_change():
    history = (make_snapshot("2024-01-01", USD=15600),)
    incoming = make_snapshot("2024-01-01", USD=15600, SGD=11600)

    assert reconcile(history, incoming).changed is True


def test_display_date_alone_is_not_a_change():
    history = (make_snapshot("2024-01-01", USD=15600),)
    incoming = history[0].model_copy(update={"display_date": "another label"})

    assert reconcile(history, incoming).changed is False


def test_input_history_is_not_mutated():
    history = week(1, 7)
    before = tuple(history)

    reconcile(history, make_snapshot("2024-01-08", USD=1.0))
    reconcile(history, make_snapshot("2024-01-07", USD=1.0))

    assert history == before


def test_overfull_history_only_loses_one_entry():
    history = week(1, 9)

    result = reconcile(history, make_snapshot("2024-01-20", USD=1.0))

    assert len(result.history) == 9
    assert result.evicted is history[0]


def test_custom_limit():
    result = reconcile(week(1, 3), make_snapshot("2024-01-04", USD=1.0), limit=3)

    assert len(result.history) == 3
    assert result.history[0].date.isoformat() == "2024-01-02"
