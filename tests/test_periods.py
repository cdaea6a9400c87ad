from datetime import datetime, time

import pytest

from betledger.app.services.periods import (
    compare_trend,
    compute_period_stats,
    date_range_for_preset,
    filter_bets_by_date_range,
    previous_period,
)

REF = datetime(2026, 3, 15, 14, 30)


def test_day_presets():
    start, end = date_range_for_preset("7", REF)
    assert start == datetime(2026, 3, 8, 0, 0)
    assert end == datetime.combine(REF.date(), time.max)


def test_month_and_ytd():
    assert date_range_for_preset("month", REF)[0] == datetime(2026, 3, 1)
    assert date_range_for_preset("ytd", REF)[0] == datetime(2026, 1, 1)
    assert date_range_for_preset("all", REF)[0] == datetime(1970, 1, 1)


def test_unknown_preset():
    with pytest.raises(ValueError):
        date_range_for_preset("week", REF)


def test_previous_period_has_same_length_and_ends_before_start():
    start, end = date_range_for_preset("7", REF)
    prev_start, prev_end = previous_period(start, end)
    assert prev_end < start
    assert prev_end == datetime.combine(datetime(2026, 3, 7).date(), time.max)
    assert prev_start == datetime(2026, 2, 28)


def test_filter_is_inclusive(bet):
    start, end = date_range_for_preset("7", REF)
    inside = bet("won", when=start)
    edge = bet("won", when=end)
    outside = bet("won", when=datetime(2026, 3, 7, 23, 0))
    assert filter_bets_by_date_range([inside, edge, outside], start, end) == [inside, edge]


def test_period_stats(bet):
    bets = [bet("won", stake=10, odds=2.0), bet("lost", stake=10), bet("pending", stake=20, odds=3.0)]
    stats = compute_period_stats(bets)
    assert stats.total_bets == 3
    assert stats.total_staked == 40
    assert stats.profit == pytest.approx(0.0)
    assert stats.win_rate == pytest.approx(50.0)
    assert stats.average_stake == pytest.approx(40 / 3)
    assert stats.average_odds == pytest.approx(7.0 / 3)


def test_compare_trend():
    assert compare_trend(10, 0).trend == "up"
    assert compare_trend(0, 0).trend == "neutral"
    t = compare_trend(150, 100)
    assert (t.trend, t.pct_change) == ("up", pytest.approx(50.0))
    assert compare_trend(50, 100, higher_is_better=False).trend == "up"
    assert compare_trend(-20, -10).trend == "down"
