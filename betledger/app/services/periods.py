# betledger/app/services/periods.py
"""
Date-window helpers for the "this period vs previous period" cards.

Windows are inclusive on both ends: [00:00 of the first day, 23:59:59.999999
of the reference day].
"""
from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel

from .records import Bet, utc_instant
from .settlement import contribution, is_settled, returned_amount, screen_bets, win_weight

PRESETS = ("7", "30", "90", "month", "ytd", "all")
EPOCH = datetime(1970, 1, 1)


class PeriodStats(BaseModel):
    total_bets: int = 0
    total_staked: float = 0.0
    total_return: float = 0.0
    win_rate: float = 0.0
    profit: float = 0.0
    roi: float = 0.0
    average_stake: float = 0.0
    average_odds: float = 0.0


class Trend(BaseModel):
    trend: str  # up | down | neutral
    pct_change: float


def _end_of_day(ref: datetime) -> datetime:
    return datetime.combine(ref.date(), time.max, tzinfo=ref.tzinfo)


def _start_of_day(ref: datetime) -> datetime:
    return datetime.combine(ref.date(), time.min, tzinfo=ref.tzinfo)


def date_range_for_preset(preset: str, reference: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    ref = reference or datetime.utcnow()
    end = _end_of_day(ref)

    if preset in ("7", "30", "90"):
        start = _start_of_day(ref - timedelta(days=int(preset)))
    elif preset == "month":
        start = _start_of_day(ref.replace(day=1))
    elif preset == "ytd":
        start = _start_of_day(ref.replace(month=1, day=1))
    elif preset == "all":
        start = EPOCH.replace(tzinfo=ref.tzinfo)
    else:
        raise ValueError(f"unknown preset {preset!r}; expected one of {PRESETS}")
    return start, end


def previous_period(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    """Window of the same length that closes just before `start`."""
    length = end - start
    prev_end = _end_of_day(start - timedelta(days=1))
    prev_start = _start_of_day(prev_end - length)
    return prev_start, prev_end


def filter_bets_by_date_range(bets: Iterable[Bet], start: datetime, end: datetime) -> List[Bet]:
    lo, hi = utc_instant(start), utc_instant(end)
    return [b for b in bets if lo <= utc_instant(b.bet_date) <= hi]


def compute_period_stats(bets: Iterable[Bet]) -> PeriodStats:
    bets = screen_bets(bets)
    n = len(bets)
    if n == 0:
        return PeriodStats()

    staked = sum(b.stake_amount for b in bets)
    settled = [b for b in bets if is_settled(b)]
    staked_settled = sum(b.stake_amount for b in settled)
    profit = sum(contribution(b) for b in settled)
    wins = losses = 0.0
    for b in settled:
        w, l = win_weight(b)
        wins += w
        losses += l

    return PeriodStats(
        total_bets=n,
        total_staked=staked,
        total_return=sum(returned_amount(b) for b in settled),
        win_rate=(wins / (wins + losses) * 100) if (wins + losses) > 0 else 0.0,
        profit=profit,
        roi=(profit / staked_settled * 100) if staked_settled > 0 else 0.0,
        average_stake=staked / n,
        average_odds=sum(b.odds for b in bets) / n,
    )


def compare_trend(current: float, previous: float, higher_is_better: bool = True) -> Trend:
    if previous == 0:
        if current > 0:
            return Trend(trend="up", pct_change=0.0)
        if current < 0:
            return Trend(trend="down", pct_change=0.0)
        return Trend(trend="neutral", pct_change=0.0)

    pct = (current - previous) / abs(previous) * 100
    if abs(pct) < 0.01:
        return Trend(trend="neutral", pct_change=pct)
    improved = current > previous if higher_is_better else current < previous
    return Trend(trend="up" if improved else "down", pct_change=pct)
