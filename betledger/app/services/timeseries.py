# betledger/app/services/timeseries.py
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from pydantic import BaseModel

from .records import Bet, BetStatus
from .settlement import contribution, is_settled, screen_bets

GRANULARITIES = ("day", "week", "month")


class VolumeBucket(BaseModel):
    period: str
    total: int = 0
    won: int = 0
    lost: int = 0
    pending: int = 0
    cashout: int = 0
    void: int = 0
    half_won: int = 0
    half_lost: int = 0


class ProfitPoint(BaseModel):
    date: str
    daily_profit: float
    cumulative_profit: float
    bet_count: int


def day_of_week(ts: datetime) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (ts.weekday() + 1) % 7


def bucket_key(ts: datetime, granularity: str) -> str:
    """
    Bucket label for a placement timestamp, read in the timestamp's own zone.
      day   -> YYYY-MM-DD
      week  -> YYYY-MM-DD of the Sunday that opens the week
      month -> YYYY-MM
    """
    if granularity == "day":
        return ts.date().isoformat()
    if granularity == "week":
        start = ts.date() - timedelta(days=day_of_week(ts))
        return start.isoformat()
    if granularity == "month":
        return f"{ts.year:04d}-{ts.month:02d}"
    raise ValueError(f"unknown granularity {granularity!r}; expected one of {GRANULARITIES}")


def compute_volume_series(bets: Iterable[Bet], granularity: str = "day") -> List[VolumeBucket]:
    """Bet counts per bucket, split by status. Sparse and sorted by key."""
    if granularity not in GRANULARITIES:
        raise ValueError(f"unknown granularity {granularity!r}; expected one of {GRANULARITIES}")

    buckets: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for b in screen_bets(bets):
        key = bucket_key(b.bet_date, granularity)
        buckets[key]["total"] += 1
        buckets[key][BetStatus(b.status).value] += 1

    return [VolumeBucket(period=k, **buckets[k]) for k in sorted(buckets)]


def compute_profit_timeline(bets: Iterable[Bet]) -> List[ProfitPoint]:
    """
    Daily realised betting profit plus its running total. Capital movements
    are not part of this series; see ledger.compute_ledger for the balance.
    """
    daily: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for b in screen_bets(bets):
        key = bucket_key(b.bet_date, "day")
        counts[key] += 1
        if is_settled(b):
            daily[key] += contribution(b)

    out: List[ProfitPoint] = []
    running = 0.0
    for key in sorted(counts):
        running += daily[key]
        out.append(ProfitPoint(
            date=key,
            daily_profit=daily[key],
            cumulative_profit=running,
            bet_count=counts[key],
        ))
    return out
