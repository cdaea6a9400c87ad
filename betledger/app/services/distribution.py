# betledger/app/services/distribution.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from pydantic import BaseModel

from .records import Bet
from .settlement import contribution, is_settled, screen_bets

NO_LEAGUE = "Other"
NO_TAG = "Untagged"


class SportShare(BaseModel):
    sport: str
    count: int
    percentage: float
    profit: float


class GroupProfit(BaseModel):
    name: str
    profit: float


def compute_sport_distribution(bets: Iterable[Bet]) -> List[SportShare]:
    """
    Share of bets and realised profit per sport, most-bet sport first.
    Ties keep first-seen order.
    """
    bets = screen_bets(bets)
    if not bets:
        return []

    counts: Dict[str, int] = {}
    profit: Dict[str, float] = defaultdict(float)
    for b in bets:
        counts[b.sport] = counts.get(b.sport, 0) + 1
        if is_settled(b):
            profit[b.sport] += contribution(b)

    total = len(bets)
    rows = [
        SportShare(sport=s, count=n, percentage=n / total * 100, profit=profit[s])
        for s, n in counts.items()
    ]
    rows.sort(key=lambda r: r.count, reverse=True)
    return rows


def _top(by_name: Dict[str, float], limit: int) -> List[GroupProfit]:
    rows = [GroupProfit(name=k, profit=v) for k, v in by_name.items()]
    rows.sort(key=lambda r: r.profit, reverse=True)
    return rows[:limit] if limit else rows


def compute_league_profit(bets: Iterable[Bet], limit: int = 10) -> List[GroupProfit]:
    by_league: Dict[str, float] = {}
    for b in screen_bets(bets):
        if not is_settled(b):
            continue
        league = b.league or NO_LEAGUE
        by_league[league] = by_league.get(league, 0.0) + contribution(b)
    return _top(by_league, limit)


def compute_tag_profit(bets: Iterable[Bet], limit: int = 10) -> List[GroupProfit]:
    """A bet with several tags counts towards each of them."""
    by_tag: Dict[str, float] = {}
    for b in screen_bets(bets):
        if not is_settled(b):
            continue
        pnl = contribution(b)
        names = [t.name for t in b.tags] or [NO_TAG]
        for name in names:
            by_tag[name] = by_tag.get(name, 0.0) + pnl
    return _top(by_tag, limit)
