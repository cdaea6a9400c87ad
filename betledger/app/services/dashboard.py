# betledger/app/services/dashboard.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from .distribution import (
    GroupProfit,
    SportShare,
    compute_league_profit,
    compute_sport_distribution,
    compute_tag_profit,
)
from .heatmap import HeatmapCell, compute_heatmap
from .ledger import LedgerEntry, compute_ledger
from .records import Bet, CapitalMovement
from .settlement import BetAnomaly, find_anomalies, screen_bets, screen_movements
from .stats import AggregateStats, compute_aggregate_stats
from .timeseries import ProfitPoint, VolumeBucket, compute_profit_timeline, compute_volume_series


class Dashboard(BaseModel):
    stats: AggregateStats
    ledger: List[LedgerEntry]
    profit_timeline: List[ProfitPoint]
    volume: List[VolumeBucket]
    sports: List[SportShare]
    leagues: List[GroupProfit]
    tags: List[GroupProfit]
    heatmap: List[HeatmapCell]
    anomalies: List[BetAnomaly]


def build_dashboard(
    bets: List[Bet],
    movements: List[CapitalMovement],
    initial_balance: Optional[float],
    granularity: str = "day",
    top_n: int = 10,
) -> Dashboard:
    """Every calculator reads the same snapshot; none depends on another's output."""
    # screened once here so a malformed row is logged once per build
    clean = screen_bets(bets)
    moves = screen_movements(movements)
    return Dashboard(
        stats=compute_aggregate_stats(clean),
        ledger=compute_ledger(clean, moves, initial_balance),
        profit_timeline=compute_profit_timeline(clean),
        volume=compute_volume_series(clean, granularity),
        sports=compute_sport_distribution(clean),
        leagues=compute_league_profit(clean, limit=top_n),
        tags=compute_tag_profit(clean, limit=top_n),
        heatmap=compute_heatmap(clean),
        anomalies=find_anomalies(bets),
    )
