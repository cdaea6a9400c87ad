# betledger/app/services/heatmap.py
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel

from .records import Bet
from .settlement import screen_bets, win_weight
from .timeseries import day_of_week


class HeatmapCell(BaseModel):
    day_of_week: int  # 0 = Sunday
    hour: int
    hit_rate: float   # percent of the cell's bets that won; half_won counts 0.5, as in stats
    bet_count: int


def compute_heatmap(bets: Iterable[Bet]) -> List[HeatmapCell]:
    # every bet in the cell is in the denominator, pending ones too
    cells: Dict[Tuple[int, int], Tuple[float, int]] = {}
    for b in screen_bets(bets):
        key = (day_of_week(b.bet_date), b.bet_date.hour)
        wins, total = cells.get(key, (0.0, 0))
        cells[key] = (wins + win_weight(b)[0], total + 1)

    return [
        HeatmapCell(day_of_week=d, hour=h, hit_rate=wins / total * 100, bet_count=total)
        for (d, h), (wins, total) in sorted(cells.items())
    ]
