# betledger/app/schemas.py
from typing import List, Optional

from pydantic import BaseModel

from .services.ledger import BankrollPoint, LedgerEntry
from .services.periods import PeriodStats, Trend
from .services.settlement import BetAnomaly

# ---- Ledger responses ----
class LedgerOut(BaseModel):
    user_id: str
    initial_balance: float
    final_balance: float
    entries: List[LedgerEntry]


class BankrollOut(BaseModel):
    user_id: str
    initial_balance: float
    current_bankroll: float
    total_profit: float
    profit_pct: float       # vs initial balance, 0 when there is none
    points: List[BankrollPoint]


# ---- Period comparison ----
class PeriodTrends(BaseModel):
    profit: Trend
    roi: Trend
    win_rate: Trend
    total_staked: Trend


class PeriodOut(BaseModel):
    preset: str
    date_from: str
    date_to: str
    current: PeriodStats
    previous: Optional[PeriodStats] = None   # none for the "all" preset
    trends: Optional[PeriodTrends] = None


# ---- Data quality ----
class AnomaliesOut(BaseModel):
    user_id: str
    total_bets: int
    anomalies: List[BetAnomaly]
