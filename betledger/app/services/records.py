# betledger/app/services/records.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class BetStatus(str, Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"
    VOID = "void"
    CASHOUT = "cashout"
    HALF_WON = "half_won"
    HALF_LOST = "half_lost"


class MovementType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class MovementSource(str, Enum):
    MANUAL = "manual"              # user-entered, editable
    BANKROLL_EDIT = "bankroll_edit"  # written when the starting bankroll is changed


class Tag(BaseModel):
    name: str
    color: Optional[str] = None

    class Config:
        from_attributes = True


class Bet(BaseModel):
    """
    One wager as read from the store.

    stake_amount / odds / cashout_amount are deliberately unconstrained here:
    malformed rows must survive parsing so the settlement screen can flag them.
    """
    id: str
    user_id: str
    sport: str
    league: Optional[str] = None
    bet_type: Optional[str] = None
    betting_market: Optional[str] = None
    bet_description: str = ""
    match_description: Optional[str] = None

    odds: float
    stake_amount: float
    potential_return: float

    status: BetStatus = BetStatus.PENDING
    bet_date: datetime
    match_date: Optional[datetime] = None

    cashout_amount: Optional[float] = None
    cashout_date: Optional[datetime] = None

    tags: List[Tag] = Field(default_factory=list)

    class Config:
        from_attributes = True


class CapitalMovement(BaseModel):
    id: str
    user_id: str
    type: MovementType
    amount: float                  # always positive, sign comes from type
    movement_date: datetime
    description: Optional[str] = None
    source: MovementSource = MovementSource.MANUAL
    affects_balance: bool = True

    class Config:
        from_attributes = True

    @property
    def signed_amount(self) -> float:
        if self.type == MovementType.DEPOSIT:
            return self.amount
        return -self.amount

    @property
    def editable(self) -> bool:
        return self.source == MovementSource.MANUAL


def utc_instant(ts: datetime) -> datetime:
    """Comparable instant; naive timestamps are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
