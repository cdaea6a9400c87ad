# betledger/app/services/ledger.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel

from .records import Bet, BetStatus, CapitalMovement, MovementSource, MovementType, utc_instant
from .settlement import contribution, is_settled, screen_bets, screen_movements

INITIAL_ENTRY_ID = "initial"

_BET_CATEGORY = {
    BetStatus.WON: "win",
    BetStatus.LOST: "loss",
    BetStatus.CASHOUT: "cashout",
    BetStatus.HALF_WON: "half_win",
    BetStatus.HALF_LOST: "half_loss",
}


class LedgerEntry(BaseModel):
    id: str
    timestamp: Optional[datetime] = None   # None only for the opening entry
    description: str
    category: str       # initial|win|loss|cashout|half_win|half_loss|deposit|withdrawal
    amount: float
    balance: float
    source: str = "bet"  # bet | manual | bankroll_edit | initial
    editable: bool = False


class BankrollPoint(BaseModel):
    bet_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    profit: float
    bankroll: float


# ---------- helpers ----------

def _movement_description(m: CapitalMovement) -> str:
    if m.source == MovementSource.BANKROLL_EDIT:
        if m.type == MovementType.DEPOSIT:
            return "Bankroll adjustment (deposit)"
        return "Bankroll adjustment (withdrawal)"
    if m.description:
        return m.description
    return "Deposit" if m.type == MovementType.DEPOSIT else "Withdrawal"


def _bet_rows(bets: Iterable[Bet]) -> List[LedgerEntry]:
    rows = []
    for b in screen_bets(bets):
        if not is_settled(b):
            continue
        rows.append(LedgerEntry(
            id=b.id,
            timestamp=b.bet_date,  # no reliable settled_at, placement date stands in
            description=b.bet_description,
            category=_BET_CATEGORY[BetStatus(b.status)],
            amount=contribution(b),
            balance=0.0,
        ))
    return rows


def _movement_rows(movements: Iterable[CapitalMovement]) -> List[LedgerEntry]:
    rows = []
    for m in screen_movements(movements):
        if not m.affects_balance:
            continue
        rows.append(LedgerEntry(
            id=m.id,
            timestamp=m.movement_date,
            description=_movement_description(m),
            category=MovementType(m.type).value,
            amount=m.signed_amount,
            balance=0.0,
            source=MovementSource(m.source).value,
            editable=m.editable,
        ))
    return rows


# ---------- public ----------

def compute_ledger(
    bets: Iterable[Bet],
    movements: Iterable[CapitalMovement],
    initial_balance: Optional[float],
) -> List[LedgerEntry]:
    """
    Cash-flow statement: settled bets and balance-affecting capital movements,
    oldest first, each carrying the running balance.

    Sorting happens before accumulation. Equal timestamps keep input order
    (bets first, then movements) because list.sort is stable.
    """
    start = float(initial_balance or 0.0)

    events = _bet_rows(bets) + _movement_rows(movements)
    events.sort(key=lambda e: utc_instant(e.timestamp))

    ledger = [LedgerEntry(
        id=INITIAL_ENTRY_ID,
        timestamp=None,
        description="Initial balance",
        category="initial",
        amount=0.0,
        balance=start,
        source="initial",
    )]

    balance = start
    for e in events:
        balance += e.amount
        ledger.append(e.model_copy(update={"balance": balance}))
    return ledger


def compute_bankroll_evolution(
    bets: Iterable[Bet],
    initial_balance: Optional[float],
) -> List[BankrollPoint]:
    """Bets-only bankroll curve (capital movements left out)."""
    start = float(initial_balance or 0.0)
    settled = [b for b in screen_bets(bets) if is_settled(b)]
    settled.sort(key=lambda b: utc_instant(b.bet_date))

    points = [BankrollPoint(profit=0.0, bankroll=start)]
    bankroll = start
    for b in settled:
        profit = contribution(b)
        bankroll += profit
        points.append(BankrollPoint(
            bet_id=b.id,
            timestamp=b.bet_date,
            profit=profit,
            bankroll=bankroll,
        ))
    return points
