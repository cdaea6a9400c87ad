# betledger/app/services/settlement.py
"""
Settlement classifier: the only place that knows how a bet status turns into
money. Every other calculator asks this module instead of branching on
statuses itself.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel

from .records import Bet, BetStatus, CapitalMovement

logger = logging.getLogger(__name__)

# statuses that realise profit or loss
SETTLED_STATUSES = frozenset({
    BetStatus.WON,
    BetStatus.LOST,
    BetStatus.CASHOUT,
    BetStatus.HALF_WON,
    BetStatus.HALF_LOST,
})
UNREALISED_STATUSES = frozenset({BetStatus.PENDING, BetStatus.VOID})

WIN = "win"
LOSS = "loss"
NONE = "none"


class BetIntegrityError(ValueError):
    def __init__(self, bet_id: str, reason: str):
        super().__init__(f"bet {bet_id}: {reason}")
        self.bet_id = bet_id
        self.reason = reason


class UnknownStatusError(ValueError):
    pass


class BetAnomaly(BaseModel):
    bet_id: str
    reason: str


# ---------- classification ----------

def _status(bet: Bet) -> BetStatus:
    try:
        return BetStatus(bet.status)
    except ValueError:
        raise UnknownStatusError(f"bet {bet.id}: unrecognised status {bet.status!r}") from None


def is_settled(bet: Bet) -> bool:
    return _status(bet) in SETTLED_STATUSES


def contribution(bet: Bet) -> float:
    """
    Net effect of a bet on the bankroll.

    won       potential_return - stake
    lost      -stake
    cashout   cashout_amount - stake (cashout_amount is required)
    half_won  (stake + potential_return) / 2 - stake
    half_lost -stake / 2
    pending / void contribute 0 and are excluded from realised sums by callers.
    """
    status = _status(bet)
    stake = bet.stake_amount
    if status == BetStatus.WON:
        return bet.potential_return - stake
    if status == BetStatus.LOST:
        return -stake
    if status == BetStatus.CASHOUT:
        if bet.cashout_amount is None:
            raise BetIntegrityError(bet.id, "cashout without cashout_amount")
        return bet.cashout_amount - stake
    if status == BetStatus.HALF_WON:
        return (stake + bet.potential_return) / 2 - stake
    if status == BetStatus.HALF_LOST:
        return -stake / 2
    return 0.0


def returned_amount(bet: Bet) -> float:
    """Cash paid back to the bankroll for a settled bet (stake included)."""
    if not is_settled(bet):
        return 0.0
    return bet.stake_amount + contribution(bet)


def outcome(bet: Bet) -> str:
    status = _status(bet)
    if status in (BetStatus.WON, BetStatus.CASHOUT, BetStatus.HALF_WON):
        return WIN
    if status in (BetStatus.LOST, BetStatus.HALF_LOST):
        return LOSS
    return NONE


def win_weight(bet: Bet) -> Tuple[float, float]:
    """(win, loss) equivalents for hit-rate maths; half results count 0.5."""
    status = _status(bet)
    if status in (BetStatus.WON, BetStatus.CASHOUT):
        return 1.0, 0.0
    if status == BetStatus.LOST:
        return 0.0, 1.0
    if status == BetStatus.HALF_WON:
        return 0.5, 0.0
    if status == BetStatus.HALF_LOST:
        return 0.0, 0.5
    return 0.0, 0.0


# ---------- integrity screen ----------

def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def validate_bet(bet: Bet) -> None:
    status = _status(bet)
    # positive tests so NaN fails them too
    if not (_finite(bet.stake_amount) and bet.stake_amount > 0):
        raise BetIntegrityError(bet.id, f"stake must be positive (got {bet.stake_amount})")
    if not (_finite(bet.odds) and bet.odds >= 1):
        raise BetIntegrityError(bet.id, f"odds below 1 (got {bet.odds})")
    if not _finite(bet.potential_return):
        raise BetIntegrityError(bet.id, f"potential_return not a number (got {bet.potential_return})")
    if status == BetStatus.CASHOUT:
        if bet.cashout_amount is None:
            raise BetIntegrityError(bet.id, "cashout without cashout_amount")
        if not (_finite(bet.cashout_amount) and bet.cashout_amount >= 0):
            raise BetIntegrityError(bet.id, f"negative cashout_amount ({bet.cashout_amount})")


def _check(bet: Bet) -> Optional[str]:
    try:
        validate_bet(bet)
    except BetIntegrityError as e:
        return e.reason
    return None


def find_anomalies(bets: Iterable[Bet]) -> List[BetAnomaly]:
    out: List[BetAnomaly] = []
    for b in bets:
        reason = _check(b)
        if reason:
            out.append(BetAnomaly(bet_id=b.id, reason=reason))
    return out


def screen_bets(bets: Iterable[Bet]) -> List[Bet]:
    """Drop malformed bets (logging each one) so the rest can still be computed."""
    clean: List[Bet] = []
    for b in bets:
        reason = _check(b)
        if reason:
            logger.warning("skipping bet %s: %s", b.id, reason)
            continue
        clean.append(b)
    return clean


def screen_movements(movements: Iterable[CapitalMovement]) -> List[CapitalMovement]:
    """Same skip-and-flag rule for capital movements: the amount must be a positive number."""
    clean: List[CapitalMovement] = []
    for m in movements:
        if not (_finite(m.amount) and m.amount > 0):
            logger.warning("skipping capital movement %s: amount must be positive (got %s)", m.id, m.amount)
            continue
        clean.append(m)
    return clean
