# betledger/app/services/stats.py
from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, Field

from .records import Bet, BetStatus
from .settlement import contribution, returned_amount, screen_bets, win_weight
from .streak import Streak, compute_current_streak


class AggregateStats(BaseModel):
    total_bets: int = 0
    settled_bets: int = 0
    void_bets: int = 0
    total_staked: float = 0.0          # every bet, pending included
    total_staked_settled: float = 0.0  # ROI denominator
    total_return: float = 0.0
    win_rate: float = 0.0              # percent
    profit: float = 0.0
    roi: float = 0.0                   # percent
    average_odds: float = 0.0
    biggest_win: float = 0.0
    biggest_loss: float = 0.0
    total_cashouts: int = 0
    cashout_amount: float = 0.0
    pending_amount: float = 0.0
    lost_amount: float = 0.0
    current_streak: Streak = Field(default_factory=Streak)


def _pct(num: float, den: float) -> float:
    return (num / den) * 100 if den > 0 else 0.0


def compute_aggregate_stats(bets: Iterable[Bet]) -> AggregateStats:
    """
    Summary card numbers. Defined for every input: an empty collection gives
    an all-zero record.

    Profit and ROI only look at settled bets; pending stake is counted in
    total_staked and pending_amount but never subtracted from profit.
    """
    bets = screen_bets(bets)
    if not bets:
        return AggregateStats()

    total_staked = 0.0
    staked_settled = 0.0
    total_return = 0.0
    profit = 0.0
    wins = losses = 0.0
    odds_sum = 0.0
    biggest_win = 0.0
    biggest_loss = 0.0
    settled = voids = cashouts = 0
    cashout_amount = pending_amount = lost_amount = 0.0

    for b in bets:
        status = BetStatus(b.status)
        total_staked += b.stake_amount
        odds_sum += b.odds

        if status == BetStatus.PENDING:
            pending_amount += b.stake_amount
            continue
        if status == BetStatus.VOID:
            voids += 1
            continue

        # settled from here on
        pnl = contribution(b)
        settled += 1
        staked_settled += b.stake_amount
        total_return += returned_amount(b)
        profit += pnl
        w, l = win_weight(b)
        wins += w
        losses += l

        if status in (BetStatus.WON, BetStatus.CASHOUT):
            biggest_win = max(biggest_win, pnl)
        if status == BetStatus.CASHOUT:
            cashouts += 1
            cashout_amount += b.cashout_amount
        elif status == BetStatus.LOST:
            lost_amount += b.stake_amount
            biggest_loss = max(biggest_loss, b.stake_amount)

    return AggregateStats(
        total_bets=len(bets),
        settled_bets=settled,
        void_bets=voids,
        total_staked=total_staked,
        total_staked_settled=staked_settled,
        total_return=total_return,
        win_rate=_pct(wins, wins + losses),
        profit=profit,
        roi=_pct(profit, staked_settled),
        average_odds=odds_sum / len(bets),
        biggest_win=biggest_win,
        biggest_loss=biggest_loss,
        total_cashouts=cashouts,
        cashout_amount=cashout_amount,
        pending_amount=pending_amount,
        lost_amount=lost_amount,
        current_streak=compute_current_streak(bets),
    )
