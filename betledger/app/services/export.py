# betledger/app/services/export.py
from __future__ import annotations

import csv
import io
from typing import Iterable

from .records import Bet, BetStatus
from .settlement import BetIntegrityError, contribution, is_settled

CSV_HEADERS = [
    "bet_date",
    "sport",
    "league",
    "market",
    "description",
    "odds",
    "stake",
    "potential_return",
    "status",
    "profit",
]


def _profit(b: Bet) -> float:
    if not is_settled(b):
        return 0.0
    try:
        return contribution(b)
    except BetIntegrityError:
        return 0.0  # cashout with no amount: exported as-is, profit unknown


def bets_to_csv(bets: Iterable[Bet]) -> str:
    """All bets as CSV text, malformed rows included so the export is complete."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for b in bets:
        writer.writerow([
            b.bet_date.date().isoformat(),
            b.sport or "",
            b.league or "",
            b.betting_market or "",
            b.bet_description or "",
            f"{b.odds:g}",
            f"{b.stake_amount:.2f}",
            f"{b.potential_return:.2f}",
            BetStatus(b.status).value,
            f"{_profit(b):.2f}",
        ])
    return buf.getvalue()
