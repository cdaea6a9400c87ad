# betledger/app/services/streak.py
from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

from .records import Bet, utc_instant
from .settlement import NONE, outcome, screen_bets


class Streak(BaseModel):
    type: str = NONE  # win | loss | none
    count: int = 0


def compute_current_streak(bets: Iterable[Bet]) -> Streak:
    """
    Current run, newest bet first. Pending/void bets are stepped over; the
    first result of the opposite kind ends the scan.
    """
    ordered = sorted(screen_bets(bets), key=lambda b: utc_instant(b.bet_date), reverse=True)
    if not ordered:
        return Streak()

    kind = outcome(ordered[0])
    if kind == NONE:
        return Streak()

    count = 0
    for b in ordered:
        o = outcome(b)
        if o == kind:
            count += 1
        elif o == NONE:
            continue
        else:
            break
    return Streak(type=kind, count=count)
