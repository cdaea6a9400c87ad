# betledger/app/routes/analytics.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..crud import get_user, list_bets, list_capital_movements
from ..db import get_db
from ..models import User
from ..schemas import AnomaliesOut, BankrollOut, LedgerOut, PeriodOut, PeriodTrends
from ..settings import settings
from ..services.dashboard import Dashboard, build_dashboard
from ..services.distribution import (
    GroupProfit,
    SportShare,
    compute_league_profit,
    compute_sport_distribution,
    compute_tag_profit,
)
from ..services.export import bets_to_csv
from ..services.heatmap import HeatmapCell, compute_heatmap
from ..services.ledger import compute_bankroll_evolution, compute_ledger
from ..services.periods import (
    compare_trend,
    compute_period_stats,
    date_range_for_preset,
    filter_bets_by_date_range,
    previous_period,
)
from ..services.records import utc_instant
from ..services.settlement import find_anomalies
from ..services.stats import AggregateStats, compute_aggregate_stats
from ..services.streak import Streak, compute_current_streak
from ..services.timeseries import (
    ProfitPoint,
    VolumeBucket,
    compute_profit_timeline,
    compute_volume_series,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/analytics", tags=["analytics"])

# --- tiny helpers ------------------------------------------------------------

def _resolve_user(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _initial_balance(user: User) -> float:
    if user.initial_bankroll is None:
        return settings.DEFAULT_INITIAL_BANKROLL
    return float(user.initial_bankroll)

# --- 1) Everything at once -----------------------------------------------------

@router.get("", response_model=Dashboard)
def dashboard(
    user_id: str,
    granularity: str = Query("day", pattern="^(day|week|month)$"),
    db: Session = Depends(get_db),
):
    user = _resolve_user(db, user_id)
    bets = list_bets(db, user.id)
    movements = list_capital_movements(db, user.id)
    logger.info("dashboard user=%s bets=%d movements=%d", user.id, len(bets), len(movements))
    return build_dashboard(
        bets,
        movements,
        _initial_balance(user),
        granularity=granularity,
        top_n=settings.TOP_N_GROUPS,
    )

# --- 2) Single calculators -----------------------------------------------------

@router.get("/stats", response_model=AggregateStats)
def stats(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    return compute_aggregate_stats(list_bets(db, user.id))


@router.get("/ledger", response_model=LedgerOut)
def ledger(
    user_id: str,
    order: str = Query("asc", pattern="^(asc|desc)$", description="desc = most recent first"),
    db: Session = Depends(get_db),
):
    user = _resolve_user(db, user_id)
    start = _initial_balance(user)
    entries = compute_ledger(list_bets(db, user.id), list_capital_movements(db, user.id), start)
    final_balance = entries[-1].balance
    if order == "desc":
        # reverse only after balances are computed
        entries = list(reversed(entries))
    return LedgerOut(
        user_id=user.id,
        initial_balance=start,
        final_balance=final_balance,
        entries=entries,
    )


@router.get("/bankroll", response_model=BankrollOut)
def bankroll(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    start = _initial_balance(user)
    points = compute_bankroll_evolution(list_bets(db, user.id), start)
    current = points[-1].bankroll
    total_profit = current - start
    return BankrollOut(
        user_id=user.id,
        initial_balance=start,
        current_bankroll=current,
        total_profit=total_profit,
        profit_pct=(total_profit / start * 100) if start else 0.0,
        points=points,
    )


@router.get("/profit-timeline", response_model=List[ProfitPoint])
def profit_timeline(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    return compute_profit_timeline(list_bets(db, user.id))


@router.get("/volume", response_model=List[VolumeBucket])
def volume(
    user_id: str,
    granularity: str = Query("day", pattern="^(day|week|month)$"),
    db: Session = Depends(get_db),
):
    user = _resolve_user(db, user_id)
    return compute_volume_series(list_bets(db, user.id), granularity)


@router.get("/streak", response_model=Streak)
def streak(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    return compute_current_streak(list_bets(db, user.id))


@router.get("/sports", response_model=List[SportShare])
def sports(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    return compute_sport_distribution(list_bets(db, user.id))


@router.get("/leagues", response_model=List[GroupProfit])
def leagues(
    user_id: str,
    limit: int = Query(settings.TOP_N_GROUPS, ge=1, le=100),
    db: Session = Depends(get_db),
):
    user = _resolve_user(db, user_id)
    return compute_league_profit(list_bets(db, user.id), limit=limit)


@router.get("/tags", response_model=List[GroupProfit])
def tags(
    user_id: str,
    limit: int = Query(settings.TOP_N_GROUPS, ge=1, le=100),
    db: Session = Depends(get_db),
):
    user = _resolve_user(db, user_id)
    return compute_tag_profit(list_bets(db, user.id), limit=limit)


@router.get("/heatmap", response_model=List[HeatmapCell])
def heatmap(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    return compute_heatmap(list_bets(db, user.id))

# --- 3) Period vs previous period ----------------------------------------------

@router.get("/period", response_model=PeriodOut)
def period(
    user_id: str,
    preset: str = Query("30", pattern="^(7|30|90|month|ytd|all)$"),
    db: Session = Depends(get_db),
):
    user = _resolve_user(db, user_id)
    bets = list_bets(db, user.id)
    now = datetime.now(timezone.utc)

    start, end = date_range_for_preset(preset, now)
    current = compute_period_stats(filter_bets_by_date_range(bets, start, end))
    out = PeriodOut(
        preset=preset,
        date_from=start.isoformat(),
        date_to=end.isoformat(),
        current=current,
    )
    if preset == "all":
        return out

    prev_start, prev_end = previous_period(start, end)
    previous = compute_period_stats(filter_bets_by_date_range(bets, prev_start, prev_end))
    out.previous = previous
    out.trends = PeriodTrends(
        profit=compare_trend(current.profit, previous.profit),
        roi=compare_trend(current.roi, previous.roi),
        win_rate=compare_trend(current.win_rate, previous.win_rate),
        total_staked=compare_trend(current.total_staked, previous.total_staked),
    )
    return out

# --- 4) Data quality + export --------------------------------------------------

@router.get("/anomalies", response_model=AnomaliesOut)
def anomalies(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    bets = list_bets(db, user.id)
    found = find_anomalies(bets)
    if found:
        logger.warning("user=%s has %d malformed bets", user.id, len(found))
    return AnomaliesOut(user_id=user.id, total_bets=len(bets), anomalies=found)


@router.get("/export.csv", response_class=PlainTextResponse)
def export_csv(user_id: str, db: Session = Depends(get_db)):
    user = _resolve_user(db, user_id)
    bets = sorted(list_bets(db, user.id), key=lambda b: utc_instant(b.bet_date), reverse=True)
    today = datetime.now(timezone.utc).date().isoformat()
    return PlainTextResponse(
        bets_to_csv(bets),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="bets-{today}.csv"'},
    )
