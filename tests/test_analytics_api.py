from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from betledger.app import models
from betledger.app.db import Base, SessionLocal, engine
from betledger.app.main import app


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def user(db):
    u = models.User(id="user-1", display_name="Ana", initial_bankroll=500.0)
    value = models.Tag(id="tag-1", user_id=u.id, name="value", color="#22c55e")
    db.add_all([u, value])
    db.add_all([
        models.Bet(
            id="bet-won", user_id=u.id, sport="football", league="Premier League",
            bet_description="Arsenal to win", odds=2.0, stake_amount=100.0,
            potential_return=200.0, status="won", bet_date=datetime(2026, 1, 2, 20, 0),
            tags=[value],
        ),
        models.Bet(
            id="bet-lost", user_id=u.id, sport="tennis", bet_description="Over 22.5 games",
            odds=1.9, stake_amount=50.0, potential_return=95.0, status="lost",
            bet_date=datetime(2026, 1, 3, 15, 0),
        ),
        models.Bet(
            id="bet-pending", user_id=u.id, sport="football", bet_description="BTTS",
            odds=1.7, stake_amount=30.0, potential_return=51.0, status="pending",
            bet_date=datetime(2026, 1, 4, 11, 0),
        ),
        models.Bet(
            id="bet-broken", user_id=u.id, sport="football", bet_description="Cashed out",
            odds=3.0, stake_amount=10.0, potential_return=30.0, status="cashout",
            bet_date=datetime(2026, 1, 4, 12, 0),
        ),
    ])
    db.add_all([
        models.CapitalMovement(
            id="dep-1", user_id=u.id, type="deposit", amount=1000.0,
            movement_date=datetime(2026, 1, 1, 9, 0), source="manual",
        ),
        models.CapitalMovement(
            id="info-1", user_id=u.id, type="withdrawal", amount=400.0,
            movement_date=datetime(2026, 1, 5, 9, 0), affects_balance=False,
        ),
    ])
    db.commit()
    return u


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_unknown_user_is_404(client):
    assert client.get("/users/nobody/analytics/stats").status_code == 404


def test_stats_endpoint(client, user):
    body = client.get(f"/users/{user.id}/analytics/stats").json()
    assert body["total_bets"] == 3  # the cashout without amount is skipped
    assert body["total_staked"] == 180
    assert body["profit"] == pytest.approx(50.0)
    assert body["roi"] == pytest.approx(50 / 150 * 100)
    assert body["pending_amount"] == 30


def test_ledger_endpoint(client, user):
    body = client.get(f"/users/{user.id}/analytics/ledger").json()
    ids = [e["id"] for e in body["entries"]]
    assert ids == ["initial", "dep-1", "bet-won", "bet-lost"]
    assert body["initial_balance"] == 500.0
    assert body["final_balance"] == pytest.approx(500 + 1000 + 100 - 50)

    newest_first = client.get(f"/users/{user.id}/analytics/ledger", params={"order": "desc"}).json()
    assert [e["id"] for e in newest_first["entries"]] == list(reversed(ids))
    assert newest_first["final_balance"] == body["final_balance"]


def test_bankroll_endpoint(client, user):
    body = client.get(f"/users/{user.id}/analytics/bankroll").json()
    assert body["current_bankroll"] == pytest.approx(550.0)
    assert body["profit_pct"] == pytest.approx(10.0)


def test_series_endpoints(client, user):
    base = f"/users/{user.id}/analytics"
    timeline = client.get(f"{base}/profit-timeline").json()
    assert [p["cumulative_profit"] for p in timeline] == [100.0, 50.0, 50.0]

    weekly = client.get(f"{base}/volume", params={"granularity": "week"}).json()
    assert [(v["period"], v["total"]) for v in weekly] == [("2025-12-28", 2), ("2026-01-04", 1)]

    assert client.get(f"{base}/volume", params={"granularity": "year"}).status_code == 422


def test_group_endpoints(client, user):
    base = f"/users/{user.id}/analytics"
    sports = client.get(f"{base}/sports").json()
    assert [s["sport"] for s in sports] == ["football", "tennis"]

    tags = client.get(f"{base}/tags").json()
    assert tags[0] == {"name": "value", "profit": 100.0}

    streak = client.get(f"{base}/streak").json()
    assert streak == {"type": "none", "count": 0}  # newest bet is still pending

    heatmap = client.get(f"{base}/heatmap").json()
    assert sum(c["bet_count"] for c in heatmap) == 3


def test_anomalies_and_export(client, user):
    base = f"/users/{user.id}/analytics"
    report = client.get(f"{base}/anomalies").json()
    assert report["total_bets"] == 4
    assert [a["bet_id"] for a in report["anomalies"]] == ["bet-broken"]

    resp = client.get(f"{base}/export.csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().split("\n")
    assert len(lines) == 5


def test_period_endpoint(client, user, db):
    recent = datetime.utcnow() - timedelta(days=2)
    db.add(models.Bet(
        id="bet-recent", user_id=user.id, sport="football", bet_description="Recent",
        odds=2.0, stake_amount=20.0, potential_return=40.0, status="won", bet_date=recent,
    ))
    db.commit()

    body = client.get(f"/users/{user.id}/analytics/period", params={"preset": "7"}).json()
    assert body["current"]["total_bets"] == 1
    assert body["current"]["profit"] == pytest.approx(20.0)
    assert body["trends"]["profit"]["trend"] == "up"

    everything = client.get(f"/users/{user.id}/analytics/period", params={"preset": "all"}).json()
    assert everything["previous"] is None


def test_full_dashboard(client, user):
    body = client.get(f"/users/{user.id}/analytics").json()
    assert body["stats"]["total_bets"] == 3
    assert body["ledger"][-1]["balance"] == pytest.approx(1550.0)
    assert len(body["anomalies"]) == 1
