import os

# in-memory store for the API tests; must be set before betledger.app.db is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENV", "test")

from datetime import datetime
from itertools import count

import pytest

from betledger.app.services.records import Bet, CapitalMovement

_ids = count(1)


def make_bet(status="won", stake=100.0, odds=2.0, when=datetime(2026, 1, 5, 18, 0), **kw) -> Bet:
    data = {
        "id": f"b{next(_ids)}",
        "user_id": "u1",
        "sport": "football",
        "bet_description": "Home win",
        "odds": odds,
        "stake_amount": stake,
        "potential_return": stake * odds,
        "status": status,
        "bet_date": when,
    }
    data.update(kw)
    return Bet(**data)


def make_movement(type="deposit", amount=1000.0, when=datetime(2026, 1, 1, 9, 0), **kw) -> CapitalMovement:
    data = {
        "id": f"m{next(_ids)}",
        "user_id": "u1",
        "type": type,
        "amount": amount,
        "movement_date": when,
    }
    data.update(kw)
    return CapitalMovement(**data)


@pytest.fixture
def bet():
    return make_bet


@pytest.fixture
def movement():
    return make_movement
