from typing import List, Optional

from sqlalchemy.orm import Session

from . import models
from .services.records import Bet, CapitalMovement


# -------- Users --------
def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


# -------- Bets --------
def list_bets(db: Session, user_id: str) -> List[Bet]:
    """Full, unordered snapshot of a user's bets as core records."""
    rows = db.query(models.Bet).filter(models.Bet.user_id == user_id).all()
    return [Bet.model_validate(r) for r in rows]


# -------- Capital movements --------
def list_capital_movements(db: Session, user_id: str) -> List[CapitalMovement]:
    """Every movement for the user, all sources, informational ones included."""
    rows = (
        db.query(models.CapitalMovement)
        .filter(models.CapitalMovement.user_id == user_id)
        .all()
    )
    return [CapitalMovement.model_validate(r) for r in rows]
