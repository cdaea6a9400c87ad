from sqlalchemy import (
    Column, String, DateTime, ForeignKey, Index, Boolean, Float, Table, Text
)
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from .db import Base


def _uuid() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_uuid)
    email = Column(String, unique=True, index=True, nullable=True)
    display_name = Column(String, nullable=True)
    initial_bankroll = Column(Float, nullable=True)   # null = never configured
    created_at = Column(DateTime, default=datetime.utcnow)

    bets = relationship("Bet", back_populates="user", cascade="all, delete-orphan")
    capital_movements = relationship("CapitalMovement", back_populates="user", cascade="all, delete-orphan")
    tags = relationship("Tag", back_populates="user", cascade="all, delete-orphan")


bet_tags = Table(
    "bet_tags",
    Base.metadata,
    Column("bet_id", String, ForeignKey("bets.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    color = Column(String, nullable=True)   # "#22c55e"

    user = relationship("User", back_populates="tags")


class Bet(Base):
    __tablename__ = "bets"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    sport = Column(String, index=True, nullable=False)
    league = Column(String, nullable=True)
    bet_type = Column(String, nullable=True)          # "single", "multiple", ...
    betting_market = Column(String, nullable=True)    # "1X2", "O2.5", ...
    bet_description = Column(Text, nullable=False, default="")
    match_description = Column(Text, nullable=True)

    odds = Column(Float, nullable=False)
    stake_amount = Column(Float, nullable=False)
    potential_return = Column(Float, nullable=False)  # stake * odds at placement

    status = Column(String, nullable=False, default="pending", index=True)  # pending|won|lost|void|cashout|half_won|half_lost
    bet_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    match_date = Column(DateTime, nullable=True)

    cashout_amount = Column(Float, nullable=True)
    cashout_date = Column(DateTime, nullable=True)

    raw_input = Column(Text, nullable=True)           # original chat message, when ingested
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="bets")
    tags = relationship("Tag", secondary=bet_tags, lazy="selectin")

    __table_args__ = (Index("ix_bets_user_date", "user_id", "bet_date"),)


class CapitalMovement(Base):
    __tablename__ = "capital_movements"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    type = Column(String, nullable=False)              # deposit|withdrawal
    amount = Column(Float, nullable=False)             # positive; sign comes from type
    movement_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    description = Column(String, nullable=True)
    source = Column(String, nullable=False, default="manual")  # manual|bankroll_edit
    affects_balance = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="capital_movements")

    __table_args__ = (Index("ix_capmov_user_date", "user_id", "movement_date"),)
