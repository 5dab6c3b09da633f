# nomina/database/database.py
"""
SQLAlchemy database setup and models.

Only payroll inputs are stored (periods, shifts, manual hour edits and
adjustments). Hours and payments are recomputed from them on every read.
"""

import os
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Time,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from nomina.core.config import TIME_FORMAT_HM
from nomina.core.constants import AdjustmentKind
from nomina.core.models import Adjustment, ComputedDay, OverriddenDay, PayPeriod, ShiftInput

DATABASE_URL = os.getenv("NOMINA_DATABASE_URL", "sqlite:///./nomina.db")

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PeriodRecord(Base):
    """One pay period (normally a quincena) of one employee."""

    __tablename__ = "pay_periods"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(64), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    base_salary = Column(Float, nullable=False)
    transport_enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    shifts = relationship(
        "ShiftRecord", back_populates="period", cascade="all, delete-orphan", order_by="ShiftRecord.date"
    )
    adjustments = relationship(
        "AdjustmentRecord", back_populates="period", cascade="all, delete-orphan", order_by="AdjustmentRecord.id"
    )

    def __repr__(self):
        return f"<PeriodRecord(id={self.id}, employee_id={self.employee_id}, {self.start_date} - {self.end_date})>"


class ShiftRecord(Base):
    """A shift as entered. hours_override holds manually edited hours keyed by category code."""

    __tablename__ = "shifts"
    __table_args__ = (UniqueConstraint("period_id", "date", name="uq_shift_period_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    period_id = Column(Integer, ForeignKey("pay_periods.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    ends_next_day = Column(Boolean, default=False, nullable=False)
    include_break = Column(Boolean, default=False, nullable=False)
    break_start = Column(Time, nullable=True)
    break_end = Column(Time, nullable=True)
    hours_override = Column(JSON, nullable=True)  # {"ORD": 8, "HED": 1.5} or NULL
    created_at = Column(DateTime, default=_utcnow)

    period = relationship("PeriodRecord", back_populates="shifts")

    def __repr__(self):
        return f"<ShiftRecord(id={self.id}, period_id={self.period_id}, date={self.date})>"


class AdjustmentRecord(Base):
    """Manual income or deduction for a whole period."""

    __tablename__ = "adjustments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    period_id = Column(Integer, ForeignKey("pay_periods.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(SQLEnum(AdjustmentKind), nullable=False)
    uid = Column(String(32), unique=True, nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=_utcnow)

    period = relationship("PeriodRecord", back_populates="adjustments")

    def __repr__(self):
        return f"<AdjustmentRecord(id={self.id}, kind={self.kind}, amount={self.amount})>"


# ============ Record -> engine input ============


def _format_time(value) -> str | None:
    return value.strftime(TIME_FORMAT_HM) if value is not None else None


def to_pay_period(record: PeriodRecord) -> PayPeriod:
    return PayPeriod(start=record.start_date, end=record.end_date)


def to_shift_input(record: ShiftRecord) -> ShiftInput:
    """Convert a stored shift into the engine's ShiftInput."""
    return ShiftInput(
        date=record.date,
        start_time=_format_time(record.start_time),
        end_time=_format_time(record.end_time),
        ends_next_day=bool(record.ends_next_day),
        include_break=bool(record.include_break),
        break_start=_format_time(record.break_start),
        break_end=_format_time(record.break_end),
    )


def to_day_entry(record: ShiftRecord) -> ComputedDay | OverriddenDay:
    """Computed entry, or overridden entry when the stored shift has edited hours."""
    shift = to_shift_input(record)
    if record.hours_override is None:
        return ComputedDay(shift=shift)
    return OverriddenDay(shift=shift, hours=record.hours_override)


def to_adjustment(record: AdjustmentRecord) -> Adjustment:
    return Adjustment(id=record.uid, amount=record.amount, description=record.description)


def create_tables():
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
