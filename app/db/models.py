from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    responses: Mapped[List["ESGResponseRow"]] = relationship(back_populates="user")


class ESGResponseRow(Base):
    """One questionnaire per user per fiscal year"""
    __tablename__ = "esg_responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    fiscal_year: Mapped[str] = mapped_column(String(32))

    total_electricity_kwh: Mapped[Optional[float]] = mapped_column(Float)
    renewable_electricity_kwh: Mapped[Optional[float]] = mapped_column(Float)
    total_fuel_liters: Mapped[Optional[float]] = mapped_column(Float)
    carbon_emissions_tco2e: Mapped[Optional[float]] = mapped_column(Float)
    total_employees: Mapped[Optional[int]] = mapped_column(Integer)
    female_employees: Mapped[Optional[int]] = mapped_column(Integer)
    avg_training_hours: Mapped[Optional[float]] = mapped_column(Float)
    community_investment_inr: Mapped[Optional[float]] = mapped_column(Float)
    independent_board_pct: Mapped[Optional[float]] = mapped_column(Float)
    has_data_privacy_policy: Mapped[Optional[bool]] = mapped_column(Boolean)
    total_revenue_inr: Mapped[Optional[float]] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user: Mapped["UserRow"] = relationship(back_populates="responses")

    __table_args__ = (
        UniqueConstraint("user_id", "fiscal_year", name="uq_esg_responses_user_year"),
    )
