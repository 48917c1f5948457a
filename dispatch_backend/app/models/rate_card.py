"""
Rate Card database model.

A company-specific pricing rule. Only the per-article rate feeds pricing;
base rate and parcel type charges are stored for reference.
"""

from sqlalchemy import Column, Integer, Numeric, Date, DateTime, Boolean, ForeignKey, JSON, Index, text
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base


class RateCard(Base):
    """
    Rate Card model.

    Replacing a card deactivates the previous ones (history is kept).
    At most one card per company is active.
    """
    __tablename__ = "rate_cards"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)

    # Rates
    per_article_rate = Column(Numeric(10, 2), nullable=False)
    base_rate = Column(Numeric(10, 2), nullable=False, default=0)
    parcel_type_charges = Column(JSON, nullable=True)

    # Validity
    effective_from = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Unique constraint: only one active card per company
    __table_args__ = (
        Index('ix_rate_cards_active_company', 'company_id', unique=True,
              postgresql_where=text('is_active'),
              sqlite_where=text('is_active')),
    )

    def __repr__(self):
        return f"<RateCard(id={self.id}, company_id={self.company_id}, rate={self.per_article_rate}, active={self.is_active})>"
