
from sqlalchemy import Column, String, Text, Enum, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.mixins import TimestampMixin, UUIDMixin, as_utc, utcnow

RedemptionStatuses = ("pending", "completed", "expired", "cancelled")


class Redemption(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "redemptions"

    user_id = Column(String(64), nullable=False, index=True)
    benefit_id = Column(String(36), ForeignKey("benefits.id"), nullable=False, index=True)
    status = Column(Enum(*RedemptionStatuses, name="redemption_status"), default="pending", nullable=False, index=True)
    redemption_code = Column(String(64), unique=True, nullable=False)
    idempotency_key = Column(String(100), nullable=True)
    redeemed_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)
    expiry_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    benefit = relationship("Benefit")

    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_redemptions_user_idempotency"),
        Index("ix_redemptions_status_expiry", "status", "expiry_date"),
    )

    @property
    def is_overdue(self) -> bool:
        return self.expiry_date is not None and as_utc(self.expiry_date) < utcnow()

    @property
    def effective_status(self) -> str:
        if self.status == "pending" and self.is_overdue:
            return "expired"
        return self.status
