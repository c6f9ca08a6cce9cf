
from sqlalchemy import Column, String, Text, Enum, Boolean, Numeric, DateTime, Index
from app.database import Base
from app.models.mixins import TimestampMixin, UUIDMixin

BenefitCategories = (
    "gastronomia", "viagem", "entretenimento", "compras",
    "beleza", "tecnologia", "esportes", "educacao",
)
UserPlans = ("basic", "vip")
UserPlanType = Enum(*UserPlans, name="user_plan")


class Benefit(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "benefits"

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Enum(*BenefitCategories, name="benefit_category"), nullable=False, index=True)
    plan_required = Column(UserPlanType, default="basic", nullable=False)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    original_price = Column(Numeric(10, 2), nullable=True)
    partner_name = Column(String(200), nullable=True)
    link = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)
    terms_conditions = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    valid_until = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_benefits_active_category", "is_active", "category"),
    )
