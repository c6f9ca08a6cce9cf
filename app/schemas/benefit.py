from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Literal
from datetime import datetime

BenefitCategory = Literal[
    "gastronomia", "viagem", "entretenimento", "compras",
    "beleza", "tecnologia", "esportes", "educacao",
]
UserPlan = Literal["basic", "vip"]


# Request schemas
class BenefitCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: BenefitCategory
    plan_required: UserPlan = "basic"
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    original_price: Optional[float] = Field(default=None, ge=0)
    partner_name: Optional[str] = Field(default=None, max_length=200)
    link: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    terms_conditions: Optional[str] = None
    is_active: bool = True
    valid_until: Optional[datetime] = None


class BenefitUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[BenefitCategory] = None
    plan_required: Optional[UserPlan] = None
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    original_price: Optional[float] = Field(default=None, ge=0)
    partner_name: Optional[str] = Field(default=None, max_length=200)
    link: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    terms_conditions: Optional[str] = None
    is_active: Optional[bool] = None
    valid_until: Optional[datetime] = None


# Response schemas
class BenefitResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    plan_required: str
    discount_percentage: Optional[float] = None
    original_price: Optional[float] = None
    partner_name: Optional[str] = None
    link: Optional[str] = None
    image_url: Optional[str] = None
    terms_conditions: Optional[str] = None
    is_active: bool
    valid_until: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CatalogBenefit(BenefitResponse):
    """A benefit as shown to one member, flagged with whether their plan covers it."""
    can_access: bool


class BenefitSummary(BaseModel):
    title: str
    description: str
    category: str
    partner_name: Optional[str] = None
    discount_percentage: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class CatalogResponse(BaseModel):
    plan: UserPlan
    benefits: List[CatalogBenefit]
