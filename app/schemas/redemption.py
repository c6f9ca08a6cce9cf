from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal
from datetime import datetime
from app.schemas.benefit import BenefitSummary

RedemptionStatus = Literal["pending", "completed", "expired", "cancelled"]


class RedeemRequest(BaseModel):
    benefit_id: str
    # Retrying with the same key returns the first redemption instead of a new one
    idempotency_key: Optional[str] = Field(default=None, min_length=1, max_length=100)


class StatusUpdate(BaseModel):
    status: Literal["completed", "cancelled", "expired"]
    notes: Optional[str] = None


class RedemptionResponse(BaseModel):
    id: str
    user_id: str
    benefit_id: str
    status: str
    effective_status: str
    redemption_code: str
    redeemed_at: datetime
    used_at: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserRedemption(RedemptionResponse):
    benefit: Optional[BenefitSummary] = None


class AdminRedemption(RedemptionResponse):
    user_name: str
    benefit_title: str


class RedemptionSummary(BaseModel):
    active: int
    used: int
    expired: int
