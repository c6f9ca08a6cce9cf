from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal
from datetime import datetime
from app.schemas.benefit import UserPlan

AppRole = Literal["admin", "moderator", "user"]


class ProfileCreate(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    plan: UserPlan = "basic"
    phone: Optional[str] = Field(default=None, max_length=40)
    avatar_url: Optional[str] = Field(default=None, max_length=500)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=40)
    avatar_url: Optional[str] = Field(None, max_length=500)


class PlanUpdate(BaseModel):
    plan: UserPlan


class RoleUpdate(BaseModel):
    role: AppRole


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    name: str
    plan: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserWithRole(ProfileResponse):
    role: AppRole


class RoleResponse(BaseModel):
    user_id: str
    role: AppRole

    model_config = ConfigDict(from_attributes=True)


class DashboardStats(BaseModel):
    total_users: int
    total_benefits: int
    total_redemptions: int
    active_users: int = Field(..., description="Distinct users with at least one completed redemption")
