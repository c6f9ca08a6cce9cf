
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.benefit import UserPlan
from app.schemas.user import (
    ProfileCreate, ProfileUpdate, ProfileResponse, PlanUpdate, RoleUpdate, RoleResponse, UserWithRole,
    DashboardStats
)
from app.services.dashboard_service import DashboardService
from app.services.user_service import UserService

router = APIRouter(prefix="", tags=["users"])


@router.post("/profiles", response_model=UserWithRole, status_code=201)
def create_profile(profile: ProfileCreate, db: Session = Depends(get_db)):
    created = UserService.create_profile(db, profile)
    return UserWithRole(**ProfileResponse.model_validate(created).model_dump(), role=UserService.get_role(db, created.user_id))


@router.get("/profiles/{user_id}", response_model=UserWithRole)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    p = UserService.require_profile(db, user_id)
    return UserWithRole(**ProfileResponse.model_validate(p).model_dump(), role=UserService.get_role(db, user_id))


@router.patch("/profiles/{user_id}", response_model=ProfileResponse)
def update_profile(user_id: str, payload: ProfileUpdate, db: Session = Depends(get_db)):
    return UserService.update_profile(db, user_id, payload)


@router.get("/admin/users", response_model=List[UserWithRole])
def list_users(search: Optional[str] = None, plan: Optional[UserPlan] = None, db: Session = Depends(get_db)):
    return [
        UserWithRole(**ProfileResponse.model_validate(p).model_dump(), role=role)
        for p, role in UserService.list_users(db, search, plan)
    ]


@router.put("/admin/users/{user_id}/plan", response_model=ProfileResponse)
def update_user_plan(user_id: str, payload: PlanUpdate, db: Session = Depends(get_db)):
    return UserService.update_plan(db, user_id, payload.plan)


@router.put("/admin/users/{user_id}/role", response_model=RoleResponse)
def update_user_role(user_id: str, payload: RoleUpdate, db: Session = Depends(get_db)):
    return UserService.update_role(db, user_id, payload.role)


@router.get("/admin/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db)):
    return DashboardService.get_stats(db)
