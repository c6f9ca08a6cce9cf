
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.benefit import (
    BenefitCreate, BenefitUpdate, BenefitResponse, BenefitCategory, UserPlan, CatalogBenefit, CatalogResponse
)
from app.services.benefit_service import BenefitService
from app.services.user_service import UserService

router = APIRouter(prefix="", tags=["benefits"])


@router.post("/benefits", response_model=BenefitResponse, status_code=201)
def create_benefit(benefit: BenefitCreate, db: Session = Depends(get_db)):
    return BenefitService.create_benefit(db, benefit)


@router.get("/benefits", response_model=List[BenefitResponse])
def list_benefits(
    is_active: Optional[bool] = None,
    category: Optional[BenefitCategory] = None,
    plan_required: Optional[UserPlan] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return BenefitService.get_benefits(db, is_active, category, plan_required, skip, limit)


@router.get("/benefits/{benefit_id}", response_model=BenefitResponse)
def get_benefit(benefit_id: str, db: Session = Depends(get_db)):
    b = BenefitService.get_benefit(db, benefit_id)
    if not b:
        raise HTTPException(status_code=404, detail="Benefit not found")
    return b


@router.put("/benefits/{benefit_id}", response_model=BenefitResponse)
def update_benefit(benefit_id: str, payload: BenefitUpdate, db: Session = Depends(get_db)):
    updated = BenefitService.update_benefit(db, benefit_id, payload)
    if not updated:
        raise HTTPException(status_code=404, detail="Benefit not found")
    return updated


@router.delete("/benefits/{benefit_id}", status_code=204)
def delete_benefit(benefit_id: str, db: Session = Depends(get_db)):
    ok = BenefitService.delete_benefit(db, benefit_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Benefit not found")
    return


@router.get("/users/{user_id}/benefits", response_model=CatalogResponse)
def member_catalog(
    user_id: str,
    category: Optional[BenefitCategory] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    profile = UserService.require_profile(db, user_id)
    catalog = [
        CatalogBenefit(**BenefitResponse.model_validate(b).model_dump(), can_access=allowed)
        for b, allowed in BenefitService.get_catalog(db, profile.plan, category, skip, limit)
    ]
    return CatalogResponse(plan=profile.plan, benefits=catalog)
