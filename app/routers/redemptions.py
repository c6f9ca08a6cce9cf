
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.redemption import (
    RedeemRequest, StatusUpdate, RedemptionResponse, RedemptionStatus, UserRedemption, AdminRedemption,
    RedemptionSummary
)
from app.services.redemption_service import RedemptionService
from app.services.user_service import UserService

router = APIRouter(prefix="", tags=["redemptions"])


@router.post("/users/{user_id}/redemptions", response_model=RedemptionResponse, status_code=201)
def redeem_benefit(user_id: str, payload: RedeemRequest, response: Response, db: Session = Depends(get_db)):
    redemption, created = RedemptionService.redeem(db, user_id, payload.benefit_id, payload.idempotency_key)
    if not created:
        response.status_code = 200
    return redemption


@router.get("/users/{user_id}/redemptions", response_model=List[UserRedemption])
def user_redemptions(user_id: str, status: Optional[RedemptionStatus] = None, db: Session = Depends(get_db)):
    UserService.require_profile(db, user_id)
    return RedemptionService.list_user_redemptions(db, user_id, status)


@router.get("/users/{user_id}/redemptions/summary", response_model=RedemptionSummary)
def user_redemption_summary(user_id: str, db: Session = Depends(get_db)):
    UserService.require_profile(db, user_id)
    return RedemptionService.user_summary(db, user_id)


@router.get("/redemptions", response_model=List[AdminRedemption])
def list_redemptions(
    status: Optional[RedemptionStatus] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = RedemptionService.list_redemptions(db, status, search, skip, limit)
    return [
        AdminRedemption(
            **RedemptionResponse.model_validate(r).model_dump(),
            user_name=user_name,
            benefit_title=benefit_title,
        )
        for r, user_name, benefit_title in rows
    ]


@router.patch("/redemptions/{redemption_id}/status", response_model=RedemptionResponse)
def update_redemption_status(redemption_id: str, payload: StatusUpdate, db: Session = Depends(get_db)):
    updated = RedemptionService.update_status(db, redemption_id, payload.status, payload.notes)
    if not updated:
        raise HTTPException(status_code=404, detail="Redemption not found")
    return updated
