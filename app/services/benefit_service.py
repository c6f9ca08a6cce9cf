
import logging
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from fastapi import HTTPException
from app.models.benefit import Benefit
from app.models.mixins import utcnow
from app.models.redemption import Redemption
from app.schemas.benefit import BenefitCreate, BenefitUpdate
from app.services.entitlement import Entitlement

logger = logging.getLogger(__name__)

# Columns an update may not clear by sending null
REQUIRED_FIELDS = {"title", "description", "category", "plan_required", "is_active"}


class BenefitService:
    """Service class for CRUD operations on benefits"""

    @staticmethod
    def create_benefit(db: Session, benefit_data: BenefitCreate) -> Benefit:
        db_benefit = Benefit(**benefit_data.model_dump())
        db.add(db_benefit)
        db.commit()
        db.refresh(db_benefit)
        logger.info("Created benefit %s (%s)", db_benefit.id, db_benefit.title)
        return db_benefit

    @staticmethod
    def get_benefit(db: Session, benefit_id: str) -> Optional[Benefit]:
        return db.query(Benefit).filter(Benefit.id == benefit_id).first()

    @staticmethod
    def get_benefits(
        db: Session,
        is_active: Optional[bool] = None,
        category: Optional[str] = None,
        plan_required: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Benefit]:
        limit = min(max(limit, 1), 500)
        q = db.query(Benefit)
        if is_active is not None:
            q = q.filter(Benefit.is_active == is_active)
        if category is not None:
            q = q.filter(Benefit.category == category)
        if plan_required is not None:
            q = q.filter(Benefit.plan_required == plan_required)
        return q.order_by(Benefit.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def update_benefit(db: Session, benefit_id: str, benefit_data: BenefitUpdate) -> Optional[Benefit]:
        db_benefit = BenefitService.get_benefit(db, benefit_id)
        if not db_benefit:
            return None

        for field, value in benefit_data.model_dump(exclude_unset=True).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(db_benefit, field, value)

        db.commit()
        db.refresh(db_benefit)
        logger.info("Updated benefit %s", benefit_id)
        return db_benefit

    @staticmethod
    def delete_benefit(db: Session, benefit_id: str) -> bool:
        db_benefit = BenefitService.get_benefit(db, benefit_id)
        if not db_benefit:
            return False

        referenced = db.query(func.count(Redemption.id)).filter(Redemption.benefit_id == benefit_id).scalar()
        if referenced:
            logger.warning("Refusing to delete benefit %s with %d redemptions", benefit_id, referenced)
            raise HTTPException(
                status_code=409,
                detail=f"Benefit has {referenced} redemption(s); deactivate it instead of deleting",
            )

        db.delete(db_benefit)
        db.commit()
        logger.info("Deleted benefit %s", benefit_id)
        return True

    @staticmethod
    def get_catalog(
        db: Session, user_plan: str, category: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[Tuple[Benefit, bool]]:
        """Active benefits still within their validity window, paged like the admin list."""
        limit = min(max(limit, 1), 500)
        q = db.query(Benefit).filter(
            Benefit.is_active == True,
            or_(Benefit.valid_until.is_(None), Benefit.valid_until > utcnow()),
        )
        if category is not None:
            q = q.filter(Benefit.category == category)
        benefits = q.order_by(Benefit.created_at.desc()).offset(skip).limit(limit).all()
        return [(b, Entitlement.can_access(b.plan_required, user_plan)) for b in benefits]
