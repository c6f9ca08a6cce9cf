
import logging
import uuid
from datetime import datetime, timedelta
from sqlalchemy import and_, or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Tuple
from fastapi import HTTPException
from app.config import REDEMPTION_CODE_PREFIX, REDEMPTION_VALIDITY_DAYS
from app.models.benefit import Benefit
from app.models.mixins import as_utc, utcnow
from app.models.profile import Profile
from app.models.redemption import Redemption
from app.services.entitlement import Entitlement
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown user"
UNKNOWN_BENEFIT = "Unknown benefit"

# Admin transitions: only pending redemptions can move, and only forward
ALLOWED_TRANSITIONS = {
    "pending": {"completed", "cancelled", "expired"},
    "completed": set(),
    "cancelled": set(),
    "expired": set(),
}


def generate_redemption_code() -> str:
    return f"{REDEMPTION_CODE_PREFIX}-{uuid.uuid4().hex[:12].upper()}"


def effective_status_clause(status: str, now: datetime):
    """SQL filter matching rows whose effective status equals ``status``.

    A pending redemption past its expiry date counts as expired, never as pending.
    """
    overdue = and_(
        Redemption.status == "pending",
        Redemption.expiry_date.is_not(None),
        Redemption.expiry_date < now,
    )
    if status == "expired":
        return or_(Redemption.status == "expired", overdue)
    if status == "pending":
        return and_(
            Redemption.status == "pending",
            or_(Redemption.expiry_date.is_(None), Redemption.expiry_date >= now),
        )
    return Redemption.status == status


class RedemptionService:
    """Redemption ledger and its status lifecycle"""

    @staticmethod
    def get_redemption(db: Session, redemption_id: str) -> Optional[Redemption]:
        return db.query(Redemption).filter(Redemption.id == redemption_id).first()

    @staticmethod
    def _find_by_key(db: Session, user_id: str, idempotency_key: str) -> Optional[Redemption]:
        return (
            db.query(Redemption)
            .filter(Redemption.user_id == user_id, Redemption.idempotency_key == idempotency_key)
            .first()
        )

    @staticmethod
    def _replay(existing: Redemption, benefit_id: str) -> Redemption:
        if existing.benefit_id != benefit_id:
            raise HTTPException(
                status_code=409,
                detail="Idempotency key was already used for a different benefit",
            )
        return existing

    @staticmethod
    def redeem(
        db: Session, user_id: str, benefit_id: str, idempotency_key: Optional[str] = None
    ) -> Tuple[Redemption, bool]:
        """Create a pending redemption; returns the row and whether it was newly created."""
        profile = UserService.require_profile(db, user_id)

        if idempotency_key:
            existing = RedemptionService._find_by_key(db, user_id, idempotency_key)
            if existing:
                return RedemptionService._replay(existing, benefit_id), False

        benefit = db.query(Benefit).filter(Benefit.id == benefit_id).first()
        if not benefit:
            raise HTTPException(status_code=404, detail="Benefit not found")
        RedemptionService.ensure_redeemable(benefit, profile.plan)

        now = utcnow()
        redemption = Redemption(
            user_id=user_id,
            benefit_id=benefit.id,
            status="pending",
            redemption_code=generate_redemption_code(),
            idempotency_key=idempotency_key,
            redeemed_at=now,
            expiry_date=now + timedelta(days=REDEMPTION_VALIDITY_DAYS),
        )
        db.add(redemption)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if idempotency_key:
                existing = RedemptionService._find_by_key(db, user_id, idempotency_key)
                if existing:
                    return RedemptionService._replay(existing, benefit_id), False
            logger.warning("Redemption insert conflicted for user %s, benefit %s", user_id, benefit_id)
            raise HTTPException(status_code=409, detail="Redemption conflicts with an existing record, retry")
        db.refresh(redemption)
        logger.info("User %s redeemed benefit %s as %s", user_id, benefit.id, redemption.redemption_code)
        return redemption, True

    @staticmethod
    def ensure_redeemable(benefit: Benefit, user_plan: str) -> None:
        if not benefit.is_active:
            raise HTTPException(status_code=400, detail="Benefit is inactive")
        if benefit.valid_until is not None and as_utc(benefit.valid_until) <= utcnow():
            raise HTTPException(status_code=400, detail="Benefit is no longer valid")
        if not Entitlement.can_redeem(benefit, user_plan):
            raise HTTPException(status_code=403, detail="This benefit requires the VIP plan")

    @staticmethod
    def update_status(db: Session, redemption_id: str, status: str, notes: Optional[str] = None) -> Optional[Redemption]:
        redemption = RedemptionService.get_redemption(db, redemption_id)
        if not redemption:
            return None

        if status not in ALLOWED_TRANSITIONS[redemption.status]:
            raise HTTPException(
                status_code=409,
                detail=f"Cannot change a {redemption.status} redemption to {status}",
            )
        if status == "completed" and redemption.is_overdue:
            raise HTTPException(status_code=400, detail="Redemption is expired")

        redemption.status = status
        if status == "completed":
            redemption.used_at = utcnow()
        if notes is not None:
            redemption.notes = notes

        db.commit()
        db.refresh(redemption)
        logger.info("Redemption %s marked %s", redemption_id, status)
        return redemption

    @staticmethod
    def list_redemptions(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Tuple[Redemption, str, str]]:
        limit = min(max(limit, 1), 500)
        user_name = func.coalesce(Profile.name, UNKNOWN_USER)
        benefit_title = func.coalesce(Benefit.title, UNKNOWN_BENEFIT)

        q = (
            db.query(Redemption, user_name, benefit_title)
            .outerjoin(Profile, Profile.user_id == Redemption.user_id)
            .outerjoin(Benefit, Benefit.id == Redemption.benefit_id)
        )
        if status is not None:
            q = q.filter(effective_status_clause(status, utcnow()))
        if search:
            q = q.filter(or_(
                user_name.icontains(search, autoescape=True),
                benefit_title.icontains(search, autoescape=True),
                Redemption.redemption_code.icontains(search, autoescape=True),
            ))
        return q.order_by(Redemption.redeemed_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def list_user_redemptions(db: Session, user_id: str, status: Optional[str] = None) -> List[Redemption]:
        q = (
            db.query(Redemption)
            .options(joinedload(Redemption.benefit))
            .filter(Redemption.user_id == user_id)
        )
        if status is not None:
            q = q.filter(effective_status_clause(status, utcnow()))
        return q.order_by(Redemption.redeemed_at.desc()).all()

    @staticmethod
    def user_summary(db: Session, user_id: str) -> dict:
        statuses = [r.effective_status for r in db.query(Redemption).filter(Redemption.user_id == user_id)]
        return {
            "active": statuses.count("pending"),
            "used": statuses.count("completed"),
            "expired": statuses.count("expired"),
        }
