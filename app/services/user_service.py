
import logging
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from fastapi import HTTPException
from app.models.profile import Profile, UserRole, DEFAULT_ROLE
from app.schemas.user import ProfileCreate, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Profiles, plan tiers and role assignments"""

    @staticmethod
    def create_profile(db: Session, profile_data: ProfileCreate) -> Profile:
        db_profile = Profile(**profile_data.model_dump())
        db.add(db_profile)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=409, detail="Profile already exists for this user")
        db.refresh(db_profile)
        logger.info("Created profile for user %s", db_profile.user_id)
        return db_profile

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    @staticmethod
    def require_profile(db: Session, user_id: str) -> Profile:
        profile = UserService.get_profile(db, user_id)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    @staticmethod
    def get_role(db: Session, user_id: str) -> str:
        role = db.query(UserRole.role).filter(UserRole.user_id == user_id).scalar()
        return role or DEFAULT_ROLE

    @staticmethod
    def update_profile(db: Session, user_id: str, profile_data: ProfileUpdate) -> Profile:
        profile = UserService.require_profile(db, user_id)
        for field, value in profile_data.model_dump(exclude_unset=True).items():
            if field == "name" and value is None:
                continue
            setattr(profile, field, value)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def list_users(db: Session, search: Optional[str] = None, plan: Optional[str] = None) -> List[Tuple[Profile, str]]:
        role = func.coalesce(UserRole.role, DEFAULT_ROLE)
        q = db.query(Profile, role).outerjoin(UserRole, UserRole.user_id == Profile.user_id)
        if search:
            q = q.filter(Profile.name.icontains(search, autoescape=True))
        if plan is not None:
            q = q.filter(Profile.plan == plan)
        return q.order_by(Profile.created_at.desc()).all()

    @staticmethod
    def update_plan(db: Session, user_id: str, plan: str) -> Profile:
        profile = UserService.require_profile(db, user_id)
        profile.plan = plan
        db.commit()
        db.refresh(profile)
        logger.info("User %s moved to plan %s", user_id, plan)
        return profile

    @staticmethod
    def update_role(db: Session, user_id: str, role: str) -> UserRole:
        UserService.require_profile(db, user_id)

        # One row per user: update in place or insert, committed as a single unit
        db_role = db.query(UserRole).filter(UserRole.user_id == user_id).first()
        if db_role:
            db_role.role = role
        else:
            db_role = UserRole(user_id=user_id, role=role)
            db.add(db_role)
        try:
            db.commit()
        except IntegrityError:
            # another request inserted the row first
            db.rollback()
            db_role = db.query(UserRole).filter(UserRole.user_id == user_id).one()
            db_role.role = role
            db.commit()
        db.refresh(db_role)
        logger.info("User %s assigned role %s", user_id, role)
        return db_role
