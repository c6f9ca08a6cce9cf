
from sqlalchemy import func, distinct
from sqlalchemy.orm import Session
from app.models.benefit import Benefit
from app.models.profile import Profile
from app.models.redemption import Redemption


class DashboardService:
    """Read-only counts for the admin dashboard, recomputed on every call"""

    @staticmethod
    def get_stats(db: Session) -> dict:
        return {
            "total_users": db.query(func.count(Profile.id)).scalar() or 0,
            "total_benefits": db.query(func.count(Benefit.id)).scalar() or 0,
            "total_redemptions": db.query(func.count(Redemption.id)).scalar() or 0,
            "active_users": db.query(func.count(distinct(Redemption.user_id)))
            .filter(Redemption.status == "completed")
            .scalar() or 0,
        }
