
from app.models.benefit import Benefit


class Entitlement:
    """Plan-tier gate shared by the catalog view and the redemption write path"""

    @staticmethod
    def can_access(plan_required: str, user_plan: str) -> bool:
        return plan_required == "basic" or user_plan == "vip"

    @staticmethod
    def can_redeem(benefit: Benefit, user_plan: str) -> bool:
        return Entitlement.can_access(benefit.plan_required, user_plan)
