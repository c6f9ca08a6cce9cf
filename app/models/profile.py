
from sqlalchemy import Column, String, Enum
from app.database import Base
from app.models.benefit import UserPlanType
from app.models.mixins import TimestampMixin, UUIDMixin

AppRoles = ("admin", "moderator", "user")
DEFAULT_ROLE = "user"


class Profile(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "profiles"

    # identity issued by the external auth provider
    user_id = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    plan = Column(UserPlanType, default="basic", nullable=False)
    phone = Column(String(40), nullable=True)
    avatar_url = Column(String(500), nullable=True)


class UserRole(UUIDMixin, Base):
    __tablename__ = "user_roles"

    user_id = Column(String(64), unique=True, nullable=False, index=True)
    role = Column(Enum(*AppRoles, name="app_role"), default=DEFAULT_ROLE, nullable=False)
