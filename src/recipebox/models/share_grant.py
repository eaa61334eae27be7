from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, relationship

from recipebox.db.base import Base
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.user import User


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ShareGrant(Base):
    __tablename__ = "share_grants"
    __table_args__ = (
        # At most one grant per grantee and resource. Re-sharing updates this row in place.
        UniqueConstraint("resource_kind", "resource_id", "grantee_id", name="uq_share_grants_resource_grantee"),
        Index("ix_share_grants_resource", "resource_kind", "resource_id"),
    )

    id = Column(Integer, primary_key=True)
    resource_kind: Mapped[ResourceKind] = Column(
        Enum(ResourceKind, create_constraint=True, length=32, native_enum=False, validate_strings=True),
        nullable=False,
    )
    resource_id = Column(Integer, nullable=False)
    grantee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    grantee: Mapped[User] = relationship("User", foreign_keys="ShareGrant.grantee_id")
    level: Mapped[PermissionLevel] = Column(
        Enum(PermissionLevel, create_constraint=True, length=32, native_enum=False, validate_strings=True),
        nullable=False,
    )
    granted_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    granted_by: Mapped[User] = relationship("User", foreign_keys="ShareGrant.granted_by_id")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
