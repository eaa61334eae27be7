from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, relationship

from recipebox.db.base import Base
from recipebox.models.enums.permission_level import PermissionLevel
from recipebox.models.enums.resource_kind import ResourceKind
from recipebox.models.share_grant import utc_now
from recipebox.models.user import User


class ShareLink(Base):
    __tablename__ = "share_links"
    __table_args__ = (Index("ix_share_links_resource", "resource_kind", "resource_id"),)

    id = Column(Integer, primary_key=True)
    token = Column(String, unique=True, index=True, nullable=False)
    resource_kind: Mapped[ResourceKind] = Column(
        Enum(ResourceKind, create_constraint=True, length=32, native_enum=False, validate_strings=True),
        nullable=False,
    )
    resource_id = Column(Integer, nullable=False)
    level: Mapped[PermissionLevel] = Column(
        Enum(PermissionLevel, create_constraint=True, length=32, native_enum=False, validate_strings=True),
        nullable=False,
    )
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_by: Mapped[User] = relationship("User", foreign_keys="ShareLink.created_by_id")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    expires_at = Column(DateTime(timezone=True), nullable=True)
