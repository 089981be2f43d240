"""Professional Role ORM — creative profession catalog and per-user assignments.

Invariants:
    - ProfessionalRole.key unique; ids are stable strings (prof_<key>_001)
    - UserProfessionalRole unique per (user, role)
    - At most one assignment per user has is_primary=True (enforced by service)
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from cresp.db.base import Base, utc_now


class ProfessionalRole(Base):
    __tablename__ = "professional_roles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    key: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(20), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )


class UserProfessionalRole(Base):
    __tablename__ = "user_professional_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "professional_role_id", name="uq_user_professional_role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    professional_role_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("professional_roles.id", ondelete="CASCADE"), nullable=False,
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    years_experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )

    professional_role: Mapped["ProfessionalRole"] = relationship(
        "ProfessionalRole", lazy="selectin",
    )
