from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, Index, func, text
from .user import Base

PENDING = "Pending"
APPROVED = "Approved"
REJECTED = "Rejected"


class AccessRequest(Base):
    __tablename__ = "requests"
    __table_args__ = (
        # At most one Pending request per (user, software, access type).
        Index(
            "uq_requests_pending_tuple",
            "user_id",
            "software_id",
            "access_type",
            unique=True,
            postgresql_where=text("status = 'Pending'"),
            sqlite_where=text("status = 'Pending'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    software_id: Mapped[int] = mapped_column(Integer, ForeignKey("software.id"), index=True)

    access_type: Mapped[str] = mapped_column(String(16))
    reason: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), default=PENDING, index=True)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    # Review fields stay null until the single Pending -> Approved/Rejected transition.
    updated_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    review_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    user = relationship("User", back_populates="requests", foreign_keys=[user_id])
    software = relationship("Software", back_populates="requests")
