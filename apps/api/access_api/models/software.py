from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import JSON, String, Text, DateTime, func
from .user import Base

READ = "Read"
WRITE = "Write"
ADMIN_ACCESS = "Admin"
ACCESS_LEVELS = (READ, WRITE, ADMIN_ACCESS)


class Software(Base):
    __tablename__ = "software"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text)
    # subset of ACCESS_LEVELS, never empty
    access_levels: Mapped[list[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    requests = relationship("AccessRequest", back_populates="software")
