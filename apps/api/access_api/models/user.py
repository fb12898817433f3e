from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, func

EMPLOYEE = "Employee"
MANAGER = "Manager"
ADMIN = "Admin"
ROLES = (EMPLOYEE, MANAGER, ADMIN)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(32), default=EMPLOYEE)  # Employee/Manager/Admin

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    requests = relationship(
        "AccessRequest",
        back_populates="user",
        foreign_keys="AccessRequest.user_id",
    )
