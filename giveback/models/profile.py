import uuid

from sqlalchemy import Boolean, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from giveback.models.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username: Mapped[str | None] = mapped_column(String(100), unique=True)
    full_name: Mapped[str | None] = mapped_column(String(200))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    biography: Mapped[str | None] = mapped_column(Text)
    role: Mapped[str] = mapped_column(
        Enum("DONOR", "BENEFICIARY", "MANAGER", name="role_enum"), default="DONOR"
    )
    city: Mapped[str | None] = mapped_column(String(100))
    visibility: Mapped[bool] = mapped_column(Boolean, default=True)

    announcements: Mapped[list["Announcement"]] = relationship(back_populates="user")  # noqa: F821
