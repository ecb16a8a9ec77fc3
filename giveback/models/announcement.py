import uuid

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from giveback.models.base import Base, TimestampMixin


class Announcement(Base, TimestampMixin):
    __tablename__ = "announcements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id"))
    type: Mapped[str] = mapped_column(String(20), default="DONATION")  # DONATION / REQUEST
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(50), default="Other")
    condition: Mapped[str | None] = mapped_column(
        Enum("LIKE_NEW", "GOOD", "WORN", "BROKEN", name="condition_enum")
    )
    status: Mapped[str] = mapped_column(
        Enum("AVAILABLE", "PENDING", "CLAIMED", "COMPLETED", name="status_enum"),
        default="AVAILABLE",
    )
    photos: Mapped[list[str]] = mapped_column(JSON, default=list)  # public URLs, first is the cover
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    location: Mapped[str | None] = mapped_column(String(300))
    price: Mapped[int] = mapped_column(Integer, default=0)

    user: Mapped["Profile"] = relationship(back_populates="announcements")  # noqa: F821
