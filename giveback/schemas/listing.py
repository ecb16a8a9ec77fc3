from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(StrEnum):
    FURNITURE = "Furniture"
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    KITCHEN = "Kitchen"
    SPORTS = "Sports"
    TOYS = "Toys"
    TOOLS = "Tools"
    OTHER = "Other"


class Condition(StrEnum):
    LIKE_NEW = "LIKE_NEW"
    GOOD = "GOOD"
    WORN = "WORN"
    BROKEN = "BROKEN"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class ListingStatus(StrEnum):
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    CLAIMED = "CLAIMED"
    COMPLETED = "COMPLETED"


class ListingType(StrEnum):
    DONATION = "DONATION"
    REQUEST = "REQUEST"


class ListerSummary(BaseModel):
    full_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class SearchResult(BaseModel):
    """One row of a search page, joined with the lister's public profile."""

    id: str
    title: str
    description: str | None = None
    photos: tuple[str, ...] = ()
    category: Category = Category.OTHER
    condition: Condition | None = None
    tags: frozenset[str] = frozenset()
    created_at: datetime
    location: str | None = None
    price: int = 0
    user: ListerSummary = Field(default_factory=ListerSummary)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("photos", "tags", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return () if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def _uncategorized(cls, v):
        return Category.OTHER if not v else v

    @field_validator("user", mode="before")
    @classmethod
    def _missing_lister(cls, v):
        return ListerSummary() if v is None else v

    @property
    def cover_photo(self) -> str | None:
        return self.photos[0] if self.photos else None


class ListingCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    type: ListingType = ListingType.DONATION
    category: Category = Category.OTHER
    condition: Condition = Condition.GOOD
    status: ListingStatus = ListingStatus.AVAILABLE
    photos: list[str] = []
    tags: list[str] = []
    location: str | None = None
    price: int = Field(default=0, ge=0)
    user_id: str | None = None
