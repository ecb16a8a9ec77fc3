from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel

from giveback.config import settings
from giveback.schemas.listing import Category, Condition, SearchResult
from giveback.services.pagination import page_range


class SortMode(StrEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RELEVANCE = "relevance"


class ViewMode(StrEnum):
    GRID = "grid"
    LIST = "list"


@dataclass(frozen=True)
class PriceRange:
    low: int = 0
    high: int = settings.default_price_max

    def __post_init__(self):
        if self.low < 0 or self.high < 0:
            raise ValueError("price bounds must be non-negative")
        if self.low > self.high:
            raise ValueError(f"price range is inverted: {self.low} > {self.high}")


@dataclass(frozen=True)
class QueryState:
    query: str = ""
    page: int = 1
    categories: frozenset[Category] = frozenset()
    conditions: frozenset[Condition] = frozenset()
    price_range: PriceRange = field(default_factory=PriceRange)
    sort: SortMode = SortMode.NEWEST


@dataclass(frozen=True)
class ResultPage:
    items: tuple[SearchResult, ...] = ()
    total: int = 0

    def __len__(self) -> int:
        return len(self.items)


class SearchRequest(BaseModel):
    """What goes over the wire to the listing store."""

    query: str
    range_start: int
    range_end: int
    categories: list[Category] = []
    conditions: list[Condition] = []
    min_price: int | None = None
    max_price: int | None = None
    sort: SortMode = SortMode.NEWEST

    @property
    def limit(self) -> int:
        return self.range_end - self.range_start + 1

    @classmethod
    def from_state(cls, state: QueryState, page_size: int = settings.page_size) -> "SearchRequest":
        start, end = page_range(state.page, page_size)
        return cls(
            query=state.query,
            range_start=start,
            range_end=end,
            categories=sorted(state.categories),
            conditions=sorted(state.conditions),
            min_price=state.price_range.low,
            max_price=state.price_range.high,
            sort=state.sort,
        )
