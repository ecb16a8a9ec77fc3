import math
from dataclasses import dataclass

PAGE_SIZE = 12


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages for ``total`` results. Never less than 1."""
    return max(1, math.ceil(total / page_size))


def page_range(page: int, page_size: int = PAGE_SIZE) -> tuple[int, int]:
    """Inclusive zero-based row range for a 1-based page number."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    return (page - 1) * page_size, page * page_size - 1


@dataclass(frozen=True)
class Pagination:
    page: int
    total: int
    page_size: int = PAGE_SIZE

    @property
    def page_count(self) -> int:
        return page_count(self.total, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def visible(self) -> bool:
        # controls are only shown once results spill past one page
        return self.total > self.page_size
