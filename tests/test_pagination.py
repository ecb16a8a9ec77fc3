import pytest

from giveback.services.pagination import Pagination, page_count, page_range


@pytest.mark.parametrize(
    ("total", "expected"),
    [(0, 1), (1, 1), (12, 1), (13, 2), (24, 2), (25, 3)],
)
def test_page_count(total, expected):
    assert page_count(total) == expected


def test_page_range_is_inclusive():
    assert page_range(1) == (0, 11)
    assert page_range(2) == (12, 23)
    assert page_range(3, page_size=5) == (10, 14)


def test_page_range_rejects_page_zero():
    with pytest.raises(ValueError):
        page_range(0)


def test_first_page_of_many():
    pager = Pagination(page=1, total=13)
    assert not pager.has_previous
    assert pager.has_next
    assert pager.visible


def test_last_page():
    pager = Pagination(page=2, total=13)
    assert pager.has_previous
    assert not pager.has_next


def test_zero_results_is_page_one_of_one():
    pager = Pagination(page=1, total=0)
    assert pager.page_count == 1
    assert not pager.has_next
    assert not pager.visible
