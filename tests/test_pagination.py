from app.services.pagination import build_pagination, empty_pagination


def test_page_past_the_end_keeps_valid_metadata() -> None:
    pagination = build_pagination(page=5, limit=20, total_count=3)

    assert pagination.current_page == 5
    assert pagination.total_pages == 1
    assert pagination.total_count == 3
    assert pagination.has_next_page is False
    assert pagination.has_previous_page is True


def test_middle_page() -> None:
    pagination = build_pagination(page=2, limit=10, total_count=25)

    assert pagination.total_pages == 3
    assert pagination.has_next_page is True
    assert pagination.has_previous_page is True


def test_exact_multiple_has_no_extra_page() -> None:
    pagination = build_pagination(page=2, limit=10, total_count=20)

    assert pagination.total_pages == 2
    assert pagination.has_next_page is False


def test_empty_result_reports_one_page() -> None:
    pagination = empty_pagination(1)

    assert pagination.total_pages == 1
    assert pagination.total_count == 0
    assert pagination.has_next_page is False
    assert pagination.has_previous_page is False
