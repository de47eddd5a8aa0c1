"""Result hydration tests."""

from sqlalchemy import event

from app.models import RestaurantBookmark
from app.services.search_filters import parse_search_filters
from app.services.search_hydration import fetch_bookmarked_ids, fetch_deal_tags
from app.services.search_service import discover, get_restaurant_detail


class _UntouchableSession:
    def __getattr__(self, name):
        raise AssertionError(f"anonymous hydration must not touch the session ({name})")


def test_anonymous_viewer_never_queries_bookmarks() -> None:
    bookmarked = fetch_bookmarked_ids(
        _UntouchableSession(), None, RestaurantBookmark.restaurant_id, RestaurantBookmark.user_id, [1, 2]
    )
    assert bookmarked == set()


def test_deal_tags_are_grouped_and_sorted(db, data) -> None:
    thai = data.cuisine("Thai")
    asian = data.cuisine("Asian Fusion")
    vegan = data.dietary("Vegan")
    restaurant_id = data.restaurant("Bangkok Street")
    tagged = data.deal(restaurant_id, "Curry night", cuisine_ids=(thai, asian), dietary_ids=(vegan,))
    untagged = data.deal(restaurant_id, "Happy hour")

    cuisines, dietary = fetch_deal_tags(db, [tagged, untagged])

    assert [tag.name for tag in cuisines[tagged]] == ["Asian Fusion", "Thai"]
    assert [tag.name for tag in dietary[tagged]] == ["Vegan"]
    assert cuisines.get(untagged, []) == []


def test_restaurant_results_carry_active_deals_and_bookmarks(db, data) -> None:
    italian = data.cuisine("Italian")
    partner_id = data.partner("owner-1", business_name="Roma Group")
    saved = data.restaurant("Saved", partner_id=partner_id, rating_avg=4.0)
    other = data.restaurant("Other", rating_avg=3.0)
    data.deal(saved, "Pasta", cuisine_ids=(italian,))
    data.deal(saved, "Draft", status="draft")
    data.restaurant_bookmark("viewer-1", saved)

    result = discover(db, parse_search_filters({"showType": ["restaurants"]}), viewer_id="viewer-1")
    items = {item.id: item for item in result.restaurants.items}

    assert items[saved].is_bookmarked is True
    assert items[other].is_bookmarked is False
    assert items[saved].active_deals_count == 1
    assert items[saved].active_deals[0].title == "Pasta"
    assert [tag.name for tag in items[saved].active_deals[0].cuisines] == ["Italian"]
    assert items[saved].partner is not None
    assert items[saved].partner.business_name == "Roma Group"
    assert items[other].partner is None
    assert items[saved].distance_km is None


def test_anonymous_results_are_never_bookmarked(db, data) -> None:
    restaurant_id = data.restaurant("Saved")
    deal_id = data.deal(restaurant_id, "Deal")
    data.restaurant_bookmark("viewer-1", restaurant_id)
    data.deal_bookmark("viewer-1", deal_id)

    result = discover(db, parse_search_filters({}), viewer_id=None)

    assert [item.is_bookmarked for item in result.restaurants.items] == [False]
    assert [item.is_bookmarked for item in result.deals.items] == [False]


def test_deal_results_include_restaurant_and_distance(db, data) -> None:
    vegan = data.dietary("Vegan")
    restaurant_id = data.restaurant("Green Bowl", 43.6510, -79.3810, rating_avg=4.2, rating_count=12)
    deal_id = data.deal(restaurant_id, "Bowl deal", dietary_ids=(vegan,))
    data.deal_bookmark("viewer-2", deal_id)

    filters = parse_search_filters({"showType": ["deals"], "latitude": ["43.65"], "longitude": ["-79.38"]})
    result = discover(db, filters, viewer_id="viewer-2")

    [item] = result.deals.items
    assert item.restaurant.name == "Green Bowl"
    assert item.restaurant.rating_count == 12
    assert [tag.name for tag in item.dietary_preferences] == ["Vegan"]
    assert item.is_bookmarked is True
    assert item.distance_km is not None
    assert item.distance_km < 1


def _record_statements(engine) -> list[str]:
    statements: list[str] = []

    @event.listens_for(engine, "before_cursor_execute")
    def _record(_conn, _cursor, statement, *_args) -> None:
        statements.append(statement)

    return statements


def _selects_after_bookmark_lookup(statements: list[str]) -> list[str]:
    lookup = next(i for i, sql in enumerate(statements) if "user_favorite_restaurants" in sql)
    return [sql for sql in statements[lookup + 1 :] if sql.lstrip().upper().startswith("SELECT")]


def test_failed_bookmark_lookup_keeps_loaded_page(engine, db, data) -> None:
    names = [f"Spot {i}" for i in range(5)]
    for i, name in enumerate(names):
        data.restaurant(name, 43.65 + i * 0.001, -79.38)
    RestaurantBookmark.__table__.drop(bind=engine)
    statements = _record_statements(engine)

    result = discover(db, parse_search_filters({"showType": ["restaurants"]}), viewer_id="viewer-1")

    assert sorted(item.name for item in result.restaurants.items) == names
    assert all(item.is_bookmarked is False for item in result.restaurants.items)
    assert _selects_after_bookmark_lookup(statements) == []


def test_failed_bookmark_lookup_keeps_restaurant_detail(engine, db, data) -> None:
    restaurant_id = data.restaurant("Corner Bistro", 43.65, -79.38, rating_avg=4.5)
    data.deal(restaurant_id, "Lunch special")
    RestaurantBookmark.__table__.drop(bind=engine)
    statements = _record_statements(engine)

    detail = get_restaurant_detail(db, restaurant_id, viewer_id="viewer-1")

    assert detail.restaurant.name == "Corner Bistro"
    assert detail.restaurant.is_bookmarked is False
    assert [deal.title for deal in detail.active_deals] == ["Lunch special"]
    assert _selects_after_bookmark_lookup(statements) == []
