"""Discovery parameter parsing and validation tests."""

import pytest

from app.core.config import settings
from app.services.geo import GeoPoint
from app.services.search_filters import (
    SearchValidationError,
    effective_filters,
    parse_id_list,
    parse_name_list,
    parse_search_filters,
)


def test_defaults_without_parameters() -> None:
    filters = parse_search_filters({})

    assert filters.query is None
    assert filters.show_type == "all"
    assert filters.origin is None
    assert filters.radius_km is None
    assert filters.sort_by == "relevance"
    assert filters.sort_order == "desc"
    assert filters.sort_order_explicit is False
    assert filters.page == 1
    assert filters.limit == settings.search_default_limit
    assert filters.offset == 0
    assert filters.include_restaurants and filters.include_deals


def test_id_lists_accept_repeats_and_commas() -> None:
    assert parse_id_list(["1,2", "3", "2", " 4 "]) == (1, 2, 3, 4)
    assert parse_id_list(["abc,5,,x"]) == (5,)
    assert parse_name_list([" Italian ,Thai", "Italian"]) == ("Italian", "Thai")


def test_aliases_are_normalized() -> None:
    filters = parse_search_filters(
        {
            "query": ["  pizza  "],
            "entityType": ["Deals"],
            "lat": ["43.65"],
            "lng": ["-79.38"],
            "distance": ["10"],
            "cuisineId": ["7"],
            "dietaryPreferences": ["Vegan,Halal"],
            "hasActiveDeals": ["yes"],
        }
    )

    assert filters.query == "pizza"
    assert filters.show_type == "deals"
    assert filters.origin == GeoPoint(latitude=43.65, longitude=-79.38)
    assert filters.radius_km == 10.0
    assert filters.cuisines.ids == (7,)
    assert filters.dietary_preferences.names == ("Vegan", "Halal")
    assert filters.has_active_deals is True
    assert filters.include_restaurants is False


def test_forced_show_type_overrides_parameter() -> None:
    filters = parse_search_filters({"showType": ["deals"]}, show_type="restaurants")
    assert filters.show_type == "restaurants"


def test_offset_follows_page_and_limit() -> None:
    filters = parse_search_filters({"page": ["5"], "limit": ["20"]})
    assert filters.offset == 80


@pytest.mark.parametrize(
    "params",
    [
        {"latitude": ["43.6"]},
        {"longitude": ["-79.3"]},
        {"latitude": ["91"], "longitude": ["0"]},
        {"latitude": ["0"], "longitude": ["-181"]},
        {"latitude": ["nan"], "longitude": ["0"]},
        {"latitude": ["north"], "longitude": ["0"]},
        {"radius": ["5"]},
        {"latitude": ["1"], "longitude": ["1"], "radius": ["0"]},
        {"latitude": ["1"], "longitude": ["1"], "radius": ["-3"]},
        {"sortBy": ["price"]},
        {"sortOrder": ["sideways"]},
        {"page": ["0"]},
        {"page": ["two"]},
        {"limit": ["0"]},
        {"showType": ["menus"]},
    ],
)
def test_invalid_parameters_are_rejected(params) -> None:
    with pytest.raises(SearchValidationError):
        parse_search_filters(params)


def test_limit_above_maximum_is_rejected(monkeypatch) -> None:
    monkeypatch.setattr(settings, "search_max_limit", 50)

    with pytest.raises(SearchValidationError):
        parse_search_filters({"limit": ["51"]})
    assert parse_search_filters({"limit": ["50"]}).limit == 50


def test_sort_order_defaults_per_field_and_tracks_explicit_choice() -> None:
    assert parse_search_filters({"sortBy": ["distance"]}).sort_order == "asc"
    assert parse_search_filters({"sortBy": ["rating"]}).sort_order == "desc"

    explicit = parse_search_filters({"sortBy": ["rating"], "sortOrder": ["ASC"]})
    assert explicit.sort_order == "asc"
    assert explicit.sort_order_explicit is True


def test_has_active_deals_only_accepts_truthy_words() -> None:
    assert parse_search_filters({"hasActiveDeals": ["1"]}).has_active_deals is True
    assert parse_search_filters({"hasActiveDeals": ["false"]}).has_active_deals is False


def test_effective_filters_echo() -> None:
    filters = parse_search_filters(
        {"q": ["sushi"], "latitude": ["43.65"], "longitude": ["-79.38"], "radius": ["10"], "sortBy": ["distance"]}
    )

    echo = effective_filters(filters, frozenset({3, 1}), None)

    assert echo == {
        "query": "sushi",
        "show_type": "all",
        "cuisine_ids": [1, 3],
        "dietary_preference_ids": [],
        "latitude": 43.65,
        "longitude": -79.38,
        "radius_km": 10.0,
        "has_active_deals": False,
        "sort_by": "distance",
        "sort_order": "asc",
        "page": 1,
        "limit": settings.search_default_limit,
    }
