from datetime import datetime

import pytest

from app.services.events.query_builder import (
    ExploreFilters,
    IndexFilters,
    build_explore_query,
    build_index_query,
    compose_filter,
    parse_explore_featured,
    parse_tag_list,
)

NOW = datetime(2026, 10, 18, 12, 0, 0)
UPCOMING = {"date.from": {"$gte": NOW}}


def test_compose_filter_skips_missing_clauses() -> None:
    assert compose_filter([None, {"a": 1}, {}, {"b": {"$in": [2]}}]) == {"a": 1, "b": {"$in": [2]}}


@pytest.mark.parametrize(
    "school,tags,expected",
    [
        ("viterbi", "WORKSHOP", {"school": "viterbi", "tags": "WORKSHOP"}),
        ("viterbi", None, {"school": "viterbi"}),
        (None, "WORKSHOP", {"tags": "WORKSHOP"}),
        (None, None, {}),
    ],
)
def test_index_query_covers_every_school_tags_combination(school, tags, expected) -> None:
    query = build_index_query(IndexFilters(school=school, tags=tags, featured="true", limit=5), NOW)

    assert query.filter == {**expected, "featured": True, **UPCOMING}
    assert query.sort == [("date.from", 1)]
    assert query.limit == 5


def test_index_query_matches_tags_literally() -> None:
    query = build_index_query(IndexFilters(tags="WORKSHOP,CAREER", limit=3), NOW)

    assert query.filter["tags"] == "WORKSHOP,CAREER"


@pytest.mark.parametrize("raw", [None, "", "false", "TRUE", "1", "yes"])
def test_index_featured_defaults_to_false(raw) -> None:
    query = build_index_query(IndexFilters(featured=raw, limit=3), NOW)

    assert query.filter["featured"] is False


def test_index_query_treats_empty_strings_as_absent() -> None:
    query = build_index_query(IndexFilters(school="", tags="", limit=3), NOW)

    assert query.filter == {"featured": False, **UPCOMING}


@pytest.mark.parametrize(
    "school,tags,expected",
    [
        ("viterbi", "WORKSHOP,CAREER", {"school": "viterbi", "tags": {"$in": ["WORKSHOP", "CAREER"]}}),
        ("viterbi", None, {"school": "viterbi"}),
        (None, "WORKSHOP", {"tags": {"$in": ["WORKSHOP"]}}),
        (None, None, {}),
    ],
)
@pytest.mark.parametrize("featured,featured_clause", [(None, {}), ("true", {"featured": True}), ("false", {"featured": False})])
def test_explore_query_covers_every_combination(school, tags, expected, featured, featured_clause) -> None:
    query = build_explore_query(ExploreFilters(school=school, tags=tags, featured=featured), NOW)

    assert query.filter == {**expected, **featured_clause, **UPCOMING}
    assert query.sort == [("date.from", 1)]
    assert query.limit is None


def test_explore_featured_is_tri_state() -> None:
    assert parse_explore_featured(None) is None
    assert parse_explore_featured("") is None
    assert parse_explore_featured("true") is True
    assert parse_explore_featured("false") is False
    assert parse_explore_featured("nope") is False


def test_explore_empty_tags_means_no_tag_filter() -> None:
    assert parse_tag_list("") is None
    assert parse_tag_list(None) is None
    query = build_explore_query(ExploreFilters(tags=""), NOW)

    assert "tags" not in query.filter


def test_tag_list_is_split_verbatim() -> None:
    assert parse_tag_list("WORKSHOP,,CAREER") == ["WORKSHOP", "", "CAREER"]
