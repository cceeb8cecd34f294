"""Translate event list requests into MongoDB queries.

Two calling contexts exist. The index context feeds the homepage widget and
always filters on ``featured`` (defaulting to false) with a hard result cap.
The explore context feeds the browsing page, where ``featured`` is tri-state
(absent means "both") and ``tags`` is a comma-separated membership test.

Both contexts only return events whose ``date.from`` is at or after ``now``,
sorted ascending by ``date.from``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

Clause = dict[str, Any] | None

DATE_FIELD = "date.from"
ASCENDING = 1


@dataclass(frozen=True)
class IndexFilters:
    school: str | None = None
    tags: str | None = None
    featured: str | None = None
    limit: int = 0


@dataclass(frozen=True)
class ExploreFilters:
    school: str | None = None
    tags: str | None = None
    featured: str | None = None


@dataclass(frozen=True)
class EventQuery:
    filter: dict[str, Any]
    sort: list[tuple[str, int]] = field(default_factory=lambda: [(DATE_FIELD, ASCENDING)])
    limit: int | None = None


def compose_filter(clauses: Iterable[Clause]) -> dict[str, Any]:
    """AND together the clauses that are present."""
    combined: dict[str, Any] = {}
    for clause in clauses:
        if clause:
            combined.update(clause)
    return combined


def parse_index_featured(raw: str | None) -> bool:
    return raw == "true"


def parse_explore_featured(raw: str | None) -> bool | None:
    if not raw:
        return None
    return raw == "true"


def parse_tag_list(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    return raw.split(",")


def _upcoming(now: datetime) -> Clause:
    return {DATE_FIELD: {"$gte": now}}


def _school(school: str | None) -> Clause:
    return {"school": school} if school else None


def build_index_query(filters: IndexFilters, now: datetime) -> EventQuery:
    # tags is matched as a single literal value here, unlike the explore context
    clauses = [
        _school(filters.school),
        {"tags": filters.tags} if filters.tags else None,
        {"featured": parse_index_featured(filters.featured)},
        _upcoming(now),
    ]
    return EventQuery(filter=compose_filter(clauses), limit=filters.limit)


def build_explore_query(filters: ExploreFilters, now: datetime) -> EventQuery:
    featured = parse_explore_featured(filters.featured)
    tags = parse_tag_list(filters.tags)
    clauses = [
        _school(filters.school),
        {"featured": featured} if featured is not None else None,
        {"tags": {"$in": tags}} if tags else None,
        _upcoming(now),
    ]
    return EventQuery(filter=compose_filter(clauses))
