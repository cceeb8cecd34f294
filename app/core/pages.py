"""Role-gated page table served to the React client.

Paths are matched exactly, in table order. A gated page that the caller may
not see resolves to a redirect to the login page instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Any, Optional

from app.core.auth import is_admin

LOGIN_PATH = "/login"


class Access(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


@dataclass(frozen=True)
class PageRoute:
    pattern: str
    page: str
    page_key: Optional[str] = None
    access: Access = Access.PUBLIC

    def match(self, path: str) -> Optional[dict[str, str]]:
        regex = "^" + re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", self.pattern) + "$"
        found = re.match(regex, path)
        return found.groupdict() if found else None


@dataclass(frozen=True)
class PageResolution:
    page: str
    page_key: Optional[str] = None
    params: dict[str, str] = field(default_factory=dict)
    redirect: Optional[str] = None


PAGE_ROUTES: tuple[PageRoute, ...] = (
    PageRoute("/", "feature", page_key=""),
    PageRoute("/viterbi", "feature", page_key="viterbi"),
    PageRoute("/annenberg", "feature", page_key="annenberg"),
    PageRoute("/marshall", "feature", page_key="marshall"),
    PageRoute("/details/{id}", "details"),
    PageRoute("/explore", "explore"),
    PageRoute("/register", "register"),
    PageRoute("/login", "login"),
    PageRoute("/dashboard", "dashboard", access=Access.AUTHENTICATED),
    PageRoute("/admin-dashboard", "admin-dashboard", access=Access.ADMIN),
)
NOT_FOUND_PAGE = "not-found"


def can_access(access: Access, user: Optional[dict[str, Any]]) -> bool:
    if access is Access.PUBLIC:
        return True
    if access is Access.AUTHENTICATED:
        return user is not None
    return is_admin(user)


def resolve_page(path: str, user: Optional[dict[str, Any]] = None) -> PageResolution:
    normalized = path.split("?", 1)[0] or "/"
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    for route in PAGE_ROUTES:
        params = route.match(normalized)
        if params is None:
            continue
        if not can_access(route.access, user):
            return PageResolution(page=route.page, redirect=LOGIN_PATH)
        return PageResolution(page=route.page, page_key=route.page_key, params=params)
    return PageResolution(page=NOT_FOUND_PAGE)
