# src/taskflow/core/routes.py

from __future__ import annotations

from enum import StrEnum

HOME_PATH = "/"


class Route(StrEnum):
    DASHBOARD = "dashboard"
    NOT_FOUND = "not_found"


ROUTES: dict[str, Route] = {
    HOME_PATH: Route.DASHBOARD,
}


def normalize_path(path: str | None) -> str:
    p = (path or "").strip()
    if not p:
        return HOME_PATH
    # Drop query/fragment, keep a single leading slash, no trailing slash.
    p = p.split("?", 1)[0].split("#", 1)[0]
    p = "/" + p.strip("/")
    return p


def resolve(path: str | None) -> Route:
    """Unmatched paths go to the not-found page (catch-all), never an error."""
    return ROUTES.get(normalize_path(path), Route.NOT_FOUND)
