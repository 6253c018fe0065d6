"""Front-end navigation for the local server storage provider.

Describes the dashboard actions and the UI routes a front end offers when
threat models are stored through the local git-backed API.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

PROVIDER_TYPE = "local"


@dataclass(frozen=True)
class DashboardAction:
    """A dashboard entry point."""

    to: str
    key: str
    icon: str


@dataclass(frozen=True)
class Route:
    """A UI route.

    Attributes:
        path: Route pattern, ``:param`` segments match one path segment
        name: Unique route name
        view: Name of the view rendered for the route
    """

    path: str
    name: str
    view: str

    def match(self, path: str) -> Optional[dict[str, str]]:
        """Match a concrete path, returning its params or None."""
        pattern = re.sub(r":(\w+)", r"(?P<\1>[^/]+)", self.path)
        found = re.fullmatch(pattern, path)
        return found.groupdict() if found else None


def get_dashboard_actions() -> list[DashboardAction]:
    """Gets the dashboard actions for the local server provider."""
    return [
        DashboardAction(to=f"/{PROVIDER_TYPE}/models", key="openExisting", icon="folder-open"),
        DashboardAction(to=f"/{PROVIDER_TYPE}/threatmodel/new", key="createNew", icon="plus"),
        DashboardAction(to="/demo/select", key="readDemo", icon="cloud-download-alt"),
    ]


# Static routes come first so that "/local/threatmodel/new" is not taken
# for a threat model named "threatmodel".
LOCAL_SERVER_ROUTES: list[Route] = [
    Route(f"/{PROVIDER_TYPE}/models", f"{PROVIDER_TYPE}Models", "ModelSelect"),
    Route(f"/{PROVIDER_TYPE}/threatmodel/new", f"{PROVIDER_TYPE}NewThreatModel", "NewThreatModel"),
    Route(f"/{PROVIDER_TYPE}/:threatmodel", f"{PROVIDER_TYPE}ThreatModel", "ThreatModel"),
    Route(f"/{PROVIDER_TYPE}/:threatmodel/edit", f"{PROVIDER_TYPE}ThreatModelEdit", "ThreatModelEdit"),
    Route(
        f"/{PROVIDER_TYPE}/:threatmodel/edit/:diagram",
        f"{PROVIDER_TYPE}DiagramEdit",
        "DiagramEdit",
    ),
    Route(f"/{PROVIDER_TYPE}/:threatmodel/report", f"{PROVIDER_TYPE}Report", "ReportModel"),
    Route(f"/{PROVIDER_TYPE}/:threatmodel/history", f"{PROVIDER_TYPE}History", "ModelHistory"),
]


def resolve_route(path: str) -> Optional[tuple[Route, dict[str, str]]]:
    """Find the first route matching ``path``."""
    for route in LOCAL_SERVER_ROUTES:
        params = route.match(path)
        if params is not None:
            return route, params
    return None
