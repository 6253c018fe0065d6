"""Client side of the local storage API: REST client and front-end navigation."""

from threat_store.client.local_api import LocalApiClient
from threat_store.client.provider import (
    LOCAL_SERVER_ROUTES,
    PROVIDER_TYPE,
    DashboardAction,
    Route,
    get_dashboard_actions,
    resolve_route,
)

__all__ = [
    "LocalApiClient",
    "LOCAL_SERVER_ROUTES",
    "PROVIDER_TYPE",
    "DashboardAction",
    "Route",
    "get_dashboard_actions",
    "resolve_route",
]
