"""Inbound adapters for the Threat Store.

Provides the REST API adapter over the model repository.
"""

from threat_store.adapters.inbound.rest_api import create_app

__all__ = ["create_app"]
