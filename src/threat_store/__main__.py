"""Run the Threat Store REST server.

Usage:
    python -m threat_store
    THREAT_STORE_STORAGE_PATH=/srv/models THREAT_STORE_SERVER_PORT=8080 threat-store
"""

from __future__ import annotations

from fastapi import FastAPI

from threat_store.infrastructure.container import get_container


def app() -> FastAPI:
    """Application factory, for ``uvicorn --factory threat_store.__main__:app``."""
    return get_container().build_app()


def main() -> None:
    import uvicorn

    container = get_container()
    container.repository.ensure()
    uvicorn.run(
        container.build_app(),
        host=container.config.server.host,
        port=container.config.server.port,
        log_level=container.config.observability.log_level.lower(),
    )


if __name__ == "__main__":
    main()
