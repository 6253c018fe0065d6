"""FastAPI REST adapter for the Threat Store.

Exposes the local git-backed model repository under ``/api/local``.

Endpoints:
    GET    /api/local/models                        - List model names
    GET    /api/local/{model}/data                  - Get a model
    POST   /api/local/{model}/create                - Create a model
    PUT    /api/local/{model}/update                - Update a model
    DELETE /api/local/{model}/delete                - Delete a model (policy gated)
    GET    /api/local/{model}/history               - Revision history
    GET    /api/local/{model}/version/{version}     - Model at a revision
    GET    /health                                  - Health check
    GET    /metrics                                 - Prometheus metrics

Errors are answered as ``{"error": message, "kind": kind}`` with the status
mapped from the error's kind.

Usage:
    from threat_store.adapters.inbound.rest_api import create_app

    app = create_app(repository)
    # Run with: uvicorn module:app --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from threat_store import __version__
from threat_store.domain.errors import OperationDisabledError, ThreatStoreError
from threat_store.domain.services import decode_document
from threat_store.infrastructure.config import ApiConfig
from threat_store.infrastructure.logging import get_logger
from threat_store.infrastructure.metrics import ThreatStoreMetrics
from threat_store.ports.inbound import ModelRepositoryPort

logger = get_logger(__name__)

API_PREFIX = "/api/local"

STATUS_BY_KIND: dict[str, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "already_exists": status.HTTP_409_CONFLICT,
    "revision_not_found": status.HTTP_404_NOT_FOUND,
    "malformed_content": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "invalid_name": status.HTTP_400_BAD_REQUEST,
    "disabled": status.HTTP_403_FORBIDDEN,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ModelAckResponse(BaseModel):
    """Acknowledgment of a model mutation."""

    success: bool = Field(..., description="Whether the mutation succeeded")
    model: str = Field(..., description="Model name")


class RevisionResponse(BaseModel):
    """One entry of a model's history."""

    hash: str = Field(..., description="Commit SHA")
    date: str = Field(..., description="ISO-8601 commit timestamp")
    message: str = Field(..., description="Commit summary")
    author: str = Field(..., description="Commit author name")


class ErrorResponse(BaseModel):
    """Error body."""

    error: str
    kind: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = __version__
    storage_configured: bool = True


def create_app(
    repository: ModelRepositoryPort,
    api_config: Optional[ApiConfig] = None,
    metrics: Optional[ThreatStoreMetrics] = None,
) -> FastAPI:
    """Create FastAPI application with Threat Store endpoints.

    Handlers are plain functions so that blocking git calls run in the
    threadpool instead of the event loop.

    Args:
        repository: Model repository implementing ModelRepositoryPort
        api_config: API policy, defaults to ApiConfig() from the environment
        metrics: Metrics collector whose registry /metrics exposes

    Returns:
        Configured FastAPI application.
    """
    api_config = api_config or ApiConfig()

    app = FastAPI(
        title="Threat Store API",
        description="Git-backed versioned storage for threat models",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ThreatStoreError)
    async def threat_store_error_handler(request: Request, exc: ThreatStoreError) -> JSONResponse:
        """Map repository errors to status codes."""
        status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
        if status_code >= 500:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                kind=exc.kind,
                error=exc.message,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.info(
                "request_rejected",
                method=request.method,
                path=request.url.path,
                kind=exc.kind,
                error=exc.message,
            )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.message, "kind": exc.kind},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Answer anything unrecognized with an opaque 500."""
        logger.error(
            "request_failed_unhandled",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    # System endpoints
    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check() -> HealthResponse:
        """Check service health."""
        return HealthResponse(status="healthy", storage_configured=repository.is_configured())

    @app.get("/metrics", tags=["System"])
    def prometheus_metrics() -> Response:
        """Prometheus metrics in text exposition format."""
        if metrics is None:
            return Response(content=b"", media_type=CONTENT_TYPE_LATEST)
        return Response(content=generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)

    # Model endpoints
    router = APIRouter(
        prefix=API_PREFIX,
        tags=["Local"],
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
            status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        },
    )

    @router.get("/models", response_model=list[str])
    def list_models() -> list[str]:
        """List all threat models in local storage."""
        logger.debug("api_local_models_request")
        return repository.list_models()

    @router.get("/{model}/data", responses={404: {"model": ErrorResponse}})
    def get_model(model: str) -> Any:
        """Get a threat model."""
        logger.debug("api_local_model_request", model=model)
        content = repository.get_model(model)
        return decode_document(content, model)

    @router.post(
        "/{model}/create",
        response_model=ModelAckResponse,
        status_code=status.HTTP_201_CREATED,
        responses={409: {"model": ErrorResponse}},
    )
    def create_model(model: str, document: Any = Body(...)) -> ModelAckResponse:
        """Create a new threat model."""
        logger.debug("api_local_create_request", model=model)
        ack = repository.create_model(model, document)
        return ModelAckResponse(**ack.to_dict())

    @router.put(
        "/{model}/update",
        response_model=ModelAckResponse,
        responses={404: {"model": ErrorResponse}},
    )
    def update_model(model: str, document: Any = Body(...)) -> ModelAckResponse:
        """Update an existing threat model."""
        logger.debug("api_local_update_request", model=model)
        ack = repository.update_model(model, document)
        return ModelAckResponse(**ack.to_dict())

    @router.delete(
        "/{model}/delete",
        response_model=ModelAckResponse,
        responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def delete_model(model: str) -> ModelAckResponse:
        """Delete a threat model (disabled unless enabled by configuration)."""
        logger.debug("api_local_delete_request", model=model)
        if not api_config.enable_delete:
            raise OperationDisabledError("Model deletion is disabled")
        ack = repository.delete_model(model)
        return ModelAckResponse(**ack.to_dict())

    @router.get(
        "/{model}/history",
        response_model=list[RevisionResponse],
        responses={404: {"model": ErrorResponse}},
    )
    def model_history(model: str) -> list[RevisionResponse]:
        """Get the version history for a threat model."""
        logger.debug("api_local_history_request", model=model)
        return [RevisionResponse(**revision.to_dict()) for revision in repository.history(model)]

    @router.get("/{model}/version/{version}", responses={404: {"model": ErrorResponse}})
    def model_version(model: str, version: str) -> Any:
        """Get a specific version of a threat model."""
        logger.debug("api_local_version_request", model=model, version=version)
        return repository.version_at(model, version)

    app.include_router(router)

    return app
