"""FastAPI dependency providers."""
from fastapi import Depends, Request

from duckfs.core.config import Settings
from duckfs.services.registry import ServiceRegistry
from duckfs.services.save_service import SaveService
from duckfs.services.traversal import TraversalEngine


def get_service_registry(request: Request) -> ServiceRegistry:
    """Return the service registry stored on the FastAPI application state."""

    registry = getattr(request.app.state, "services", None)
    if not isinstance(registry, ServiceRegistry):
        raise RuntimeError("Service registry not initialised")
    return registry


def get_app_settings(registry: ServiceRegistry = Depends(get_service_registry)) -> Settings:
    return registry.settings


def get_traversal_engine(registry: ServiceRegistry = Depends(get_service_registry)) -> TraversalEngine:
    return registry.traversal_engine


def get_save_service(registry: ServiceRegistry = Depends(get_service_registry)) -> SaveService:
    return registry.save_service
