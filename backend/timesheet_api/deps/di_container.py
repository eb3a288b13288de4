"""
Dependency injection container using dependency-injector.
Request-scoped services take the request session and are built by their
controllers; the container holds the process-wide ones.
"""

from typing import Optional

from dependency_injector import containers, providers

from timesheet_api.controllers.health_controller import HealthController
from timesheet_api.services.health_service import HealthService


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Services
    health_service = providers.Singleton(
        HealthService,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Optional[Container] = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Container) -> None:
    global _container
    _container = container
