"""FastAPI dependency implementations."""

from fastapi import Request

from src.user_service.api.http.app_data import ApplicationDependencies
from src.user_service.core.services import UserService
from src.user_service.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the application was built with."""
    return request.app.state.config


def get_user_service(request: Request) -> UserService:
    """Get the user application service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_service
