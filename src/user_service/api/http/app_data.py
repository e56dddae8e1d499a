from dataclasses import dataclass

from loguru import logger

from src.user_service.core.services import (
    DbManageService,
    DbSessionService,
    EventDispatcher,
    UserService,
    register_subscribers,
)
from src.user_service.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    dispatcher: EventDispatcher
    user_service: UserService


def build_dependencies(
    config: ConfigData,
    database_service: DbSessionService | None = None,
    create_schema: bool = True,
) -> ApplicationDependencies:
    """Compose the service graph; every collaborator is passed explicitly."""
    database_service = database_service or DbSessionService(config=config)
    if create_schema:
        DbManageService(database_service.engine).create_all()

    dispatcher = EventDispatcher(max_workers=config.events.max_workers)
    register_subscribers(dispatcher, config.notifications)

    user_service = UserService(database_service, dispatcher)
    logger.info(
        "Application dependencies built (dispatcher workers: {})",
        config.events.max_workers,
    )
    return ApplicationDependencies(
        database_service=database_service,
        dispatcher=dispatcher,
        user_service=user_service,
    )
