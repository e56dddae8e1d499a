"""Database initialization script."""

from src.user_service.core.services.database.db_manage import DbManageService
from src.user_service.core.services.database.db_session import DbSessionService


def init_db(database_service: DbSessionService | None = None, reset: bool = False) -> None:
    """Create all database tables, dropping existing ones first if *reset*."""
    database_service = database_service or DbSessionService()
    manager = DbManageService(database_service.engine)
    if reset:
        manager.drop_all()
    manager.create_all()


if __name__ == "__main__":
    init_db()
