from .session import (
    Base,
    engine,
    AsyncSessionLocal,
    get_db,
    init_db,
    close_db,
    GERAL_PROJECT_NAME
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_db",
    "init_db",
    "close_db",
    "GERAL_PROJECT_NAME"
]
