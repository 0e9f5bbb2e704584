from .config import settings, get_settings
from .exceptions import (
    AppError,
    NotFoundError,
    BadRequestError,
    UnauthorizedError,
    InternalError,
    register_exception_handlers
)
from .security import verify_api_key, generate_vapid_keys

__all__ = [
    "settings",
    "get_settings",
    "AppError",
    "NotFoundError",
    "BadRequestError",
    "UnauthorizedError",
    "InternalError",
    "register_exception_handlers",
    "verify_api_key",
    "generate_vapid_keys"
]
