from .projects import router as projects_router
from .documents import router as documents_router
from .email import router as email_router
from .forum import router as forum_router
from .push import router as push_router
from .profiles import router as profiles_router

__all__ = [
    "projects_router",
    "documents_router",
    "email_router",
    "forum_router",
    "push_router",
    "profiles_router"
]
