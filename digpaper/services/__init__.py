from .storage import FileStore
from .project_service import ProjectService
from .forum_service import ForumService
from .document_service import DocumentService
from .email_service import EmailService, parse_inbound_form
from .push_service import PushService, notify_new_message_task
from .user_service import UserService

__all__ = [
    "FileStore",
    "ProjectService",
    "ForumService",
    "DocumentService",
    "EmailService",
    "parse_inbound_form",
    "PushService",
    "notify_new_message_task",
    "UserService"
]
