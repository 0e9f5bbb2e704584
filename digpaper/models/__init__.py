from .project import Project, ProjectStatus
from .document import Document, DocumentStatus, FileType
from .email import EmailRule, EmailFilter, FilterType
from .forum import ForumMessage, TaskItem, MessageType, DEFAULT_AUTHOR
from .push import PushSubscription, AppSetting
from .user import UserProfile

__all__ = [
    "Project",
    "ProjectStatus",
    "Document",
    "DocumentStatus",
    "FileType",
    "EmailRule",
    "EmailFilter",
    "FilterType",
    "ForumMessage",
    "TaskItem",
    "MessageType",
    "DEFAULT_AUTHOR",
    "PushSubscription",
    "AppSetting",
    "UserProfile"
]
