from .project import ProjectCreate, ProjectStatusUpdate, ProjectDetailsUpdate, ProjectResponse
from .document import (
    DocumentAssign,
    DocumentBatchAssign,
    DocumentNotesUpdate,
    DocumentStatusUpdate,
    DocumentCategoryUpdate,
    DocumentResponse,
    UploadResponse
)
from .email import (
    EmailRuleCreate,
    EmailRuleResponse,
    EmailFilterCreate,
    EmailFilterResponse,
    EmailWebhookResponse
)
from .forum import (
    ForumMessageCreate,
    ReplyCreate,
    TaskItemToggle,
    TaskItemResponse,
    ForumMessageResponse
)
from .push import PushSubscribeRequest, PushUnsubscribeRequest, VapidKeyResponse
from .user import ProfilePhotoUpdate, UserProfileResponse

__all__ = [
    "ProjectCreate",
    "ProjectStatusUpdate",
    "ProjectDetailsUpdate",
    "ProjectResponse",
    "DocumentAssign",
    "DocumentBatchAssign",
    "DocumentNotesUpdate",
    "DocumentStatusUpdate",
    "DocumentCategoryUpdate",
    "DocumentResponse",
    "UploadResponse",
    "EmailRuleCreate",
    "EmailRuleResponse",
    "EmailFilterCreate",
    "EmailFilterResponse",
    "EmailWebhookResponse",
    "ForumMessageCreate",
    "ReplyCreate",
    "TaskItemToggle",
    "TaskItemResponse",
    "ForumMessageResponse",
    "PushSubscribeRequest",
    "PushUnsubscribeRequest",
    "VapidKeyResponse",
    "ProfilePhotoUpdate",
    "UserProfileResponse"
]
