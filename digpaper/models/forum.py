"""
DigPaper - Forum Models
Mensagens por obra (e no fórum "Geral") e itens de listas de tarefas
"""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey

from digpaper.database import Base

DEFAULT_AUTHOR = "Anónimo"


class MessageType(str, enum.Enum):
    """Tipos de mensagem do fórum"""
    TEXT = "TEXT"
    PHOTO = "PHOTO"
    VOICE = "VOICE"
    TASK_LIST = "TASK_LIST"


class ForumMessage(Base):
    """Mensagem do fórum; parent_id definido = resposta"""
    __tablename__ = "forum_messages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), index=True)
    parent_id = Column(String(36), ForeignKey("forum_messages.id", ondelete="CASCADE"), index=True)

    message_type = Column(String(20), nullable=False, default=MessageType.TEXT.value)
    content = Column(Text)

    # PHOTO
    document_id = Column(String(36), ForeignKey("documents.id", ondelete="SET NULL"))
    # VOICE
    audio_path = Column(String(255))

    author_name = Column(String(100), nullable=False, default=DEFAULT_AUTHOR)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "parent_id": self.parent_id,
            "message_type": self.message_type,
            "content": self.content,
            "document_id": self.document_id,
            "audio_path": self.audio_path,
            "audio_url": f"/files/{self.audio_path}" if self.audio_path else None,
            "author_name": self.author_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TaskItem(Base):
    """Item de uma lista de tarefas (mensagem TASK_LIST)"""
    __tablename__ = "task_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    message_id = Column(
        String(36),
        ForeignKey("forum_messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    text = Column(Text, nullable=False)

    completed = Column(Boolean, nullable=False, default=False)
    completed_by = Column(String(100))
    completed_at = Column(DateTime)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "completed_by": self.completed_by,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
