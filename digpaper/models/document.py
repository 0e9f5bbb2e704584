"""
DigPaper - Document Model
Ficheiros carregados (fotos, PDFs, folhas de cálculo...)

Um documento sem project_id está na Inbox, à espera de ser organizado.
"""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey

from digpaper.database import Base


class DocumentStatus(str, enum.Enum):
    """Estado de trabalho do documento"""
    DEFAULT = "DEFAULT"
    DOUBT = "DOUBT"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class FileType(str, enum.Enum):
    """Categoria derivada do MIME type"""
    IMAGE = "image"
    PDF = "pdf"
    VIDEO = "video"
    EXCEL = "excel"
    WORD = "word"
    OTHER = "other"


class Document(Base):
    """Modelo de Documento"""
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # NULL = Inbox; apagar a obra devolve o documento à Inbox
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Nome gerado no diretório de uploads (nunca o nome original)
    file_path = Column(String(255), nullable=False, unique=True)
    file_type = Column(String(20), nullable=False, default=FileType.OTHER.value)
    original_name = Column(String(255), nullable=False)

    uploaded_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    notes = Column(Text)
    status = Column(String(20), nullable=False, default=DocumentStatus.DEFAULT.value)
    category = Column(String(100))

    # Memo de voz opcional
    audio_path = Column(String(255))

    @property
    def is_in_inbox(self) -> bool:
        return self.project_id is None

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "file_path": self.file_path,
            "file_type": self.file_type,
            "original_name": self.original_name,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
            "file_url": f"/files/{self.file_path}",
            "notes": self.notes,
            "status": self.status,
            "category": self.category,
            "audio_path": self.audio_path,
            "audio_url": f"/files/{self.audio_path}" if self.audio_path else None,
        }
