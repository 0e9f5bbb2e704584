"""
DigPaper - Project Model
Representa uma obra (ordem de trabalho)
"""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text

from digpaper.database import Base


class ProjectStatus(str, enum.Enum):
    """Estado da obra"""
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class Project(Base):
    """Modelo de Obra"""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ProjectStatus.ACTIVE.value, index=True)

    # Dados da obra
    address = Column(Text)
    client_phone = Column(String(50))

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self, document_count: int = 0):
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "address": self.address,
            "client_phone": self.client_phone,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "document_count": document_count,
        }
