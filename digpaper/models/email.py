"""
DigPaper - Email Models
Regras de encaminhamento e filtros de anexos para o webhook de email
"""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey

from digpaper.database import Base


class FilterType(str, enum.Enum):
    """Tipos de filtro de anexos"""
    FILENAME = "filename"
    EXTENSION = "extension"
    # Rejeita anexos MENORES que o limite (logótipos, ícones de assinatura)
    SIZE_MAX = "size_max"


class EmailRule(Base):
    """Encaminha emails de um remetente para uma obra"""
    __tablename__ = "email_rules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # "cliente@exemplo.pt" (contém) ou "*@empresa.pt" (sufixo)
    sender_pattern = Column(String(255), nullable=False)

    # NULL = Inbox
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True)

    description = Column(Text)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "sender_pattern": self.sender_pattern,
            "project_id": self.project_id,
            "description": self.description,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class EmailFilter(Base):
    """Filtra anexos indesejados"""
    __tablename__ = "email_filters"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    pattern = Column(String(255), nullable=False)
    filter_type = Column(String(20), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "pattern": self.pattern,
            "filter_type": self.filter_type,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
