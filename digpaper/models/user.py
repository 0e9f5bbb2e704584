"""
DigPaper - User Profile Model
Avatar global por nome de autor
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text

from digpaper.database import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    name = Column(String(100), primary_key=True)
    photo_url = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "name": self.name,
            "photo_url": self.photo_url,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
