"""
DigPaper - Push Models
Subscrições Web Push e definições da aplicação (chaves VAPID)
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text

from digpaper.database import Base


class PushSubscription(Base):
    """Subscrição de notificações de um browser"""
    __tablename__ = "push_subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    endpoint = Column(Text, nullable=False, unique=True)
    p256dh = Column(String(255), nullable=False)
    auth = Column(String(255), nullable=False)

    # Para não notificar o próprio autor
    author_name = Column(String(100), index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_subscription_info(self) -> dict:
        """Formato esperado pelo pywebpush"""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


class AppSetting(Base):
    """Par chave/valor (ex.: vapid_private_pem, vapid_public_key)"""
    __tablename__ = "app_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
