"""
DigPaper - Rate limiting
Limite de pedidos por IP para endpoints públicos (webhook de email)
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
