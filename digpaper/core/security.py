"""
DigPaper - Security
Autenticação por chave partilhada e geração de chaves VAPID
"""
import base64
import logging
import secrets
from typing import Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.backends import default_backend
from fastapi import Security
from fastapi.security import APIKeyHeader

from .config import settings
from .exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def verify_api_key(provided_key: Optional[str] = Security(api_key_header)) -> None:
    """
    Dependency que valida o header X-API-Key.
    Sem APP_API_KEY configurada todos os pedidos passam (modo desenvolvimento).
    """
    expected_key = settings.APP_API_KEY
    if not expected_key:
        logger.debug("APP_API_KEY não definida - API sem proteção")
        return

    if not provided_key:
        logger.debug("Pedido sem API key")
        raise UnauthorizedError("Missing API key")

    if not secrets.compare_digest(provided_key, expected_key):
        logger.warning("API key inválida")
        raise UnauthorizedError("Invalid API key")


def generate_vapid_keys() -> Tuple[str, str]:
    """
    Gera par de chaves VAPID (EC P-256).

    Retorna (private_pem, public_key) onde public_key é o ponto não comprimido
    em base64url sem padding, no formato esperado pelo applicationServerKey
    do browser.
    """
    private_key = ec.generate_private_key(ec.SECP256R1(), default_backend())

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode("utf-8")

    raw_public = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint
    )
    public_key = base64.urlsafe_b64encode(raw_public).rstrip(b"=").decode("ascii")

    return private_pem, public_key
