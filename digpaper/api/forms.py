"""
DigPaper - Multipart helpers
Leitura de formulários multipart (uploads, áudio, webhook de email)
"""
import logging
from typing import Optional

from fastapi import Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from digpaper.core import BadRequestError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_form(request: Request) -> FormData:
    """Lê o formulário do pedido; corpo inválido = BadRequestError"""
    content_type = request.headers.get("content-type", "").lower()
    if not content_type.startswith(FORM_CONTENT_TYPES):
        raise BadRequestError("Expected a multipart/form-data request")

    try:
        return await request.form()
    except (MultiPartException, StarletteHTTPException) as e:
        logger.warning(f"Multipart inválido em {request.url.path}: {e}")
        raise BadRequestError("Malformed multipart payload")


def get_text(form: FormData, name: str) -> Optional[str]:
    value = form.get(name)
    if isinstance(value, str):
        return value.strip() or None
    return None


def get_file(form: FormData, name: str) -> Optional[UploadFile]:
    value = form.get(name)
    if isinstance(value, UploadFile):
        return value
    return None


def first_file(form: FormData, exclude: tuple = ()) -> Optional[UploadFile]:
    """Primeiro ficheiro do formulário cujo campo não está em exclude"""
    for name, value in form.multi_items():
        if name not in exclude and isinstance(value, UploadFile):
            return value
    return None
