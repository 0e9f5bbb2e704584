"""
DigPaper - File helpers
Nomes de ficheiros, extensões e categorias de MIME type
"""
import re
import uuid
from datetime import datetime
from pathlib import PurePath
from typing import Optional

from digpaper.models import FileType

DEFAULT_EXTENSION = "bin"

_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,10}$")

# Nomes genéricos de câmaras de telemóvel e browsers
GENERIC_NAMES = {
    "image.jpg",
    "image.jpeg",
    "image.png",
    "photo.jpg",
    "photo.jpeg",
    "blob",
    "unknown",
}
GENERIC_PREFIXES = ("img_", "dsc", "photo_")

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-excel": "xls",
    "text/csv": "csv",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "doc",
    "text/plain": "txt",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
}


def extension_from_filename(filename: Optional[str]) -> Optional[str]:
    """Extensão em minúsculas, apenas alfanumérica (nunca um caminho)"""
    if not filename:
        return None
    suffix = PurePath(filename.replace("\\", "/")).suffix.lstrip(".").lower()
    if _EXTENSION_RE.match(suffix):
        return suffix
    return None


def resolve_extension(filename: Optional[str], content_type: Optional[str] = None) -> str:
    """Extensão pelo nome do ficheiro; senão pelo content type; senão 'bin'"""
    extension = extension_from_filename(filename)
    if extension:
        return extension
    if content_type:
        mime = content_type.split(";")[0].strip().lower()
        return CONTENT_TYPE_EXTENSIONS.get(mime, DEFAULT_EXTENSION)
    return DEFAULT_EXTENSION


def generate_stored_filename(extension: str, prefix: str = "", now: Optional[datetime] = None) -> str:
    """
    Gera nome único: [prefixo]YYYY-MM-DD_HH-MM-SS_xxxx.ext

    O sufixo aleatório resolve empates (vários uploads no mesmo segundo).
    """
    now = now or datetime.now()
    random_suffix = uuid.uuid4().hex[:4]
    return f"{prefix}{now.strftime('%Y-%m-%d_%H-%M-%S')}_{random_suffix}.{extension}"


def categorize_mime_type(content_type: Optional[str]) -> str:
    """Converte MIME type numa categoria simples"""
    mime = (content_type or "").split(";")[0].strip().lower()

    if mime.startswith("image/"):
        return FileType.IMAGE.value
    if mime == "application/pdf":
        return FileType.PDF.value
    if "spreadsheet" in mime or "excel" in mime or mime == "text/csv":
        return FileType.EXCEL.value
    if "word" in mime or "document" in mime:
        return FileType.WORD.value
    if mime.startswith("video/"):
        return FileType.VIDEO.value
    return FileType.OTHER.value


def is_generic_filename(filename: Optional[str]) -> bool:
    """Verifica se o nome é genérico (câmara, clipboard, desconhecido)"""
    lower = (filename or "").strip().lower()
    if not lower:
        return True
    return lower in GENERIC_NAMES or lower.startswith(GENERIC_PREFIXES)


def display_name(filename: Optional[str], now: Optional[datetime] = None) -> str:
    """Nome legível: 'Foto DD-MM-YYYY HH:MM' para nomes genéricos"""
    if is_generic_filename(filename):
        now = now or datetime.now()
        return f"Foto {now.strftime('%d-%m-%Y %H:%M')}"
    return PurePath(filename.replace("\\", "/")).name
