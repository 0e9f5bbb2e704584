"""
DigPaper - File Store
Escrita e remoção de ficheiros no diretório de uploads

Os uploads são escritos por blocos à medida que chegam, nunca carregados
inteiros em memória. Os ficheiros são sempre referenciados pelo nome gerado.
"""
import logging
import os
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

from digpaper.core import settings, BadRequestError
from digpaper.utils.files import generate_stored_filename

logger = logging.getLogger(__name__)

# Tentativas de gerar um nome livre antes de desistir
MAX_NAME_ATTEMPTS = 10


class FileStore:
    """Diretório de ficheiros carregados"""

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        chunk_size: Optional[int] = None,
        max_bytes: Optional[int] = None
    ):
        self.base_dir = Path(base_dir or settings.UPLOADS_DIR)
        self.chunk_size = chunk_size or settings.UPLOAD_CHUNK_SIZE
        self.max_bytes = max_bytes or settings.max_upload_bytes

    def path_for(self, filename: str) -> Path:
        """Caminho absoluto de um ficheiro guardado (apenas nomes simples)"""
        if not filename or Path(filename).name != filename:
            raise BadRequestError(f"Invalid stored filename '{filename}'")
        return self.base_dir / filename

    def _open_new_file(self, extension: str, prefix: str):
        """Cria um ficheiro com nome novo (modo exclusivo, nunca reutiliza nomes)"""
        self.base_dir.mkdir(parents=True, exist_ok=True)

        for _ in range(MAX_NAME_ATTEMPTS):
            filename = generate_stored_filename(extension, prefix=prefix)
            try:
                return filename, open(self.base_dir / filename, "xb")
            except FileExistsError:
                logger.debug(f"Nome {filename} já existe, a gerar outro")

        raise FileExistsError(f"Could not allocate a unique filename in {self.base_dir}")

    async def save_upload(self, upload: UploadFile, extension: str, prefix: str = "") -> str:
        """
        Copia um upload para o disco por blocos.

        Retorna o nome gerado. Se o limite de tamanho for ultrapassado o
        ficheiro parcial é removido e é levantado BadRequestError.
        """
        filename, handle = self._open_new_file(extension, prefix)
        written = 0

        try:
            with handle:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise BadRequestError(
                            f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)} MB"
                        )
                    handle.write(chunk)
        except Exception:
            self.delete(filename)
            raise

        logger.debug(f"Ficheiro escrito: {filename} ({written} bytes)")
        return filename

    def save_bytes(self, data: bytes, extension: str, prefix: str = "") -> str:
        """Grava conteúdo já lido (anexos de email)"""
        filename, handle = self._open_new_file(extension, prefix)

        try:
            with handle:
                handle.write(data)
        except Exception:
            self.delete(filename)
            raise

        logger.debug(f"Ficheiro escrito: {filename} ({len(data)} bytes)")
        return filename

    def delete(self, filename: str) -> bool:
        """Remove um ficheiro. Falhas são apenas registadas."""
        try:
            os.remove(self.path_for(filename))
            return True
        except FileNotFoundError:
            logger.warning(f"Ficheiro já não existe: {filename}")
        except (OSError, BadRequestError) as e:
            logger.error(f"Erro ao remover ficheiro {filename}: {e}")
        return False
