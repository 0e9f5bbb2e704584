"""
DigPaper - Document Service
Fluxo de documentos: upload para a Inbox, atribuição a obras, notas e estados

Workflow:
1. Fotos e ficheiros chegam à Inbox (sem obra)
2. O escritório atribui cada documento a uma obra
3. Atribuir a null devolve o documento à Inbox
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from digpaper.core import settings, NotFoundError
from digpaper.models import Document, DocumentStatus, FileType, ForumMessage
from digpaper.services.forum_service import ForumService, VOICE_PREFIX
from digpaper.services.project_service import ProjectService
from digpaper.services.storage import FileStore
from digpaper.utils.files import resolve_extension, categorize_mime_type, display_name

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class DocumentService:
    """Operações sobre documentos"""

    def __init__(self, db: AsyncSession, store: Optional[FileStore] = None):
        self.db = db
        self.store = store or FileStore()
        self.projects = ProjectService(db)

    async def _insert(self, document: Document, *stored_files: Optional[str]) -> Document:
        """Grava o registo; se falhar remove os ficheiros já escritos"""
        try:
            self.db.add(document)
            await self.db.commit()
            await self.db.refresh(document)
        except Exception:
            await self.db.rollback()
            for filename in stored_files:
                if filename:
                    self.store.delete(filename)
            raise
        return document

    async def upload(self, upload: UploadFile, audio: Optional[UploadFile] = None) -> Document:
        """
        Recebe um ficheiro (e memo de voz opcional) e cria o documento na Inbox.

        O ficheiro é escrito por blocos, nunca carregado inteiro em memória.
        """
        extension = resolve_extension(upload.filename, upload.content_type)
        file_path = await self.store.save_upload(upload, extension)

        audio_path = None
        if audio is not None:
            try:
                audio_ext = resolve_extension(audio.filename, audio.content_type)
                audio_path = await self.store.save_upload(audio, audio_ext, prefix=VOICE_PREFIX)
            except Exception:
                self.store.delete(file_path)
                raise

        document = Document(
            project_id=None,
            file_path=file_path,
            file_type=categorize_mime_type(upload.content_type),
            original_name=display_name(upload.filename),
            status=DocumentStatus.DEFAULT.value,
            audio_path=audio_path
        )
        document = await self._insert(document, file_path, audio_path)

        logger.info(f"Upload recebido: {document.original_name} -> {file_path}")
        return document

    async def create_from_bytes(
        self,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        project_id: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Document:
        """Cria documento a partir de conteúdo já lido (anexos de email)"""
        extension = resolve_extension(filename, content_type)
        file_path = self.store.save_bytes(data, extension)

        document = Document(
            project_id=project_id,
            file_path=file_path,
            file_type=categorize_mime_type(content_type),
            original_name=filename or file_path,
            notes=notes,
            status=DocumentStatus.DEFAULT.value
        )
        return await self._insert(document, file_path)

    async def get_by_id(self, document_id: str) -> Document:
        result = await self.db.execute(select(Document).where(Document.id == document_id))
        document = result.scalar_one_or_none()

        if not document:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    async def list_inbox(self) -> List[Document]:
        """Documentos sem obra, mais recentes primeiro"""
        result = await self.db.execute(
            select(Document)
            .where(Document.project_id.is_(None))
            .order_by(Document.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def list_by_project(self, project_id: str) -> List[Document]:
        await self.projects.get_by_id(project_id)

        result = await self.db.execute(
            select(Document)
            .where(Document.project_id == project_id)
            .order_by(Document.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def assign_to_project(
        self,
        document_id: str,
        project_id: Optional[str],
        category: Optional[str] = None
    ) -> Tuple[Document, Optional[ForumMessage]]:
        """
        Atribui o documento a uma obra (None = volta à Inbox).

        Retorna o documento e, quando AUTO_POST_ASSIGNED_PHOTOS está ativo e
        uma imagem sai da Inbox, a mensagem PHOTO publicada no fórum da obra.
        """
        document = await self.get_by_id(document_id)
        if project_id is not None:
            await self.projects.get_by_id(project_id)

        was_in_inbox = document.is_in_inbox

        document.project_id = project_id
        category = _blank_to_none(category)
        if category is not None:
            document.category = category

        await self.db.commit()
        await self.db.refresh(document)

        logger.info(f"Documento {document_id} atribuído a {project_id or 'Inbox'}")

        message = None
        if (
            settings.AUTO_POST_ASSIGNED_PHOTOS
            and project_id is not None
            and was_in_inbox
            and document.file_type == FileType.IMAGE.value
        ):
            message = await ForumService(self.db, self.store).create_photo_message(
                project_id, document.id
            )

        return document, message

    async def batch_assign(self, document_ids: List[str], project_id: Optional[str]) -> List[Document]:
        """
        Atribui vários documentos de uma vez.

        Cada documento é tratado individualmente: os que não existem são
        ignorados. Uma obra inexistente falha o lote inteiro.
        """
        if project_id is not None:
            await self.projects.get_by_id(project_id)

        updated = []
        for document_id in document_ids:
            result = await self.db.execute(select(Document).where(Document.id == document_id))
            document = result.scalar_one_or_none()

            if not document:
                logger.warning(f"Batch assign: documento {document_id} não encontrado")
                continue

            document.project_id = project_id
            await self.db.commit()
            await self.db.refresh(document)
            updated.append(document)

        logger.info(f"Batch assign: {len(updated)}/{len(document_ids)} documentos para {project_id or 'Inbox'}")
        return updated

    async def update_notes(self, document_id: str, notes: Optional[str]) -> Document:
        document = await self.get_by_id(document_id)
        document.notes = _blank_to_none(notes)

        await self.db.commit()
        await self.db.refresh(document)
        return document

    async def update_status(self, document_id: str, status: DocumentStatus) -> Document:
        document = await self.get_by_id(document_id)
        document.status = DocumentStatus(status).value

        await self.db.commit()
        await self.db.refresh(document)
        return document

    async def update_category(self, document_id: str, category: Optional[str]) -> Document:
        document = await self.get_by_id(document_id)
        document.category = _blank_to_none(category)

        await self.db.commit()
        await self.db.refresh(document)
        return document

    async def delete(self, document_id: str) -> None:
        """Apaga o registo e depois os ficheiros (falhas no disco só são registadas)"""
        document = await self.get_by_id(document_id)
        file_path = document.file_path
        audio_path = document.audio_path

        await self.db.delete(document)
        await self.db.commit()

        self.store.delete(file_path)
        if audio_path:
            self.store.delete(audio_path)

        logger.info(f"Documento apagado: {document_id} ({file_path})")
