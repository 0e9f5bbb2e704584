"""
DigPaper - Forum Service
Mensagens por obra, respostas e listas de tarefas
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from digpaper.core import NotFoundError, BadRequestError
from digpaper.models import ForumMessage, TaskItem, MessageType, Document, DEFAULT_AUTHOR
from digpaper.services.project_service import ProjectService
from digpaper.services.storage import FileStore
from digpaper.utils.files import resolve_extension

logger = logging.getLogger(__name__)

VOICE_PREFIX = "voice_"
VOICE_NOTIFICATION_TEXT = "🎙 Mensagem de voz"
REPLY_NOTIFICATION_TITLE = "Resposta"


def author_or_default(author_name: Optional[str]) -> str:
    author_name = (author_name or "").strip()
    return author_name or DEFAULT_AUTHOR


class ForumService:
    """Fórum de cada obra (e o fórum global 'Geral')"""

    def __init__(self, db: AsyncSession, store: Optional[FileStore] = None):
        self.db = db
        self.store = store or FileStore()
        self.projects = ProjectService(db)

    async def _save(self, message: ForumMessage) -> ForumMessage:
        self.db.add(message)
        await self.db.commit()
        await self.db.refresh(message)
        return message

    async def create_message(
        self,
        project_id: str,
        message_type: str,
        content: Optional[str] = None,
        items: Optional[List[str]] = None,
        author_name: Optional[str] = None
    ) -> ForumMessage:
        """Cria mensagem TEXT ou TASK_LIST (pedido JSON)"""
        normalized = (message_type or "").strip().upper()

        if normalized == MessageType.TEXT.value:
            return await self.create_text_message(project_id, content or "", author_name)
        if normalized == MessageType.TASK_LIST.value:
            return await self.create_task_list(project_id, content, items or [], author_name)

        raise BadRequestError("Invalid message_type. Use TEXT or TASK_LIST")

    async def create_text_message(
        self,
        project_id: str,
        content: str,
        author_name: Optional[str] = None
    ) -> ForumMessage:
        await self.projects.get_by_id(project_id)

        return await self._save(ForumMessage(
            project_id=project_id,
            message_type=MessageType.TEXT.value,
            content=content,
            author_name=author_or_default(author_name)
        ))

    async def create_task_list(
        self,
        project_id: str,
        content: Optional[str],
        items: List[str],
        author_name: Optional[str] = None
    ) -> ForumMessage:
        """Lista de tarefas: a mensagem e os seus itens (linhas vazias ignoradas)"""
        await self.projects.get_by_id(project_id)

        message = ForumMessage(
            project_id=project_id,
            message_type=MessageType.TASK_LIST.value,
            content=content,
            author_name=author_or_default(author_name)
        )
        self.db.add(message)
        await self.db.flush()

        for text in items:
            text = (text or "").strip()
            if text:
                self.db.add(TaskItem(message_id=message.id, text=text))

        await self.db.commit()
        await self.db.refresh(message)
        return message

    async def create_photo_message(
        self,
        project_id: str,
        document_id: str,
        author_name: Optional[str] = None
    ) -> ForumMessage:
        return await self._save(ForumMessage(
            project_id=project_id,
            message_type=MessageType.PHOTO.value,
            document_id=document_id,
            author_name=author_or_default(author_name)
        ))

    async def create_voice_message(
        self,
        project_id: str,
        audio: UploadFile,
        content: Optional[str] = None,
        author_name: Optional[str] = None
    ) -> ForumMessage:
        """Grava o áudio (voice_...) e cria a mensagem VOICE"""
        await self.projects.get_by_id(project_id)

        extension = resolve_extension(audio.filename, audio.content_type)
        audio_path = await self.store.save_upload(audio, extension, prefix=VOICE_PREFIX)

        message = ForumMessage(
            project_id=project_id,
            message_type=MessageType.VOICE.value,
            audio_path=audio_path,
            content=content or None,
            author_name=author_or_default(author_name)
        )
        try:
            return await self._save(message)
        except Exception:
            self.store.delete(audio_path)
            raise

    async def get_by_id(self, message_id: str) -> ForumMessage:
        result = await self.db.execute(select(ForumMessage).where(ForumMessage.id == message_id))
        message = result.scalar_one_or_none()

        if not message:
            raise NotFoundError(f"Message {message_id} not found")
        return message

    async def create_reply(
        self,
        message_id: str,
        content: str,
        author_name: Optional[str] = None
    ) -> ForumMessage:
        """A resposta herda sempre a obra da mensagem original"""
        parent = await self.get_by_id(message_id)

        return await self._save(ForumMessage(
            project_id=parent.project_id,
            parent_id=parent.id,
            message_type=MessageType.TEXT.value,
            content=content,
            author_name=author_or_default(author_name)
        ))

    async def list_messages(self, project_id: str) -> List[ForumMessage]:
        """Mensagens de topo da obra, mais antigas primeiro"""
        await self.projects.get_by_id(project_id)

        result = await self.db.execute(
            select(ForumMessage)
            .where(ForumMessage.project_id == project_id, ForumMessage.parent_id.is_(None))
            .order_by(ForumMessage.created_at)
        )
        return list(result.scalars().all())

    async def list_replies(self, message_id: str) -> List[ForumMessage]:
        await self.get_by_id(message_id)

        result = await self.db.execute(
            select(ForumMessage)
            .where(ForumMessage.parent_id == message_id)
            .order_by(ForumMessage.created_at)
        )
        return list(result.scalars().all())

    async def get_reply_count(self, message_id: str) -> int:
        result = await self.db.execute(
            select(func.count(ForumMessage.id)).where(ForumMessage.parent_id == message_id)
        )
        return result.scalar_one()

    async def get_task_items(self, message_id: str) -> List[TaskItem]:
        result = await self.db.execute(
            select(TaskItem)
            .where(TaskItem.message_id == message_id)
            .order_by(TaskItem.created_at)
        )
        return list(result.scalars().all())

    async def toggle_task_item(self, item_id: str, completed_by: Optional[str] = None) -> TaskItem:
        """Alterna o estado; desmarcar limpa quem e quando"""
        result = await self.db.execute(select(TaskItem).where(TaskItem.id == item_id))
        item = result.scalar_one_or_none()

        if not item:
            raise NotFoundError(f"Task item {item_id} not found")

        if item.completed:
            item.completed = False
            item.completed_by = None
            item.completed_at = None
        else:
            item.completed = True
            item.completed_by = author_or_default(completed_by)
            item.completed_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def build_response(self, message: ForumMessage) -> dict:
        """Campos base + número de respostas + anexos conforme o tipo"""
        response = message.to_dict()
        response["reply_count"] = await self.get_reply_count(message.id)
        response["document"] = None
        response["items"] = None

        if message.message_type == MessageType.PHOTO.value:
            if message.document_id:
                result = await self.db.execute(
                    select(Document).where(Document.id == message.document_id)
                )
                document = result.scalar_one_or_none()
                if document:
                    response["document"] = document.to_dict()
        elif message.message_type == MessageType.TASK_LIST.value:
            items = await self.get_task_items(message.id)
            response["items"] = [item.to_dict() for item in items]

        return response
