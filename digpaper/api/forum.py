"""
DigPaper - Forum API
Mensagens por obra, respostas, listas de tarefas e fórum "Geral"

Cada mensagem criada agenda uma notificação push em background.
"""
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import verify_api_key, BadRequestError
from digpaper.database import get_db
from digpaper.schemas import (
    ForumMessageCreate,
    ReplyCreate,
    TaskItemToggle,
    TaskItemResponse,
    ForumMessageResponse,
    ProjectResponse
)
from digpaper.services import ForumService, ProjectService, notify_new_message_task
from digpaper.services.forum_service import VOICE_NOTIFICATION_TEXT, REPLY_NOTIFICATION_TITLE
from digpaper.api.forms import read_form, get_file, get_text

router = APIRouter(tags=["Forum"], dependencies=[Depends(verify_api_key)])


@router.get("/projects/{project_id}/forum", response_model=List[ForumMessageResponse])
async def list_forum_messages(
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Mensagens de topo, mais antigas primeiro"""
    service = ForumService(db)
    messages = await service.list_messages(project_id)
    return [await service.build_response(m) for m in messages]


@router.post(
    "/projects/{project_id}/forum",
    response_model=ForumMessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_forum_message(
    project_id: str,
    request: ForumMessageCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """Mensagem TEXT ou TASK_LIST"""
    service = ForumService(db)
    message = await service.create_message(
        project_id,
        request.message_type,
        content=request.content,
        items=request.items,
        author_name=request.author_name
    )
    project = await service.projects.get_by_id(project_id)

    background_tasks.add_task(
        notify_new_message_task, project.name, message.author_name, request.content or ""
    )
    return await service.build_response(message)


@router.post(
    "/projects/{project_id}/forum/voice",
    response_model=ForumMessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_voice_message(
    project_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """Mensagem de voz (multipart: audio, content e author_name opcionais)"""
    service = ForumService(db)

    form = await read_form(request)
    try:
        audio = get_file(form, "audio")
        if audio is None:
            raise BadRequestError("No audio file provided")

        message = await service.create_voice_message(
            project_id,
            audio,
            content=get_text(form, "content"),
            author_name=get_text(form, "author_name")
        )
    finally:
        await form.close()

    project = await service.projects.get_by_id(project_id)
    background_tasks.add_task(
        notify_new_message_task, project.name, message.author_name, VOICE_NOTIFICATION_TEXT
    )
    return await service.build_response(message)


@router.get("/forum/geral", response_model=ProjectResponse)
async def get_geral_project(db: AsyncSession = Depends(get_db)):
    """Obra especial usada como fórum global"""
    service = ProjectService(db)
    project = await service.get_geral()
    return await service.to_response(project)


@router.get("/forum/{message_id}/replies", response_model=List[ForumMessageResponse])
async def list_replies(
    message_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = ForumService(db)
    replies = await service.list_replies(message_id)
    return [await service.build_response(r) for r in replies]


@router.post(
    "/forum/{message_id}/replies",
    response_model=ForumMessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_reply(
    message_id: str,
    request: ReplyCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """A resposta fica sempre na obra da mensagem original"""
    service = ForumService(db)
    reply = await service.create_reply(message_id, request.content, request.author_name)

    background_tasks.add_task(
        notify_new_message_task, REPLY_NOTIFICATION_TITLE, reply.author_name, request.content
    )
    return await service.build_response(reply)


@router.patch("/tasks/{item_id}/toggle", response_model=TaskItemResponse)
async def toggle_task_item(
    item_id: str,
    request: Optional[TaskItemToggle] = None,
    db: AsyncSession = Depends(get_db)
):
    """Marca / desmarca um item da lista de tarefas"""
    completed_by = request.completed_by if request else None
    item = await ForumService(db).toggle_task_item(item_id, completed_by)
    return item.to_dict()
