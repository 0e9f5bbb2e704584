"""
DigPaper - Documents API
Upload para a Inbox, atribuição a obras, notas, estados e categorias
"""
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import verify_api_key, BadRequestError
from digpaper.database import get_db
from digpaper.models import DocumentStatus
from digpaper.schemas import (
    DocumentAssign,
    DocumentBatchAssign,
    DocumentNotesUpdate,
    DocumentStatusUpdate,
    DocumentCategoryUpdate,
    DocumentResponse,
    UploadResponse
)
from digpaper.services import DocumentService, notify_new_message_task
from digpaper.api.forms import read_form, get_file, first_file

router = APIRouter(tags=["Documents"], dependencies=[Depends(verify_api_key)])

PHOTO_NOTIFICATION_TEXT = "📷 Nova foto"


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Upload de ficheiro (multipart).

    Campo "file" (ou o primeiro ficheiro enviado) e "audio" opcional
    com um memo de voz. O documento fica na Inbox.
    """
    form = await read_form(request)
    try:
        upload = get_file(form, "file") or first_file(form, exclude=("audio",))
        if upload is None:
            raise BadRequestError("No file provided")

        document = await DocumentService(db).upload(upload, audio=get_file(form, "audio"))
    finally:
        await form.close()

    return document.to_dict()


@router.get("/documents/inbox", response_model=List[DocumentResponse])
async def list_inbox(db: AsyncSession = Depends(get_db)):
    """Documentos à espera de ser atribuídos"""
    documents = await DocumentService(db).list_inbox()
    return [d.to_dict() for d in documents]


@router.patch("/documents/batch-assign", response_model=List[DocumentResponse])
async def batch_assign_documents(
    request: DocumentBatchAssign,
    db: AsyncSession = Depends(get_db)
):
    """Atribui vários documentos; devolve apenas os atualizados"""
    documents = await DocumentService(db).batch_assign(request.document_ids, request.project_id)
    return [d.to_dict() for d in documents]


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).get_by_id(document_id)
    return document.to_dict()


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Apaga o documento e os ficheiros"""
    await DocumentService(db).delete(document_id)


@router.patch("/documents/{document_id}/assign", response_model=DocumentResponse)
async def assign_document(
    document_id: str,
    request: DocumentAssign,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """Atribui a uma obra (project_id null = volta à Inbox)"""
    service = DocumentService(db)
    document, message = await service.assign_to_project(
        document_id, request.project_id, request.category
    )

    if message is not None:
        project = await service.projects.get_by_id(message.project_id)
        background_tasks.add_task(
            notify_new_message_task, project.name, message.author_name, PHOTO_NOTIFICATION_TEXT
        )

    return document.to_dict()


@router.patch("/documents/{document_id}/notes", response_model=DocumentResponse)
async def update_document_notes(
    document_id: str,
    request: DocumentNotesUpdate,
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).update_notes(document_id, request.notes)
    return document.to_dict()


@router.patch("/documents/{document_id}/status", response_model=DocumentResponse)
async def update_document_status(
    document_id: str,
    request: DocumentStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """DEFAULT, DOUBT, IN_PROGRESS ou COMPLETED"""
    document = await DocumentService(db).update_status(document_id, DocumentStatus(request.status))
    return document.to_dict()


@router.patch("/documents/{document_id}/category", response_model=DocumentResponse)
async def update_document_category(
    document_id: str,
    request: DocumentCategoryUpdate,
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).update_category(document_id, request.category)
    return document.to_dict()
