"""
DigPaper - Projects API
CRUD de obras e documentos de cada obra
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import verify_api_key
from digpaper.database import get_db
from digpaper.schemas import (
    ProjectCreate,
    ProjectStatusUpdate,
    ProjectDetailsUpdate,
    ProjectResponse,
    DocumentResponse
)
from digpaper.services import ProjectService, DocumentService

router = APIRouter(prefix="/projects", tags=["Projects"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db)
):
    """Lista obras (ACTIVE / ARCHIVED opcional)"""
    service = ProjectService(db)
    projects = await service.list_projects(status_filter)
    counts = await service.document_counts([p.id for p in projects])

    return [p.to_dict(document_count=counts.get(p.id, 0)) for p in projects]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    db: AsyncSession = Depends(get_db)
):
    """Cria nova obra"""
    project = await ProjectService(db).create(request)
    return project.to_dict()


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = ProjectService(db)
    project = await service.get_by_id(project_id)
    return await service.to_response(project)


@router.patch("/{project_id}/status", response_model=ProjectResponse)
async def update_project_status(
    project_id: str,
    request: ProjectStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Arquiva ou reativa uma obra"""
    service = ProjectService(db)
    project = await service.update_status(project_id, request.status)
    return await service.to_response(project)


@router.patch("/{project_id}/details", response_model=ProjectResponse)
async def update_project_details(
    project_id: str,
    request: ProjectDetailsUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Atualiza morada e telefone do cliente"""
    service = ProjectService(db)
    project = await service.update_details(project_id, request)
    return await service.to_response(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Apaga a obra; os documentos voltam à Inbox"""
    await ProjectService(db).delete(project_id)


@router.get("/{project_id}/documents", response_model=List[DocumentResponse])
async def list_project_documents(
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    documents = await DocumentService(db).list_by_project(project_id)
    return [d.to_dict() for d in documents]
