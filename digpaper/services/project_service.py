"""
DigPaper - Project Service
Registo de obras
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import NotFoundError, BadRequestError
from digpaper.database import GERAL_PROJECT_NAME
from digpaper.models import Project, ProjectStatus, Document
from digpaper.schemas import ProjectCreate, ProjectDetailsUpdate

logger = logging.getLogger(__name__)


class ProjectService:
    """Operações sobre obras"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: ProjectCreate) -> Project:
        name = (data.name or "").strip()
        if not name:
            raise BadRequestError("Project name is required")
        if name.lower() == GERAL_PROJECT_NAME.lower():
            raise BadRequestError(f"The name {GERAL_PROJECT_NAME} is reserved")

        project = Project(
            name=name,
            address=data.address,
            client_phone=data.client_phone,
            status=ProjectStatus.ACTIVE.value
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)

        logger.info(f"Obra criada: {project.name} ({project.id})")
        return project

    async def get_by_id(self, project_id: str) -> Project:
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        project = result.scalar_one_or_none()

        if not project:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    async def find(self, project_id: Optional[str]) -> Optional[Project]:
        """Como get_by_id mas devolve None"""
        if not project_id:
            return None
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def get_geral(self) -> Project:
        """Obra especial do fórum global"""
        result = await self.db.execute(
            select(Project)
            .where(Project.name == GERAL_PROJECT_NAME)
            .order_by(Project.created_at)
            .limit(1)
        )
        project = result.scalar_one_or_none()

        if not project:
            raise NotFoundError("Geral project not found")
        return project

    async def list_projects(self, status: Optional[str] = None) -> List[Project]:
        """Lista obras (mais recentes primeiro), com filtro opcional por estado"""
        query = select(Project)

        if status:
            normalized = status.strip().upper()
            if normalized not in [s.value for s in ProjectStatus]:
                raise BadRequestError(f"Invalid status '{status}'. Use ACTIVE or ARCHIVED")
            query = query.where(Project.status == normalized)

        query = query.order_by(Project.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def document_counts(self, project_ids: List[str]) -> Dict[str, int]:
        """Número de documentos por obra"""
        if not project_ids:
            return {}

        result = await self.db.execute(
            select(Document.project_id, func.count(Document.id))
            .where(Document.project_id.in_(project_ids))
            .group_by(Document.project_id)
        )
        return {project_id: count for project_id, count in result.all()}

    async def to_response(self, project: Project) -> dict:
        counts = await self.document_counts([project.id])
        return project.to_dict(document_count=counts.get(project.id, 0))

    async def update_status(self, project_id: str, status: ProjectStatus) -> Project:
        project = await self.get_by_id(project_id)
        project.status = ProjectStatus(status).value

        await self.db.commit()
        await self.db.refresh(project)

        logger.info(f"Obra {project.name}: estado {project.status}")
        return project

    async def update_details(self, project_id: str, data: ProjectDetailsUpdate) -> Project:
        project = await self.get_by_id(project_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(project, field, value)

        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def delete(self, project_id: str) -> None:
        """
        Apaga uma obra.

        As foreign keys tratam do resto: mensagens e regras de email são
        apagadas, os documentos voltam à Inbox.
        """
        project = await self.get_by_id(project_id)
        if project.name == GERAL_PROJECT_NAME:
            raise BadRequestError("The Geral project cannot be deleted")

        await self.db.execute(delete(Project).where(Project.id == project_id))
        await self.db.commit()

        logger.info(f"Obra apagada: {project.name} ({project_id})")
