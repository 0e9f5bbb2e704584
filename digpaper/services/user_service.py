"""
DigPaper - User Service
Fotos de perfil por nome de autor
"""
import logging
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import NotFoundError, BadRequestError
from digpaper.models import UserProfile

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_profiles(self) -> List[UserProfile]:
        result = await self.db.execute(select(UserProfile).order_by(UserProfile.name))
        return list(result.scalars().all())

    async def get_profile(self, name: str) -> UserProfile:
        result = await self.db.execute(select(UserProfile).where(UserProfile.name == name))
        profile = result.scalar_one_or_none()

        if not profile:
            raise NotFoundError(f"Profile {name} not found")
        return profile

    async def update_profile_photo(self, name: str, photo_url: str) -> UserProfile:
        """Cria ou atualiza a foto do autor"""
        name = (name or "").strip()
        if not name:
            raise BadRequestError("Profile name is required")

        result = await self.db.execute(select(UserProfile).where(UserProfile.name == name))
        profile = result.scalar_one_or_none()

        if profile:
            profile.photo_url = photo_url
            profile.updated_at = datetime.utcnow()
        else:
            profile = UserProfile(name=name, photo_url=photo_url)
            self.db.add(profile)

        await self.db.commit()
        await self.db.refresh(profile)

        logger.info(f"Foto de perfil atualizada: {name}")
        return profile
