"""
DigPaper - Profiles API
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import verify_api_key
from digpaper.database import get_db
from digpaper.schemas import ProfilePhotoUpdate, UserProfileResponse
from digpaper.services import UserService

router = APIRouter(prefix="/profiles", tags=["Profiles"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=List[UserProfileResponse])
async def list_profiles(db: AsyncSession = Depends(get_db)):
    profiles = await UserService(db).list_profiles()
    return [p.to_dict() for p in profiles]


@router.put("/{name}/photo", response_model=UserProfileResponse)
async def update_profile_photo(
    name: str,
    request: ProfilePhotoUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Cria ou substitui a foto do autor"""
    profile = await UserService(db).update_profile_photo(name, request.photo_url)
    return profile.to_dict()


@router.get("/{name}", response_model=UserProfileResponse)
async def get_profile(name: str, db: AsyncSession = Depends(get_db)):
    profile = await UserService(db).get_profile(name)
    return profile.to_dict()
