"""
DigPaper - Push API
Chave pública VAPID e subscrições de notificações
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import verify_api_key
from digpaper.database import get_db
from digpaper.schemas import PushSubscribeRequest, PushUnsubscribeRequest, VapidKeyResponse
from digpaper.services import PushService

router = APIRouter(prefix="/push", tags=["Push"], dependencies=[Depends(verify_api_key)])


@router.get("/vapid-key", response_model=VapidKeyResponse)
async def get_vapid_key(db: AsyncSession = Depends(get_db)):
    """applicationServerKey para o pushManager.subscribe() do browser"""
    public_key = await PushService(db).get_vapid_public_key()
    return {"publicKey": public_key}


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
async def push_subscribe(
    request: PushSubscribeRequest,
    db: AsyncSession = Depends(get_db)
):
    await PushService(db).subscribe(
        request.endpoint,
        request.p256dh,
        request.auth,
        author_name=request.author_name
    )
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/unsubscribe", status_code=status.HTTP_204_NO_CONTENT)
async def push_unsubscribe(
    request: PushUnsubscribeRequest,
    db: AsyncSession = Depends(get_db)
):
    await PushService(db).unsubscribe(request.endpoint)
