"""
DigPaper - Push Service
Chaves VAPID, subscrições e envio de notificações Web Push

O envio é feito em background depois de cada mensagem do fórum e nunca
falha o pedido original.
"""
import json
import logging
from typing import Optional

from py_vapid import Vapid
from pywebpush import webpush, WebPushException
from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from digpaper.core import settings, generate_vapid_keys, InternalError
from digpaper.database import AsyncSessionLocal
from digpaper.models import PushSubscription, AppSetting

logger = logging.getLogger(__name__)

VAPID_PRIVATE_KEY_SETTING = "vapid_private_pem"
VAPID_PUBLIC_KEY_SETTING = "vapid_public_key"

MAX_BODY_LENGTH = 100
# Subscrições que o serviço de push já não reconhece
GONE_STATUS_CODES = (404, 410)


def build_payload(project_name: str, author_name: str, content: str) -> dict:
    """Título 'Obra - Autor', corpo truncado a 100 caracteres"""
    content = content or ""
    if len(content) > MAX_BODY_LENGTH:
        body = content[:MAX_BODY_LENGTH - 3] + "..."
    else:
        body = content

    return {
        "title": f"{project_name} - {author_name}",
        "body": body,
        "tag": project_name,
    }


class PushService:
    """Notificações Web Push"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_setting(self, key: str) -> Optional[str]:
        result = await self.db.execute(select(AppSetting).where(AppSetting.key == key))
        setting = result.scalar_one_or_none()
        return setting.value if setting else None

    async def init_vapid(self) -> str:
        """Gera as chaves VAPID na primeira execução. Retorna a chave pública."""
        public_key = await self._get_setting(VAPID_PUBLIC_KEY_SETTING)
        private_pem = await self._get_setting(VAPID_PRIVATE_KEY_SETTING)

        if public_key and private_pem:
            return public_key

        private_pem, public_key = generate_vapid_keys()
        for key, value in (
            (VAPID_PRIVATE_KEY_SETTING, private_pem),
            (VAPID_PUBLIC_KEY_SETTING, public_key),
        ):
            await self.db.merge(AppSetting(key=key, value=value))
        await self.db.commit()

        logger.info("Chaves VAPID geradas")
        return public_key

    async def get_vapid_public_key(self) -> str:
        public_key = await self._get_setting(VAPID_PUBLIC_KEY_SETTING)
        if not public_key:
            raise InternalError("VAPID keys not initialized")
        return public_key

    async def subscribe(
        self,
        endpoint: str,
        p256dh: str,
        auth: str,
        author_name: Optional[str] = None
    ) -> PushSubscription:
        """Cria ou atualiza a subscrição (um registo por endpoint)"""
        result = await self.db.execute(
            select(PushSubscription).where(PushSubscription.endpoint == endpoint)
        )
        subscription = result.scalar_one_or_none()

        if subscription:
            subscription.p256dh = p256dh
            subscription.auth = auth
            subscription.author_name = author_name
        else:
            subscription = PushSubscription(
                endpoint=endpoint,
                p256dh=p256dh,
                auth=auth,
                author_name=author_name
            )
            self.db.add(subscription)

        await self.db.commit()
        logger.info(f"Subscrição push registada para {author_name or 'anónimo'}")
        return subscription

    async def unsubscribe(self, endpoint: str) -> bool:
        result = await self.db.execute(
            delete(PushSubscription).where(PushSubscription.endpoint == endpoint)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def notify_new_message(self, project_name: str, author_name: str, content: str) -> int:
        """
        Envia a notificação a todas as subscrições exceto as do autor.

        Retorna o número de envios com sucesso. Erros são registados,
        nunca propagados.
        """
        try:
            private_pem = await self._get_setting(VAPID_PRIVATE_KEY_SETTING)
            if not private_pem:
                logger.warning("Chaves VAPID em falta - notificação não enviada")
                return 0

            result = await self.db.execute(
                select(PushSubscription).where(
                    or_(
                        PushSubscription.author_name.is_(None),
                        PushSubscription.author_name != author_name
                    )
                )
            )
            subscriptions = list(result.scalars().all())
            if not subscriptions:
                return 0

            vapid = Vapid.from_pem(private_pem.encode("utf-8"))
        except Exception:
            logger.exception("Erro ao preparar notificações push")
            return 0

        data = json.dumps(build_payload(project_name, author_name, content))
        claims = {"sub": settings.VAPID_SUBJECT}

        sent = 0
        gone = []
        for subscription in subscriptions:
            try:
                await run_in_threadpool(
                    webpush,
                    subscription_info=subscription.to_subscription_info(),
                    data=data,
                    vapid_private_key=vapid,
                    vapid_claims=dict(claims)
                )
                sent += 1
            except WebPushException as e:
                status_code = getattr(e.response, "status_code", None)
                if status_code in GONE_STATUS_CODES:
                    gone.append(subscription.id)
                else:
                    logger.warning(f"Falha no envio push ({status_code}): {e}")
            except Exception as e:
                logger.warning(f"Falha no envio push: {e}")

        if gone:
            try:
                await self.db.execute(
                    delete(PushSubscription).where(PushSubscription.id.in_(gone))
                )
                await self.db.commit()
                logger.info(f"Removidas {len(gone)} subscrições expiradas")
            except Exception:
                logger.exception("Erro ao remover subscrições expiradas")

        logger.info(f"Notificação '{project_name}' enviada a {sent}/{len(subscriptions)} subscrições")
        return sent


async def notify_new_message_task(project_name: str, author_name: str, content: str) -> None:
    """Background task: abre a sua própria sessão (o pedido já terminou)"""
    try:
        async with AsyncSessionLocal() as db:
            await PushService(db).notify_new_message(project_name, author_name, content)
    except Exception:
        logger.exception("Erro na tarefa de notificações push")
