"""
DigPaper - Email API
Webhook de emails recebidos e gestão de regras/filtros

O webhook e o estado são públicos (chamados pelo fornecedor de email);
a gestão de regras e filtros exige a API key.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from digpaper.core import settings, verify_api_key
from digpaper.core.rate_limit import limiter
from digpaper.database import get_db
from digpaper.schemas import (
    EmailRuleCreate,
    EmailRuleResponse,
    EmailFilterCreate,
    EmailFilterResponse,
    EmailWebhookResponse
)
from digpaper.services import EmailService, parse_inbound_form
from digpaper.api.forms import read_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email", tags=["Email"])


@router.post("/inbound", response_model=EmailWebhookResponse)
@limiter.limit(settings.EMAIL_WEBHOOK_RATE_LIMIT)
async def receive_inbound_email(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Webhook para Mailgun / SendGrid (multipart/form-data).

    Anexos de remetentes com regra vão para a obra da regra,
    os restantes para a Inbox.
    """
    form = await read_form(request)
    try:
        email = parse_inbound_form(form)
        result = await EmailService(db).process_inbound_email(email)
    finally:
        await form.close()

    return {
        "success": True,
        "message": result.message,
        "documents_created": result.documents_created,
        "documents_filtered": result.documents_filtered,
    }


@router.get("/status")
async def email_webhook_status(db: AsyncSession = Depends(get_db)):
    """Informação para configurar o webhook no fornecedor"""
    return await EmailService(db).status()


@router.get("/rules", response_model=List[EmailRuleResponse], dependencies=[Depends(verify_api_key)])
async def list_email_rules(db: AsyncSession = Depends(get_db)):
    rules = await EmailService(db).list_rules()
    return [r.to_dict() for r in rules]


@router.post(
    "/rules",
    response_model=EmailRuleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_api_key)]
)
async def create_email_rule(
    request: EmailRuleCreate,
    db: AsyncSession = Depends(get_db)
):
    """Ex.: "*@cliente.pt" -> obra"""
    rule = await EmailService(db).create_rule(request)
    return rule.to_dict()


@router.delete(
    "/rules/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(verify_api_key)]
)
async def delete_email_rule(
    rule_id: str,
    db: AsyncSession = Depends(get_db)
):
    await EmailService(db).delete_rule(rule_id)


@router.get("/filters", response_model=List[EmailFilterResponse], dependencies=[Depends(verify_api_key)])
async def list_email_filters(db: AsyncSession = Depends(get_db)):
    filters = await EmailService(db).list_filters()
    return [f.to_dict() for f in filters]


@router.post(
    "/filters",
    response_model=EmailFilterResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_api_key)]
)
async def create_email_filter(
    request: EmailFilterCreate,
    db: AsyncSession = Depends(get_db)
):
    """filter_type: filename, extension ou size_max"""
    email_filter = await EmailService(db).create_filter(request)
    return email_filter.to_dict()


@router.delete(
    "/filters/{filter_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(verify_api_key)]
)
async def delete_email_filter(
    filter_id: str,
    db: AsyncSession = Depends(get_db)
):
    await EmailService(db).delete_filter(filter_id)
