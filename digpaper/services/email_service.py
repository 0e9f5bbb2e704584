"""
DigPaper - Email Service
Ingestão de emails via webhook (Mailgun, SendGrid) e gestão de regras/filtros

Fluxo de um email recebido:
1. Campos do formulário multipart mapeados por papel (remetente, assunto, anexos)
2. Regra de remetente decide a obra (sem regra = Inbox)
3. Filtros rejeitam anexos indesejados (logótipos, assinaturas)
4. Cada anexo restante passa a documento
"""
import enum
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData, UploadFile

from digpaper.core import settings, NotFoundError, BadRequestError
from digpaper.models import EmailRule, EmailFilter, FilterType
from digpaper.schemas import EmailRuleCreate, EmailFilterCreate
from digpaper.services.document_service import DocumentService
from digpaper.services.matching import find_matching_rule, find_rejecting_filter, normalize_sender
from digpaper.services.project_service import ProjectService
from digpaper.services.storage import FileStore

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Email sem assunto"
DEFAULT_SENDER = "unknown@email.com"
INBOUND_ENDPOINT = "/api/email/inbound"
SUPPORTED_SERVICES = ["mailgun", "sendgrid"]


class FieldRole(str, enum.Enum):
    SENDER = "sender"
    SUBJECT = "subject"
    BODY = "body"
    ATTACHMENT = "attachment"


# Nome do campo -> papel (primeira correspondência ganha)
FIELD_ROLES: List[Tuple[re.Pattern, FieldRole]] = [
    (re.compile(r"^from$", re.IGNORECASE), FieldRole.SENDER),
    (re.compile(r"^subject$", re.IGNORECASE), FieldRole.SUBJECT),
    (re.compile(r"^(body-plain|text|body-html)$", re.IGNORECASE), FieldRole.BODY),
    (re.compile(r"^attachment-?\d+$", re.IGNORECASE), FieldRole.ATTACHMENT),
    (re.compile(r"^\d+$"), FieldRole.ATTACHMENT),
]


def field_role(name: str) -> Optional[FieldRole]:
    for pattern, role in FIELD_ROLES:
        if pattern.match(name):
            return role
    return None


@dataclass
class InboundEmail:
    sender: str = DEFAULT_SENDER
    subject: str = DEFAULT_SUBJECT
    body: Optional[str] = None
    attachments: List[UploadFile] = field(default_factory=list)


@dataclass
class EmailProcessingResult:
    sender: str
    subject: str
    documents_created: int = 0
    documents_filtered: int = 0

    @property
    def message(self) -> str:
        return (
            f"Processed email from {self.sender}: "
            f"{self.documents_created} document(s) created, "
            f"{self.documents_filtered} filtered"
        )


def parse_inbound_form(form: FormData) -> InboundEmail:
    """Converte o formulário do fornecedor de email num InboundEmail"""
    email = InboundEmail()

    for name, value in form.multi_items():
        role = field_role(name)

        if role is None:
            logger.debug(f"Campo de email ignorado: {name}")
            continue

        if role == FieldRole.ATTACHMENT:
            if isinstance(value, UploadFile):
                email.attachments.append(value)
            else:
                logger.debug(f"Campo {name} sem ficheiro - ignorado")
            continue

        if isinstance(value, UploadFile):
            logger.debug(f"Campo {name} com ficheiro inesperado - ignorado")
            continue

        text = value.strip()
        if role == FieldRole.SENDER and text:
            email.sender = text
        elif role == FieldRole.SUBJECT and text:
            email.subject = text
        elif role == FieldRole.BODY and text and not email.body:
            email.body = text

    return email


def build_notes(sender: str, subject: str) -> str:
    return f"📧 Email de: {sender}\n📋 Assunto: {subject}"


class EmailService:
    """Webhook de email, regras de encaminhamento e filtros de anexos"""

    def __init__(self, db: AsyncSession, store: Optional[FileStore] = None):
        self.db = db
        self.store = store or FileStore()
        self.projects = ProjectService(db)

    # ==================== Regras ====================

    async def list_rules(self, active_only: bool = False) -> List[EmailRule]:
        query = select(EmailRule)
        if active_only:
            query = query.where(EmailRule.active.is_(True))
        result = await self.db.execute(query.order_by(EmailRule.created_at.desc()))
        return list(result.scalars().all())

    async def create_rule(self, data: EmailRuleCreate) -> EmailRule:
        pattern = (data.sender_pattern or "").strip()
        if not pattern:
            raise BadRequestError("sender_pattern is required")

        if data.project_id is not None:
            await self.projects.get_by_id(data.project_id)

        rule = EmailRule(
            sender_pattern=pattern,
            project_id=data.project_id,
            description=data.description,
            active=True
        )
        self.db.add(rule)
        await self.db.commit()
        await self.db.refresh(rule)

        logger.info(f"Regra de email criada: {pattern} -> {data.project_id or 'Inbox'}")
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        result = await self.db.execute(delete(EmailRule).where(EmailRule.id == rule_id))
        if result.rowcount == 0:
            raise NotFoundError(f"Email rule {rule_id} not found")
        await self.db.commit()

    # ==================== Filtros ====================

    async def list_filters(self, active_only: bool = False) -> List[EmailFilter]:
        query = select(EmailFilter)
        if active_only:
            query = query.where(EmailFilter.active.is_(True))
        result = await self.db.execute(query.order_by(EmailFilter.created_at.desc()))
        return list(result.scalars().all())

    async def create_filter(self, data: EmailFilterCreate) -> EmailFilter:
        pattern = (data.pattern or "").strip()
        if not pattern:
            raise BadRequestError("pattern is required")

        filter_type = (data.filter_type or "").strip().lower()
        valid_types = [t.value for t in FilterType]
        if filter_type not in valid_types:
            raise BadRequestError(
                f"Invalid filter_type '{data.filter_type}'. Use one of: {', '.join(valid_types)}"
            )

        if filter_type == FilterType.SIZE_MAX.value and not pattern.isdigit():
            raise BadRequestError("size_max pattern must be a number of bytes")

        email_filter = EmailFilter(pattern=pattern, filter_type=filter_type, active=True)
        self.db.add(email_filter)
        await self.db.commit()
        await self.db.refresh(email_filter)

        logger.info(f"Filtro de email criado: {filter_type}={pattern}")
        return email_filter

    async def delete_filter(self, filter_id: str) -> None:
        result = await self.db.execute(delete(EmailFilter).where(EmailFilter.id == filter_id))
        if result.rowcount == 0:
            raise NotFoundError(f"Email filter {filter_id} not found")
        await self.db.commit()

    async def status(self) -> dict:
        """Estado do webhook (para configurar o fornecedor de email)"""
        rules_count = await self.db.execute(select(func.count(EmailRule.id)))
        filters_count = await self.db.execute(select(func.count(EmailFilter.id)))

        return {
            "status": "active",
            "endpoint": INBOUND_ENDPOINT,
            "supported_services": SUPPORTED_SERVICES,
            "rules_count": rules_count.scalar_one(),
            "filters_count": filters_count.scalar_one(),
        }

    # ==================== Ingestão ====================

    async def resolve_project(self, sender: str) -> Optional[str]:
        """Obra de destino segundo as regras ativas (None = Inbox)"""
        rules = await self.list_rules(active_only=True)
        rule = find_matching_rule(rules, sender)

        if rule is None:
            logger.info(f"Sem regra para {normalize_sender(sender)} - Inbox")
            return None

        if rule.project_id and await self.projects.find(rule.project_id) is None:
            logger.warning(f"Regra {rule.id} aponta para obra inexistente - Inbox")
            return None

        logger.info(f"Regra '{rule.sender_pattern}' -> {rule.project_id or 'Inbox'}")
        return rule.project_id

    async def process_inbound_email(self, email: InboundEmail) -> EmailProcessingResult:
        logger.info(f"Email recebido de {email.sender}: {email.subject}")

        result = EmailProcessingResult(sender=email.sender, subject=email.subject)
        project_id = await self.resolve_project(email.sender)
        filters = await self.list_filters(active_only=True)
        notes = build_notes(email.sender, email.subject)
        documents = DocumentService(self.db, self.store)

        for attachment in email.attachments:
            filename = attachment.filename or ""
            try:
                data = await attachment.read()

                rejecting = find_rejecting_filter(filters, filename, len(data))
                if rejecting is not None:
                    logger.info(
                        f"Anexo filtrado: {filename} ({rejecting.filter_type}={rejecting.pattern})"
                    )
                    result.documents_filtered += 1
                    continue

                # Vazios e acima do limite de upload contam como filtrados
                if not data or len(data) > settings.max_upload_bytes:
                    logger.warning(f"Anexo ignorado pelo tamanho: {filename} ({len(data)} bytes)")
                    result.documents_filtered += 1
                    continue

                await documents.create_from_bytes(
                    data,
                    filename or None,
                    attachment.content_type,
                    project_id=project_id,
                    notes=notes
                )
                result.documents_created += 1
            except Exception:
                logger.exception(f"Erro ao processar anexo {filename}")

        logger.info(
            f"Email de {email.sender} processado: "
            f"{result.documents_created} criados, {result.documents_filtered} filtrados"
        )
        return result
