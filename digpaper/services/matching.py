"""
DigPaper - Matching
Regras de remetente e filtros de anexos do webhook de email

Funções puras: recebem os registos já carregados (ordenados do mais recente
para o mais antigo) e devolvem o primeiro que corresponde.
"""
from email.utils import parseaddr
from typing import Iterable, Optional

from digpaper.models import EmailRule, EmailFilter, FilterType


def normalize_sender(sender: Optional[str]) -> str:
    """Endereço em minúsculas; 'Nome <a@b.pt>' passa a 'a@b.pt'"""
    raw = (sender or "").strip()
    _, address = parseaddr(raw)
    return (address or raw).lower()


def sender_matches(pattern: Optional[str], sender: Optional[str]) -> bool:
    """
    '*@empresa.pt' compara pelo sufixo; qualquer outro padrão por contenção.
    """
    pattern = (pattern or "").strip().lower()
    if not pattern:
        return False

    address = normalize_sender(sender)
    if pattern.startswith("*"):
        return address.endswith(pattern[1:])
    return pattern in address


def find_matching_rule(rules: Iterable[EmailRule], sender: Optional[str]) -> Optional[EmailRule]:
    """Primeira regra ativa que corresponde ao remetente"""
    for rule in rules:
        if rule.active and sender_matches(rule.sender_pattern, sender):
            return rule
    return None


def filter_matches(filter_type: str, pattern: Optional[str], filename: Optional[str], size: int) -> bool:
    """Verifica se um filtro rejeita o anexo"""
    pattern = (pattern or "").strip()
    filename = (filename or "").lower()

    if filter_type == FilterType.FILENAME.value:
        return bool(pattern) and pattern.lower() in filename

    if filter_type == FilterType.EXTENSION.value:
        ext = pattern.lower().lstrip(".")
        return bool(ext) and filename.endswith(f".{ext}")

    if filter_type == FilterType.SIZE_MAX.value:
        # Rejeita anexos abaixo do limite (logótipos, ícones)
        try:
            limit = int(pattern)
        except ValueError:
            return False
        return size < limit

    return False


def find_rejecting_filter(
    filters: Iterable[EmailFilter],
    filename: Optional[str],
    size: int
) -> Optional[EmailFilter]:
    """Primeiro filtro ativo que rejeita o anexo"""
    for email_filter in filters:
        if email_filter.active and filter_matches(
            email_filter.filter_type, email_filter.pattern, filename, size
        ):
            return email_filter
    return None
