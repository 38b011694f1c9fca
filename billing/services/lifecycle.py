"""
Document lifecycle state machine.

Statuses and actions are plain enums; the rules live in one transition table
per document type keyed by ``(current status, action)``. A cell whose target
is the current status is an idempotent no-op. A missing cell is a rule
violation and raises ``InvalidTransitionError``.

``transition`` is pure. ``apply_transition`` runs it against a persisted
document and performs the side effects of the issuing transition: number
allocation and the default issue date. No other transition touches anything
but ``status``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from sqlalchemy.orm import Session

from ..enums import (
    DocumentTypeEnum,
    InvoiceActionEnum,
    InvoiceStatusEnum,
    QuoteActionEnum,
    QuoteStatusEnum,
)
from ..errors import InvalidTransitionError
from .numbering import allocate_number

logger = logging.getLogger(__name__)

_I = InvoiceStatusEnum
_IA = InvoiceActionEnum
_Q = QuoteStatusEnum
_QA = QuoteActionEnum

INVOICE_TRANSITIONS: dict[tuple[InvoiceStatusEnum, InvoiceActionEnum], InvoiceStatusEnum] = {
    (_I.DRAFT, _IA.DRAFT): _I.DRAFT,
    (_I.DRAFT, _IA.ISSUE): _I.ISSUED,
    (_I.DRAFT, _IA.ARCHIVE): _I.ARCHIVED,
    (_I.ISSUED, _IA.ISSUE): _I.ISSUED,
    (_I.ISSUED, _IA.PAY): _I.PAID,
    (_I.ISSUED, _IA.OVERDUE): _I.OVERDUE,
    (_I.OVERDUE, _IA.PAY): _I.PAID,
    (_I.OVERDUE, _IA.OVERDUE): _I.OVERDUE,
    (_I.OVERDUE, _IA.ARCHIVE): _I.ARCHIVED,
    (_I.PAID, _IA.PAY): _I.PAID,
    (_I.ARCHIVED, _IA.ARCHIVE): _I.ARCHIVED,
}

QUOTE_TRANSITIONS: dict[tuple[QuoteStatusEnum, QuoteActionEnum], QuoteStatusEnum] = {
    (_Q.DRAFT, _QA.DRAFT): _Q.DRAFT,
    (_Q.DRAFT, _QA.SEND): _Q.SENT,
    (_Q.DRAFT, _QA.ACCEPT): _Q.ACCEPTED,
    (_Q.DRAFT, _QA.REJECT): _Q.REJECTED,
    (_Q.DRAFT, _QA.ARCHIVE): _Q.ARCHIVED,
    (_Q.SENT, _QA.SEND): _Q.SENT,
    (_Q.SENT, _QA.ACCEPT): _Q.ACCEPTED,
    (_Q.SENT, _QA.REJECT): _Q.REJECTED,
    (_Q.SENT, _QA.EXPIRE): _Q.EXPIRED,
    (_Q.SENT, _QA.ARCHIVE): _Q.ARCHIVED,
    (_Q.ACCEPTED, _QA.ACCEPT): _Q.ACCEPTED,
    (_Q.ACCEPTED, _QA.CONVERT): _Q.CONVERTED,
    (_Q.ACCEPTED, _QA.ARCHIVE): _Q.ARCHIVED,
    (_Q.REJECTED, _QA.DRAFT): _Q.DRAFT,
    (_Q.REJECTED, _QA.REJECT): _Q.REJECTED,
    (_Q.REJECTED, _QA.ARCHIVE): _Q.ARCHIVED,
    (_Q.EXPIRED, _QA.EXPIRE): _Q.EXPIRED,
    (_Q.EXPIRED, _QA.ARCHIVE): _Q.ARCHIVED,
    (_Q.CONVERTED, _QA.CONVERT): _Q.CONVERTED,
    (_Q.CONVERTED, _QA.ARCHIVE): _Q.ARCHIVED,
    (_Q.ARCHIVED, _QA.ARCHIVE): _Q.ARCHIVED,
}

# Transitions out of DRAFT that give the document its number.
ISSUING_ACTIONS = {
    DocumentTypeEnum.INVOICE: {_IA.ISSUE},
    DocumentTypeEnum.QUOTE: {_QA.SEND, _QA.ACCEPT},
}

_TABLES = {
    DocumentTypeEnum.INVOICE: (INVOICE_TRANSITIONS, InvoiceStatusEnum, InvoiceActionEnum),
    DocumentTypeEnum.QUOTE: (QUOTE_TRANSITIONS, QuoteStatusEnum, QuoteActionEnum),
}


@dataclass(frozen=True)
class TransitionResult:
    previous: Enum
    status: Enum
    changed: bool
    issues: bool


def transition(document_type: DocumentTypeEnum, status, action) -> TransitionResult:
    document_type = DocumentTypeEnum(document_type)
    table, status_enum, action_enum = _TABLES[document_type]
    try:
        current = status_enum(status)
    except ValueError:
        raise InvalidTransitionError(document_type.value, _label(status), _label(action)) from None
    try:
        requested = action_enum(action)
    except ValueError:
        raise InvalidTransitionError(document_type.value, current.value, _label(action)) from None

    target = table.get((current, requested))
    if target is None:
        raise InvalidTransitionError(document_type.value, current.value, requested.value)

    issues = (
        current.value == "DRAFT"
        and target is not current
        and requested in ISSUING_ACTIONS[document_type]
    )
    return TransitionResult(
        previous=current, status=target, changed=target is not current, issues=issues
    )


def apply_transition(
    db: Session,
    document,
    action,
    today: Callable[[], date] = date.today,
) -> TransitionResult:
    """Move ``document`` through ``action`` and apply the issuing side effects.

    Nothing is committed here; the caller owns the transaction so that the
    allocated number and the new status land together or not at all.
    """
    result = transition(document.document_type, document.status, action)
    if not result.changed:
        logger.debug(
            "Idempotent %s on %s %s",
            result.status.value,
            document.document_type.value,
            document.id,
        )
        return result

    if result.issues:
        if document.issue_date is None:
            document.issue_date = today()
        if document.number is None:
            allocated = allocate_number(
                db, document.company_id, document.document_type, document.issue_date.year
            )
            document.year = allocated.year
            document.number = allocated.number

    document.status = result.status
    logger.info(
        "%s %s: %s -> %s",
        document.document_type.value.capitalize(),
        document.id,
        result.previous.value,
        result.status.value,
    )
    return result


def _label(value) -> str:
    return value.value if isinstance(value, Enum) else str(value)
