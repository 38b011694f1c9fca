"""
Gapless per-scope document numbering.

A scope is ``(company_id, document_type, year)``. Each scope owns one counter
row in ``document_sequences``; numbers start at 1 and are handed out by an
atomic ``UPDATE ... SET last_number = last_number + 1``, which holds the row
lock (or SQLite's write lock) until the caller's transaction ends. Counting
``max(number) + 1`` over the documents table is never used.

Nothing here commits. A number becomes visible with the caller's commit and
is returned to the scope by a rollback. Lock waits are bounded; a timeout is
reported as ``RetryableError`` and the caller retries the whole transition.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..config import settings
from ..enums import DocumentTypeEnum
from ..errors import RetryableError
from ..models.base import utcnow
from ..models.document_sequence import DocumentSequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocatedNumber:
    year: int
    number: int


def allocate_number(
    db: Session, company_id: int, document_type: DocumentTypeEnum, year: int
) -> AllocatedNumber:
    document_type = DocumentTypeEnum(document_type)
    scope = (company_id, document_type.value, year)
    try:
        _set_lock_timeout(db)
        if not _increment(db, company_id, document_type, year):
            _create_counter(db, company_id, document_type, year)
        number = db.execute(
            select(DocumentSequence.last_number).where(
                DocumentSequence.company_id == company_id,
                DocumentSequence.document_type == document_type,
                DocumentSequence.year == year,
            )
        ).scalar_one()
    except OperationalError as exc:
        if not is_lock_contention(exc):
            raise
        logger.warning("Number allocation contended for %s: %s", scope, exc.orig)
        raise RetryableError(scope, str(exc.orig)) from exc

    logger.info(
        "Allocated number %s for %s",
        number,
        scope,
        extra={"company_id": company_id, "document_type": document_type.value, "year": year},
    )
    return AllocatedNumber(year=year, number=number)


def current_number(
    db: Session, company_id: int, document_type: DocumentTypeEnum, year: int
) -> int:
    """Last number handed out for the scope, 0 when none has been."""
    value = db.execute(
        select(DocumentSequence.last_number).where(
            DocumentSequence.company_id == company_id,
            DocumentSequence.document_type == DocumentTypeEnum(document_type),
            DocumentSequence.year == year,
        )
    ).scalar_one_or_none()
    return value or 0


def _increment(
    db: Session, company_id: int, document_type: DocumentTypeEnum, year: int
) -> bool:
    result = db.execute(
        update(DocumentSequence)
        .where(
            DocumentSequence.company_id == company_id,
            DocumentSequence.document_type == document_type,
            DocumentSequence.year == year,
        )
        .values(last_number=DocumentSequence.last_number + 1, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _create_counter(
    db: Session, company_id: int, document_type: DocumentTypeEnum, year: int
) -> None:
    # First number of the scope. Another writer may create the row at the
    # same time; the savepoint keeps the caller's work when that happens.
    savepoint = db.begin_nested()
    try:
        db.add(
            DocumentSequence(
                company_id=company_id,
                document_type=document_type,
                year=year,
                last_number=1,
                updated_at=utcnow(),
            )
        )
        db.flush()
        savepoint.commit()
    except IntegrityError:
        savepoint.rollback()
        logger.debug(
            "Counter for %s created concurrently, retrying increment",
            (company_id, document_type.value, year),
        )
        if not _increment(db, company_id, document_type, year):
            raise


def _set_lock_timeout(db: Session) -> None:
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"SET LOCAL lock_timeout = {int(settings.sequence_lock_timeout_ms)}"))


def is_lock_contention(exc: OperationalError) -> bool:
    """True for lock waits that ran out rather than genuine database faults."""
    # 55P03 lock_not_available, 40001 serialization_failure, 40P01 deadlock_detected
    if getattr(exc.orig, "pgcode", None) in {"55P03", "40001", "40P01"}:
        return True
    message = str(exc.orig).lower()
    return "database is locked" in message or "lock timeout" in message
