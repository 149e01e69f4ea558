from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.students.models import Student

from .ledger import (
    FeeLedgerError,
    FinancialStats,
    StudentLedger,
    aggregate,
    generate_schedule,
    parse_amount,
    reference_month_index,
    update_status,
)
from .repositories import DjangoLedgerRepository, LedgerRepository

logger = logging.getLogger(__name__)


def default_repository() -> LedgerRepository:
    return DjangoLedgerRepository()


def build_student_ledger(student: Student) -> StudentLedger:
    schedule = None
    if student.is_monthly:
        schedule = generate_schedule(student.annual_fee, student.registration_date)
    return StudentLedger(
        student_ref=student.pk,
        payment_type=student.payment_type,
        annual_fee=parse_amount(student.annual_fee),
        schedule=schedule,
    )


@transaction.atomic
def create_student_ledger(*, student: Student, repository: LedgerRepository | None = None) -> StudentLedger:
    repository = repository or default_repository()
    ledger = repository.save(build_student_ledger(student))
    logger.info(
        'Created %s ledger for student %s (annual fee %s)',
        ledger.payment_type.lower(),
        student.pk,
        ledger.annual_fee,
    )
    return ledger


def _schedule_matches(current: StudentLedger, expected: StudentLedger) -> bool:
    if current.schedule is None or len(current.schedule) != len(expected.schedule):
        return False
    return all(
        entry.month == fresh.month and entry.amount == fresh.amount
        for entry, fresh in zip(current.schedule, expected.schedule)
    )


@transaction.atomic
def sync_student_ledger(*, student: Student, repository: LedgerRepository | None = None) -> StudentLedger:
    """
    Bring a student's ledger in line with the saved student record.

    Switching to a yearly plan drops the schedule. A monthly plan without a
    schedule gets one. A monthly plan whose fee or registration date changed
    is regenerated, unless a month has already been paid.
    """
    repository = repository or default_repository()
    expected = build_student_ledger(student)
    try:
        current = repository.get(student.pk)
    except FeeLedgerError:
        if repository.has_payments(student.pk):
            raise
        logger.warning('Rebuilding incomplete monthly schedule of student %s', student.pk)
        return repository.save(expected)

    if not expected.is_monthly:
        if current.schedule is not None:
            logger.info('Dropping monthly schedule of student %s after switch to yearly plan', student.pk)
        return repository.save(expected)

    if current.schedule is not None and _schedule_matches(current, expected):
        return current

    if current.has_payments:
        raise ValidationError(
            'Annual fee and registration date cannot change after monthly payments have been recorded.'
        )

    logger.info('Regenerating monthly schedule of student %s', student.pk)
    return repository.save(expected)


@transaction.atomic
def set_monthly_payment_status(
    *,
    student_id,
    month_index: int,
    status: str,
    repository: LedgerRepository | None = None,
    now=None,
) -> StudentLedger:
    repository = repository or default_repository()
    ledger = update_status(repository.get(student_id), month_index, status, now=now)
    repository.save(ledger)
    logger.info('Student %s month %s marked %s', student_id, month_index, status)
    return ledger


def current_reference_month_index(as_of=None) -> int:
    as_of = as_of or timezone.localdate()
    return reference_month_index(as_of, settings.FEES_YEAR_START_MONTH)


def collection_summary(
    *,
    month_index: int | None = None,
    repository: LedgerRepository | None = None,
    as_of=None,
) -> FinancialStats:
    repository = repository or default_repository()
    if month_index is None:
        month_index = current_reference_month_index(as_of)
    return aggregate(repository.all(), month_index)


def student_collection_rows(*, month_index: int, repository: LedgerRepository | None = None):
    repository = repository or default_repository()
    ledgers = repository.all()
    students = Student.objects.in_bulk([ledger.student_ref for ledger in ledgers])

    rows = []
    for ledger in ledgers:
        stats = aggregate([ledger], month_index)
        schedule = ledger.schedule or ()
        rows.append({
            'student': students.get(ledger.student_ref),
            'ledger': ledger,
            'months_paid': sum(1 for entry in schedule if entry.is_paid),
            'months_total': len(schedule),
            'collected': stats.collected_fee,
            'pending': stats.pending_fee,
            'is_paid': stats.paid_students == 1,
        })
    rows.sort(key=lambda row: (row['is_paid'], -row['pending'], row['student'].name if row['student'] else ''))
    return rows
