"""
Storage boundary for fee ledgers.

Application services talk to a ``LedgerRepository``; the Django
implementation maps ``Student`` and ``MonthlyPayment`` rows to the typed
ledger objects from ``ledger.py`` and refuses rows that break the ledger
invariants.
"""
from __future__ import annotations

import logging

from django.db import transaction

from apps.core.students.models import Student

from .ledger import (
    PAYMENT_MONTHLY,
    PAYMENT_STATUSES,
    STATUS_PAID,
    FeeLedgerError,
    MonthlyPaymentEntry,
    StudentLedger,
    parse_amount,
)
from .models import MonthlyPayment

logger = logging.getLogger(__name__)


class LedgerRepository:
    def get(self, student_id) -> StudentLedger:
        raise NotImplementedError

    def all(self) -> list[StudentLedger]:
        raise NotImplementedError

    def save(self, ledger: StudentLedger) -> StudentLedger:
        raise NotImplementedError

    def has_payments(self, student_id) -> bool:
        raise NotImplementedError


class DjangoLedgerRepository(LedgerRepository):
    def _entry_from_row(self, row: MonthlyPayment) -> MonthlyPaymentEntry:
        if row.status not in PAYMENT_STATUSES:
            raise FeeLedgerError(
                f"Stored payment for student {row.student_id}, month {row.month_index} has unknown status {row.status!r}."
            )
        paid_on = row.paid_on if row.status == STATUS_PAID else None
        return MonthlyPaymentEntry(
            month=row.month,
            amount=parse_amount(row.amount),
            status=row.status,
            paid_on=paid_on,
        )

    def _to_ledger(self, student: Student, rows) -> StudentLedger:
        annual_fee = parse_amount(student.annual_fee)

        if student.payment_type != PAYMENT_MONTHLY:
            if rows:
                logger.warning(
                    'Ignoring %s stored monthly payments for yearly student %s',
                    len(rows),
                    student.pk,
                )
            return StudentLedger(
                student_ref=student.pk,
                payment_type=student.payment_type,
                annual_fee=annual_fee,
            )

        rows = sorted(rows, key=lambda row: row.month_index)
        stored = [row.month_index for row in rows]
        missing = [index for index in range(stored[-1] + 1) if index not in stored] if rows else []
        if missing:
            raise FeeLedgerError(
                f"Monthly schedule of student {student.pk} is missing month indexes "
                f"{', '.join(str(index) for index in missing)}."
            )

        return StudentLedger(
            student_ref=student.pk,
            payment_type=student.payment_type,
            annual_fee=annual_fee,
            schedule=tuple(self._entry_from_row(row) for row in rows) if rows else None,
        )

    def get(self, student_id) -> StudentLedger:
        student = Student.objects.get(pk=student_id)
        return self._to_ledger(student, list(student.monthly_payments.all()))

    def all(self) -> list[StudentLedger]:
        """
        Every student's ledger. A schedule with missing months is reported
        without its entries so one broken student cannot take down the totals.
        """
        ledgers = []
        students = Student.objects.prefetch_related('monthly_payments').order_by('id')
        for student in students:
            try:
                ledger = self._to_ledger(student, list(student.monthly_payments.all()))
            except FeeLedgerError as exc:
                logger.error('Skipping stored schedule: %s', ' '.join(exc.messages))
                ledger = StudentLedger(
                    student_ref=student.pk,
                    payment_type=student.payment_type,
                    annual_fee=parse_amount(student.annual_fee),
                )
            ledgers.append(ledger)
        return ledgers

    def has_payments(self, student_id) -> bool:
        return MonthlyPayment.objects.filter(student_id=student_id, status=STATUS_PAID).exists()

    @transaction.atomic
    def save(self, ledger: StudentLedger) -> StudentLedger:
        student = Student.objects.select_for_update().get(pk=ledger.student_ref)

        student_updates = []
        if student.payment_type != ledger.payment_type:
            student.payment_type = ledger.payment_type
            student_updates.append('payment_type')
        if student.annual_fee != ledger.annual_fee:
            student.annual_fee = ledger.annual_fee
            student_updates.append('annual_fee')
        if student_updates:
            student.save(update_fields=student_updates + ['updated_at'])

        existing = {row.month_index: row for row in MonthlyPayment.objects.filter(student=student)}

        for index, entry in enumerate(ledger.schedule or ()):
            row = existing.pop(index, None)
            if row is None:
                MonthlyPayment.objects.create(
                    student=student,
                    month_index=index,
                    month=entry.month,
                    amount=entry.amount,
                    status=entry.status,
                    paid_on=entry.paid_on,
                )
                continue

            updates = []
            for field_name, value in (
                ('month', entry.month),
                ('amount', entry.amount),
                ('status', entry.status),
                ('paid_on', entry.paid_on),
            ):
                if getattr(row, field_name) != value:
                    setattr(row, field_name, value)
                    updates.append(field_name)
            if updates:
                row.save(update_fields=updates + ['updated_at'])

        if existing:
            MonthlyPayment.objects.filter(pk__in=[row.pk for row in existing.values()]).delete()

        return ledger
