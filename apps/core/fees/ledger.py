"""
Fee ledger core.

Pure functions over plain data: building a student's 12-month payment
schedule from an annual fee, flipping one month between Paid and Unpaid, and
aggregating collection statistics across ledgers. Nothing here touches the
database; persistence lives in ``repositories.py``.

Rounding policy: the monthly figure is ``annual_fee / 12`` rounded once with
ROUND_HALF_EVEN to four decimal places, so every entry carries the same
amount and the twelve entries sum to the annual fee within a fraction of a
cent. Aggregated totals are reported in cents, also with ROUND_HALF_EVEN.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Iterable

from django.core.exceptions import ValidationError
from django.utils import timezone


SCHEDULE_LENGTH = 12

AMOUNT_QUANTUM = Decimal('0.0001')
CENT = Decimal('0.01')

STATUS_PAID = 'Paid'
STATUS_UNPAID = 'Unpaid'
PAYMENT_STATUSES = (STATUS_PAID, STATUS_UNPAID)

PAYMENT_MONTHLY = 'Monthly'
PAYMENT_YEARLY = 'Yearly'
PAYMENT_TYPES = (PAYMENT_MONTHLY, PAYMENT_YEARLY)


class FeeLedgerError(ValidationError):
    default_message = 'Invalid fee ledger operation.'

    def __init__(self, message=None, *args, **kwargs):
        super().__init__(message or self.default_message, *args, **kwargs)


class InvalidAmount(FeeLedgerError):
    default_message = 'Fee amount must be a number that is zero or greater.'


class InvalidIndex(FeeLedgerError):
    default_message = f'Month index must be between 0 and {SCHEDULE_LENGTH - 1}.'


class NotMonthlyPlan(FeeLedgerError):
    default_message = 'Monthly payments can only be tracked for students on a monthly plan.'


@dataclass(frozen=True)
class MonthlyPaymentEntry:
    month: str
    amount: Decimal
    status: str = STATUS_UNPAID
    paid_on: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == STATUS_PAID


@dataclass(frozen=True)
class StudentLedger:
    student_ref: object
    payment_type: str
    annual_fee: Decimal
    schedule: tuple[MonthlyPaymentEntry, ...] | None = None

    def __post_init__(self):
        if self.payment_type not in PAYMENT_TYPES:
            raise FeeLedgerError(f"Unknown payment type: {self.payment_type!r}.")
        if self.payment_type == PAYMENT_YEARLY and self.schedule is not None:
            raise FeeLedgerError('Yearly ledgers cannot carry a monthly schedule.')

    @property
    def is_monthly(self) -> bool:
        return self.payment_type == PAYMENT_MONTHLY

    @property
    def has_payments(self) -> bool:
        return any(entry.is_paid for entry in self.schedule or ())


@dataclass(frozen=True)
class FinancialStats:
    total_students: int
    paid_students: int
    collected_fee: Decimal
    pending_fee: Decimal

    @property
    def paid_percentage(self) -> int | None:
        if not self.total_students:
            return None
        return round(self.paid_students * 100 / self.total_students)


def parse_amount(value) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount()
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount() from None
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount()
    return amount


def monthly_installment(annual_fee) -> Decimal:
    return (parse_amount(annual_fee) / SCHEDULE_LENGTH).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_EVEN)


def month_label(start_date: date, offset: int) -> str:
    month_number = start_date.month - 1 + offset
    year = start_date.year + month_number // 12
    return date(year, month_number % 12 + 1, 1).strftime('%B %Y')


def generate_schedule(annual_fee, start_date: date) -> tuple[MonthlyPaymentEntry, ...]:
    amount = monthly_installment(annual_fee)
    return tuple(
        MonthlyPaymentEntry(month=month_label(start_date, offset), amount=amount)
        for offset in range(SCHEDULE_LENGTH)
    )


def _check_month_index(month_index, available=SCHEDULE_LENGTH) -> int:
    if isinstance(month_index, bool) or not isinstance(month_index, int):
        raise InvalidIndex()
    if not 0 <= month_index < SCHEDULE_LENGTH or month_index >= available:
        raise InvalidIndex()
    return month_index


def update_status(ledger: StudentLedger, month_index: int, new_status: str, *, now=None) -> StudentLedger:
    """
    Return a copy of ``ledger`` with one month set to ``new_status``.

    Marking a month Paid always stamps ``paid_on`` with the current time, even
    when it was already Paid. Marking it Unpaid clears the stamp.
    """
    if not ledger.is_monthly:
        raise NotMonthlyPlan()
    if ledger.schedule is None:
        raise NotMonthlyPlan('This student has no monthly payment schedule.')
    if new_status not in PAYMENT_STATUSES:
        raise FeeLedgerError(f"Unknown payment status: {new_status!r}.")

    index = _check_month_index(month_index, available=len(ledger.schedule))
    paid_on = (now or timezone.now()) if new_status == STATUS_PAID else None

    schedule = list(ledger.schedule)
    schedule[index] = replace(schedule[index], status=new_status, paid_on=paid_on)
    return replace(ledger, schedule=tuple(schedule))


def aggregate(ledgers: Iterable[StudentLedger], reference_month_index: int) -> FinancialStats:
    reference_month_index = _check_month_index(reference_month_index)

    total_students = 0
    paid_students = 0
    collected = Decimal('0')
    pending = Decimal('0')

    for ledger in ledgers:
        total_students += 1

        if not ledger.is_monthly:
            collected += ledger.annual_fee
            paid_students += 1
            continue

        schedule = ledger.schedule or ()
        for entry in schedule:
            if entry.is_paid:
                collected += entry.amount
            else:
                pending += entry.amount

        if reference_month_index < len(schedule) and schedule[reference_month_index].is_paid:
            paid_students += 1

    return FinancialStats(
        total_students=total_students,
        paid_students=paid_students,
        collected_fee=collected.quantize(CENT, rounding=ROUND_HALF_EVEN),
        pending_fee=pending.quantize(CENT, rounding=ROUND_HALF_EVEN),
    )


def reference_month_index(as_of: date, year_start_month: int = 1) -> int:
    if not 1 <= year_start_month <= 12:
        raise ValueError('year_start_month must be between 1 and 12.')
    return (as_of.month - year_start_month) % SCHEDULE_LENGTH
