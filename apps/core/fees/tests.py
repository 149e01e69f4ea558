from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from apps.core.students.models import Student
from apps.core.students.services import delete_student, register_student, update_student

from .ledger import (
    STATUS_PAID,
    STATUS_UNPAID,
    FeeLedgerError,
    InvalidAmount,
    InvalidIndex,
    MonthlyPaymentEntry,
    NotMonthlyPlan,
    StudentLedger,
    aggregate,
    generate_schedule,
    reference_month_index,
    update_status,
)
from .checks import check_fees_year_start_month
from .models import MonthlyPayment
from .repositories import DjangoLedgerRepository
from .services import (
    collection_summary,
    current_reference_month_index,
    set_monthly_payment_status,
    student_collection_rows,
)


FIRST_PAYMENT = datetime(2025, 1, 5, 9, 0, tzinfo=dt_timezone.utc)
SECOND_PAYMENT = datetime(2025, 2, 7, 14, 30, tzinfo=dt_timezone.utc)


def monthly_ledger(annual_fee='1800.00', paid_months=(), student_ref=1):
    ledger = StudentLedger(
        student_ref=student_ref,
        payment_type='Monthly',
        annual_fee=Decimal(annual_fee),
        schedule=generate_schedule(annual_fee, date(2025, 1, 1)),
    )
    for index in paid_months:
        ledger = update_status(ledger, index, STATUS_PAID, now=FIRST_PAYMENT)
    return ledger


class GenerateScheduleTests(SimpleTestCase):
    def test_splits_annual_fee_into_twelve_equal_months(self):
        schedule = generate_schedule(Decimal('1800.00'), date(2025, 1, 1))

        self.assertEqual(len(schedule), 12)
        self.assertTrue(all(entry.amount == Decimal('150') for entry in schedule))
        self.assertEqual(schedule[0].month, 'January 2025')
        self.assertEqual(schedule[-1].month, 'December 2025')
        self.assertTrue(all(entry.status == STATUS_UNPAID for entry in schedule))
        self.assertTrue(all(entry.paid_on is None for entry in schedule))

    def test_labels_roll_over_into_next_year(self):
        schedule = generate_schedule('1200', date(2024, 11, 20))

        self.assertEqual(
            [entry.month for entry in schedule[:3]],
            ['November 2024', 'December 2024', 'January 2025'],
        )
        self.assertEqual(schedule[-1].month, 'October 2025')

    def test_sum_stays_within_one_cent_of_annual_fee(self):
        for annual_fee in ('0', '0.01', '1000', '1234.57', '99999.99'):
            with self.subTest(annual_fee=annual_fee):
                schedule = generate_schedule(annual_fee, date(2025, 3, 1))
                total = sum((entry.amount for entry in schedule), Decimal('0'))
                self.assertLess(abs(total - Decimal(annual_fee)), Decimal('0.01'))
                self.assertEqual(len({entry.amount for entry in schedule}), 1)

    def test_odd_fee_is_rounded_half_even_to_four_places(self):
        schedule = generate_schedule('1000', date(2025, 1, 1))
        self.assertEqual(schedule[0].amount, Decimal('83.3333'))

    def test_rejects_negative_and_non_numeric_amounts(self):
        for annual_fee in (Decimal('-0.01'), -1800, 'abc', None, 'NaN', float('inf'), True):
            with self.subTest(annual_fee=annual_fee):
                with self.assertRaises(InvalidAmount):
                    generate_schedule(annual_fee, date(2025, 1, 1))

    def test_invalid_amount_is_a_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            generate_schedule('-5', date(2025, 1, 1))
        self.assertIn('zero or greater', ctx.exception.messages[0])


class UpdateStatusTests(SimpleTestCase):
    def test_marking_paid_sets_timestamp_and_leaves_other_months(self):
        ledger = monthly_ledger()
        updated = update_status(ledger, 4, STATUS_PAID, now=FIRST_PAYMENT)

        self.assertEqual(updated.schedule[4].status, STATUS_PAID)
        self.assertEqual(updated.schedule[4].paid_on, FIRST_PAYMENT)
        self.assertEqual(updated.schedule[4].amount, ledger.schedule[4].amount)
        for index, entry in enumerate(updated.schedule):
            if index != 4:
                self.assertEqual(entry, ledger.schedule[index])
        self.assertEqual(ledger.schedule[4].status, STATUS_UNPAID)

    def test_marking_paid_twice_refreshes_timestamp(self):
        ledger = update_status(monthly_ledger(), 0, STATUS_PAID, now=FIRST_PAYMENT)
        ledger = update_status(ledger, 0, STATUS_PAID, now=SECOND_PAYMENT)

        self.assertEqual(ledger.schedule[0].status, STATUS_PAID)
        self.assertEqual(ledger.schedule[0].paid_on, SECOND_PAYMENT)

    def test_paid_then_unpaid_clears_timestamp(self):
        original = monthly_ledger()
        ledger = update_status(original, 2, STATUS_PAID, now=FIRST_PAYMENT)
        ledger = update_status(ledger, 2, STATUS_UNPAID)

        self.assertEqual(ledger.schedule[2].status, STATUS_UNPAID)
        self.assertIsNone(ledger.schedule[2].paid_on)
        self.assertEqual(ledger.schedule[2].amount, original.schedule[2].amount)

    def test_out_of_range_index_fails(self):
        ledger = monthly_ledger()
        for month_index in (12, -1):
            with self.subTest(month_index=month_index):
                with self.assertRaises(InvalidIndex):
                    update_status(ledger, month_index, STATUS_PAID)

    def test_index_beyond_short_schedule_fails(self):
        short = StudentLedger(
            student_ref=1,
            payment_type='Monthly',
            annual_fee=Decimal('1200'),
            schedule=generate_schedule('1200', date(2025, 1, 1))[:3],
        )
        with self.assertRaises(InvalidIndex):
            update_status(short, 5, STATUS_PAID)

    def test_yearly_plan_has_no_monthly_schedule(self):
        ledger = StudentLedger(student_ref=1, payment_type='Yearly', annual_fee=Decimal('1500'))
        with self.assertRaises(NotMonthlyPlan):
            update_status(ledger, 0, STATUS_PAID)

    def test_monthly_ledger_without_schedule_fails(self):
        ledger = StudentLedger(student_ref=1, payment_type='Monthly', annual_fee=Decimal('1500'))
        with self.assertRaises(NotMonthlyPlan):
            update_status(ledger, 0, STATUS_PAID)

    def test_unknown_status_fails(self):
        with self.assertRaises(FeeLedgerError):
            update_status(monthly_ledger(), 0, 'Partial')

    def test_yearly_ledger_rejects_schedule(self):
        with self.assertRaises(FeeLedgerError):
            StudentLedger(
                student_ref=1,
                payment_type='Yearly',
                annual_fee=Decimal('1200'),
                schedule=generate_schedule('1200', date(2025, 1, 1)),
            )


class AggregateTests(SimpleTestCase):
    def test_monthly_ledger_paid_at_reference_month(self):
        stats = aggregate([monthly_ledger(paid_months=(0, 1, 2))], 0)

        self.assertEqual(stats.total_students, 1)
        self.assertEqual(stats.paid_students, 1)
        self.assertEqual(stats.collected_fee, Decimal('450.00'))
        self.assertEqual(stats.pending_fee, Decimal('1350.00'))

    def test_monthly_ledger_unpaid_at_reference_month(self):
        stats = aggregate([monthly_ledger(paid_months=(0, 1, 2))], 3)
        self.assertEqual(stats.paid_students, 0)
        self.assertEqual(stats.collected_fee, Decimal('450.00'))

    def test_yearly_ledger_counts_as_paid_in_full(self):
        yearly = StudentLedger(student_ref=2, payment_type='Yearly', annual_fee=Decimal('1500'))
        stats = aggregate([yearly, monthly_ledger(paid_months=(0, 1, 2))], 0)

        self.assertEqual(stats.total_students, 2)
        self.assertEqual(stats.paid_students, 2)
        self.assertEqual(stats.collected_fee, Decimal('1950.00'))
        self.assertEqual(stats.pending_fee, Decimal('1350.00'))
        self.assertEqual(stats.paid_percentage, 100)

    def test_short_or_missing_schedules_do_not_crash(self):
        short = StudentLedger(
            student_ref=3,
            payment_type='Monthly',
            annual_fee=Decimal('1200'),
            schedule=tuple(
                MonthlyPaymentEntry(month=f'Month {index}', amount=Decimal('100'), status=STATUS_PAID, paid_on=FIRST_PAYMENT)
                for index in range(3)
            ),
        )
        missing = StudentLedger(student_ref=4, payment_type='Monthly', annual_fee=Decimal('1200'))

        stats = aggregate([short, missing], 6)

        self.assertEqual(stats.total_students, 2)
        self.assertEqual(stats.paid_students, 0)
        self.assertEqual(stats.collected_fee, Decimal('300.00'))
        self.assertEqual(stats.pending_fee, Decimal('0.00'))

    def test_empty_input(self):
        stats = aggregate([], 0)
        self.assertEqual(stats.total_students, 0)
        self.assertEqual(stats.collected_fee, Decimal('0.00'))
        self.assertIsNone(stats.paid_percentage)

    def test_reference_month_must_be_in_year(self):
        with self.assertRaises(InvalidIndex):
            aggregate([monthly_ledger()], 12)


class ReferenceMonthTests(SimpleTestCase):
    def test_calendar_year(self):
        self.assertEqual(reference_month_index(date(2025, 3, 10)), 2)
        self.assertEqual(reference_month_index(date(2025, 12, 31)), 11)

    def test_school_year_starting_in_september(self):
        self.assertEqual(reference_month_index(date(2025, 9, 1), 9), 0)
        self.assertEqual(reference_month_index(date(2026, 3, 1), 9), 6)

    @override_settings(FEES_YEAR_START_MONTH=4)
    def test_uses_configured_start_month(self):
        self.assertEqual(current_reference_month_index(date(2025, 4, 15)), 0)
        self.assertEqual(current_reference_month_index(date(2025, 2, 15)), 10)


def make_student(**overrides):
    data = {
        'name': 'Ama Mensah',
        'grade': 4,
        'age': 9,
        'payment_type': 'Monthly',
        'annual_fee': Decimal('1800.00'),
        'student_code': 'S-100',
        'personal_id': 'P-100',
        'date_of_birth': date(2016, 5, 1),
        'registration_date': date(2025, 1, 1),
        'parent_name': 'Kofi Mensah',
        'gender': 'Female',
        'nationality': 'Ghanaian',
        'religion': 'Christian',
        'address': '12 Palm Street, Accra',
        'contact_number': '+233 555 0100',
    }
    data.update(overrides)
    return register_student(Student(**data))


class LedgerPersistenceTests(TestCase):
    def test_monthly_student_gets_twelve_stored_months(self):
        student = make_student()

        rows = list(MonthlyPayment.objects.filter(student=student).order_by('month_index'))
        self.assertEqual(len(rows), 12)
        self.assertEqual(rows[0].month, 'January 2025')
        self.assertEqual(rows[11].month, 'December 2025')
        self.assertTrue(all(row.amount == Decimal('150') for row in rows))
        self.assertTrue(all(row.status == STATUS_UNPAID for row in rows))

    def test_yearly_student_has_no_schedule(self):
        student = make_student(payment_type='Yearly', annual_fee=Decimal('1500.00'))

        self.assertFalse(MonthlyPayment.objects.filter(student=student).exists())
        self.assertIsNone(DjangoLedgerRepository().get(student.pk).schedule)

    def test_status_change_is_persisted(self):
        student = make_student()

        set_monthly_payment_status(student_id=student.pk, month_index=1, status=STATUS_PAID, now=FIRST_PAYMENT)
        row = MonthlyPayment.objects.get(student=student, month_index=1)
        self.assertEqual(row.status, STATUS_PAID)
        self.assertEqual(row.paid_on, FIRST_PAYMENT)

        set_monthly_payment_status(student_id=student.pk, month_index=1, status=STATUS_UNPAID)
        row.refresh_from_db()
        self.assertEqual(row.status, STATUS_UNPAID)
        self.assertIsNone(row.paid_on)
        self.assertEqual(MonthlyPayment.objects.filter(student=student, status=STATUS_PAID).count(), 0)

    def test_status_change_on_yearly_student_fails(self):
        student = make_student(payment_type='Yearly')
        with self.assertRaises(NotMonthlyPlan):
            set_monthly_payment_status(student_id=student.pk, month_index=0, status=STATUS_PAID)

    def test_missing_rows_map_to_no_schedule(self):
        student = make_student()
        MonthlyPayment.objects.filter(student=student).delete()

        ledger = DjangoLedgerRepository().get(student.pk)
        self.assertTrue(ledger.is_monthly)
        self.assertIsNone(ledger.schedule)
        with self.assertRaises(NotMonthlyPlan):
            set_monthly_payment_status(student_id=student.pk, month_index=0, status=STATUS_PAID)

    def test_fee_change_regenerates_unpaid_schedule(self):
        student = make_student()
        student.annual_fee = Decimal('2400.00')
        update_student(student)

        amounts = set(MonthlyPayment.objects.filter(student=student).values_list('amount', flat=True))
        self.assertEqual(amounts, {Decimal('200')})

    def test_fee_change_after_payment_is_rejected(self):
        student = make_student()
        set_monthly_payment_status(student_id=student.pk, month_index=0, status=STATUS_PAID)

        student.annual_fee = Decimal('2400.00')
        with self.assertRaises(ValidationError):
            update_student(student)

        student.refresh_from_db()
        self.assertEqual(student.annual_fee, Decimal('1800.00'))
        self.assertEqual(MonthlyPayment.objects.get(student=student, month_index=0).status, STATUS_PAID)

    def test_switch_to_yearly_drops_schedule(self):
        student = make_student()
        student.payment_type = 'Yearly'
        update_student(student)

        self.assertFalse(MonthlyPayment.objects.filter(student=student).exists())

    def test_switch_to_monthly_creates_schedule(self):
        student = make_student(payment_type='Yearly', annual_fee=Decimal('1200.00'))
        student.payment_type = 'Monthly'
        update_student(student)

        self.assertEqual(MonthlyPayment.objects.filter(student=student).count(), 12)

    def test_missing_month_blocks_status_change_without_shifting_rows(self):
        student = make_student()
        MonthlyPayment.objects.filter(student=student, month_index=5).delete()
        before = dict(MonthlyPayment.objects.filter(student=student).values_list('month_index', 'month'))

        with self.assertRaises(FeeLedgerError):
            set_monthly_payment_status(student_id=student.pk, month_index=5, status=STATUS_PAID)
        with self.assertRaises(FeeLedgerError):
            set_monthly_payment_status(student_id=student.pk, month_index=6, status=STATUS_PAID)

        after = dict(MonthlyPayment.objects.filter(student=student).values_list('month_index', 'month'))
        self.assertEqual(after, before)
        self.assertEqual(after[6], 'July 2025')
        self.assertEqual(after[11], 'December 2025')
        self.assertFalse(MonthlyPayment.objects.filter(status=STATUS_PAID).exists())

    def test_missing_month_is_left_out_of_totals(self):
        student = make_student()
        MonthlyPayment.objects.filter(student=student, month_index=5).delete()

        stats = collection_summary(month_index=0)

        self.assertEqual(stats.total_students, 1)
        self.assertEqual(stats.paid_students, 0)
        self.assertEqual(stats.pending_fee, Decimal('0.00'))

    def test_update_rebuilds_incomplete_unpaid_schedule(self):
        student = make_student()
        MonthlyPayment.objects.filter(student=student, month_index=5).delete()

        update_student(student)

        months = list(MonthlyPayment.objects.filter(student=student).order_by('month_index').values_list('month', flat=True))
        self.assertEqual(len(months), 12)
        self.assertEqual(months[5], 'June 2025')

    def test_update_keeps_incomplete_schedule_with_payments(self):
        student = make_student()
        set_monthly_payment_status(student_id=student.pk, month_index=0, status=STATUS_PAID)
        MonthlyPayment.objects.filter(student=student, month_index=5).delete()

        with self.assertRaises(FeeLedgerError):
            update_student(student)
        self.assertEqual(MonthlyPayment.objects.filter(student=student).count(), 11)

    def test_deleting_student_removes_schedule(self):
        student = make_student()
        delete_student(student)

        self.assertEqual(MonthlyPayment.objects.count(), 0)

    def test_collection_summary_over_stored_ledgers(self):
        monthly = make_student()
        make_student(
            name='Yaw Boateng',
            student_code='S-101',
            payment_type='Yearly',
            annual_fee=Decimal('1500.00'),
        )
        for index in range(3):
            set_monthly_payment_status(student_id=monthly.pk, month_index=index, status=STATUS_PAID)

        stats = collection_summary(month_index=0)
        self.assertEqual(stats.total_students, 2)
        self.assertEqual(stats.paid_students, 2)
        self.assertEqual(stats.collected_fee, Decimal('1950.00'))
        self.assertEqual(stats.pending_fee, Decimal('1350.00'))

        rows = student_collection_rows(month_index=5)
        self.assertEqual(rows[0]['student'], monthly)
        self.assertEqual(rows[0]['months_paid'], 3)
        self.assertFalse(rows[0]['is_paid'])


class FeeViewTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.admin_user = user_model.objects.create_user(username='office', password='pass12345', role='admin')
        self.guest_user = user_model.objects.create_user(username='visitor', password='pass12345', role='guest')
        self.student = make_student()

    def _url(self, month_index):
        return reverse('monthly_payment_update', args=[self.student.pk, month_index])

    def test_admin_marks_month_paid(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.post(self._url(2), {'status': 'Paid'})

        self.assertRedirects(response, reverse('student_detail', args=[self.student.pk]))
        self.assertEqual(MonthlyPayment.objects.get(student=self.student, month_index=2).status, STATUS_PAID)

    def test_invalid_month_is_reported(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.post(self._url(12), {'status': 'Paid'}, follow=True)

        self.assertContains(response, 'Month index must be between 0 and 11.')
        self.assertFalse(MonthlyPayment.objects.filter(status=STATUS_PAID).exists())

    def test_guest_cannot_change_payments(self):
        self.client.login(username='visitor', password='pass12345')
        response = self.client.post(self._url(0), {'status': 'Paid'})

        self.assertEqual(response.status_code, 403)
        self.assertFalse(MonthlyPayment.objects.filter(status=STATUS_PAID).exists())

    def test_get_is_not_allowed(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.get(self._url(0))
        self.assertEqual(response.status_code, 405)

    def test_guest_can_view_collection_report(self):
        self.client.login(username='visitor', password='pass12345')
        response = self.client.get(reverse('collection_report'), {'month': '3'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['month_index'], 3)
        self.assertEqual(response.context['stats'].total_students, 1)

    def test_student_page_reports_incomplete_schedule(self):
        MonthlyPayment.objects.filter(student=self.student, month_index=5).delete()
        self.client.login(username='visitor', password='pass12345')

        response = self.client.get(reverse('student_detail', args=[self.student.pk]))

        self.assertContains(response, 'missing month indexes 5')
        self.assertEqual(response.context['schedule'], [])

    def test_malformed_month_parameter_falls_back_to_current_month(self):
        self.client.login(username='visitor', password='pass12345')

        for month in ('²', 'abc', '-1', '12'):
            with self.subTest(month=month):
                response = self.client.get(reverse('collection_report'), {'month': month})
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.context['month_index'], current_reference_month_index())


class FeeSettingsCheckTests(SimpleTestCase):
    @override_settings(FEES_YEAR_START_MONTH=13)
    def test_out_of_range_start_month_is_reported(self):
        errors = check_fees_year_start_month(None)
        self.assertEqual([error.id for error in errors], ['fees.E001'])

    @override_settings(FEES_YEAR_START_MONTH=9)
    def test_valid_start_month_passes(self):
        self.assertEqual(check_fees_year_start_month(None), [])
