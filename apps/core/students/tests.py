from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from apps.core.fees.models import MonthlyPayment
from apps.core.teachers.models import Teacher
from apps.core.users.models import AuditLog

from .forms import StudentForm
from .models import Student
from .services import grade_distribution, new_enrollment_count, register_student, search_students


def student_data(**overrides):
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
    return data


def form_payload(**overrides):
    payload = {
        key: value.isoformat() if isinstance(value, date) else str(value)
        for key, value in student_data().items()
    }
    payload.update({'photo_url': '', 'years_of_enroll': '0', 'church_name': ''})
    payload.update(overrides)
    return payload


class StudentFormTests(TestCase):
    def test_blank_church_becomes_not_applicable(self):
        form = StudentForm(data=form_payload())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['church_name'], 'N/A')

    def test_rejects_invalid_contact_number(self):
        form = StudentForm(data=form_payload(contact_number='call me maybe'))
        self.assertFalse(form.is_valid())
        self.assertIn('contact_number', form.errors)

    def test_rejects_short_contact_number(self):
        form = StudentForm(data=form_payload(contact_number='12345'))
        self.assertFalse(form.is_valid())
        self.assertIn('contact_number', form.errors)

    def test_rejects_negative_fee_and_short_name(self):
        form = StudentForm(data=form_payload(annual_fee='-10', name='A'))
        self.assertFalse(form.is_valid())
        self.assertIn('annual_fee', form.errors)
        self.assertIn('name', form.errors)

    def test_rejects_duplicate_student_id(self):
        register_student(Student(**student_data()))
        form = StudentForm(data=form_payload(name='Another Child', personal_id='P-200'))
        self.assertFalse(form.is_valid())
        self.assertIn('student_code', form.errors)

    def test_rejects_student_id_differing_only_in_case(self):
        register_student(Student(**student_data()))
        form = StudentForm(data=form_payload(student_code='s-100', name='Another Child', personal_id='P-200'))
        self.assertFalse(form.is_valid())
        self.assertIn('student_code', form.errors)

    def test_editing_keeps_own_student_id(self):
        student = register_student(Student(**student_data()))
        form = StudentForm(data=form_payload(name='Ama K. Mensah'), instance=student)
        self.assertTrue(form.is_valid(), form.errors)


class StudentServiceTests(TestCase):
    def setUp(self):
        self.ama = register_student(Student(**student_data()))
        self.yaw = register_student(Student(**student_data(
            name='Yaw Boateng',
            student_code='S-101',
            personal_id='GHA-778',
            contact_number='024-555-7788',
            grade=6,
            payment_type='Yearly',
        )))

    def test_search_is_case_insensitive_across_fields(self):
        self.assertEqual(list(search_students('ama')), [self.ama])
        self.assertEqual(list(search_students('s-101')), [self.yaw])
        self.assertEqual(list(search_students('gha-778')), [self.yaw])
        self.assertEqual(list(search_students('7788')), [self.yaw])
        self.assertEqual(list(search_students('')), [self.ama, self.yaw])

    def test_grade_distribution(self):
        register_student(Student(**student_data(name='Esi Owusu', student_code='S-102')))
        self.assertEqual(
            grade_distribution(),
            [{'grade': 4, 'total': 2}, {'grade': 6, 'total': 1}],
        )

    def test_new_enrollment_count_uses_window(self):
        today = timezone.localdate()
        Student.objects.filter(pk=self.ama.pk).update(registration_date=today - timedelta(days=3))
        Student.objects.filter(pk=self.yaw.pk).update(registration_date=today - timedelta(days=45))

        self.assertEqual(new_enrollment_count(as_of=today, days=30), 1)
        self.assertEqual(new_enrollment_count(as_of=today, days=60), 2)


class StudentViewTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.admin_user = user_model.objects.create_user(username='office', password='pass12345', role='admin')
        self.guest_user = user_model.objects.create_user(username='visitor', password='pass12345', role='guest')

    def test_anonymous_user_is_sent_to_login(self):
        response = self.client.get(reverse('student_list'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response['Location'])

    def test_admin_creates_student_with_schedule(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.post(reverse('student_create'), form_payload())

        student = Student.objects.get(student_code='S-100')
        self.assertRedirects(response, reverse('student_detail', args=[student.pk]))
        self.assertEqual(MonthlyPayment.objects.filter(student=student).count(), 12)
        self.assertTrue(AuditLog.objects.filter(action='students.student_created', target_id=str(student.pk)).exists())

    def test_guest_can_read_but_not_write(self):
        student = register_student(Student(**student_data()))
        self.client.login(username='visitor', password='pass12345')

        self.assertEqual(self.client.get(reverse('student_list')).status_code, 200)
        self.assertEqual(self.client.get(reverse('student_detail', args=[student.pk])).status_code, 200)
        self.assertEqual(self.client.get(reverse('student_create')).status_code, 403)
        self.assertEqual(self.client.post(reverse('student_delete', args=[student.pk])).status_code, 403)
        self.assertTrue(Student.objects.filter(pk=student.pk).exists())

    def test_fee_change_after_payment_shows_form_error(self):
        student = register_student(Student(**student_data()))
        MonthlyPayment.objects.filter(student=student, month_index=0).update(
            status='Paid',
            paid_on=timezone.now(),
        )
        self.client.login(username='office', password='pass12345')

        response = self.client.post(
            reverse('student_update', args=[student.pk]),
            form_payload(annual_fee='2400.00'),
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].non_field_errors())
        student.refresh_from_db()
        self.assertEqual(student.annual_fee, Decimal('1800.00'))

    def test_admin_deletes_student(self):
        student = register_student(Student(**student_data()))
        self.client.login(username='office', password='pass12345')

        response = self.client.post(reverse('student_delete', args=[student.pk]))

        self.assertRedirects(response, reverse('student_list'))
        self.assertFalse(Student.objects.exists())
        self.assertFalse(MonthlyPayment.objects.exists())

    def test_missing_student_is_404(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.get(reverse('student_detail', args=[999]))
        self.assertEqual(response.status_code, 404)


class SeedDemoCommandTests(TestCase):
    def test_seeds_demo_records_once(self):
        call_command('seed_demo', extra=2, stdout=StringIO())
        call_command('seed_demo', stdout=StringIO())

        self.assertEqual(Student.objects.count(), 10)
        self.assertEqual(Teacher.objects.count(), 2)
        john = Student.objects.get(student_code='S1001')
        self.assertEqual(MonthlyPayment.objects.filter(student=john).count(), 12)
        self.assertFalse(MonthlyPayment.objects.filter(student__student_code='S1002').exists())
