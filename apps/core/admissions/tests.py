from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from apps.core.fees.models import MonthlyPayment
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher

from .models import StudentApplication, TeacherApplication, generate_application_id
from .services import (
    approve_student_application,
    approve_teacher_application,
    decline_application,
    pending_application_count,
)


def student_application_payload(**overrides):
    payload = {
        'name': 'Akosua Darko',
        'photo_url': '',
        'grade': '2',
        'age': '7',
        'payment_type': 'Monthly',
        'annual_fee': '1200.00',
        'student_code': 'S-500',
        'personal_id': 'P-500',
        'date_of_birth': '2018-02-14',
        'registration_date': '2025-09-01',
        'years_of_enroll': '0',
        'parent_name': 'Abena Darko',
        'gender': 'Female',
        'nationality': 'Ghanaian',
        'religion': 'Christian',
        'address': '4 Market Road, Kumasi',
        'contact_number': '0244123456',
        'church_name': 'Hope Chapel',
    }
    payload.update(overrides)
    return payload


def make_student_application(**overrides):
    data = {
        'name': 'Akosua Darko',
        'grade': 2,
        'age': 7,
        'payment_type': 'Monthly',
        'annual_fee': Decimal('1200.00'),
        'student_code': 'S-500',
        'personal_id': 'P-500',
        'date_of_birth': date(2018, 2, 14),
        'registration_date': date(2025, 9, 1),
        'parent_name': 'Abena Darko',
        'gender': 'Female',
        'nationality': 'Ghanaian',
        'religion': 'Christian',
        'address': '4 Market Road, Kumasi',
        'contact_number': '0244123456',
    }
    data.update(overrides)
    return StudentApplication.objects.create(**data)


def make_teacher_application(**overrides):
    data = {
        'name': 'Kojo Annan',
        'subject': 'English',
        'age': 41,
        'grade': 3,
        'teacher_code': 'T-500',
    }
    data.update(overrides)
    return TeacherApplication.objects.create(**data)


class ApplicationIdTests(TestCase):
    def test_ids_carry_kind_prefix(self):
        self.assertTrue(make_student_application().application_id.startswith('app-s-'))
        self.assertTrue(make_teacher_application().application_id.startswith('app-t-'))

    def test_generated_ids_are_distinct(self):
        ids = {generate_application_id('app-s-') for _ in range(20)}
        self.assertEqual(len(ids), 20)


class ApplicationReviewTests(TestCase):
    def setUp(self):
        self.reviewer = get_user_model().objects.create_user(username='office', password='pass12345', role='admin')

    def test_approving_student_application_creates_student_with_ledger(self):
        application = make_student_application()

        student = approve_student_application(application_id=application.pk, user=self.reviewer)

        application.refresh_from_db()
        self.assertEqual(application.status, StudentApplication.STATUS_APPROVED)
        self.assertEqual(application.created_student, student)
        self.assertEqual(application.decided_by, self.reviewer)
        self.assertIsNotNone(application.decided_at)
        self.assertEqual(student.student_code, 'S-500')
        self.assertEqual(student.church_name, 'N/A')
        payments = MonthlyPayment.objects.filter(student=student).order_by('month_index')
        self.assertEqual(payments.count(), 12)
        self.assertEqual(payments.first().month, 'September 2025')
        self.assertEqual(payments.first().amount, Decimal('100'))

    def test_approving_teacher_application_creates_teacher(self):
        application = make_teacher_application()

        teacher = approve_teacher_application(application_id=application.pk, user=self.reviewer)

        application.refresh_from_db()
        self.assertEqual(application.status, TeacherApplication.STATUS_APPROVED)
        self.assertEqual(application.created_teacher, teacher)
        self.assertEqual(teacher.subject, 'English')

    def test_duplicate_student_id_keeps_application_pending(self):
        Student.objects.create(
            name='Existing Child',
            grade=3,
            age=8,
            annual_fee=Decimal('900.00'),
            student_code='s-500',
            personal_id='X-1',
            date_of_birth=date(2017, 1, 1),
            parent_name='Yaa Mensah',
            gender='Male',
            nationality='Ghanaian',
            religion='Christian',
            address='1 Station Road',
            contact_number='0240000000',
        )
        application = make_student_application()

        with self.assertRaises(ValidationError):
            approve_student_application(application_id=application.pk, user=self.reviewer)

        application.refresh_from_db()
        self.assertTrue(application.is_pending)
        self.assertEqual(Student.objects.count(), 1)

    def test_duplicate_teacher_id_keeps_application_pending(self):
        Teacher.objects.create(name='Existing', subject='Art', age=50, grade=1, teacher_code='T-500')
        application = make_teacher_application()

        with self.assertRaises(ValidationError):
            approve_teacher_application(application_id=application.pk, user=self.reviewer)

        application.refresh_from_db()
        self.assertTrue(application.is_pending)

    def test_decided_application_cannot_be_approved_again(self):
        application = make_student_application()
        decline_application(model=StudentApplication, application_id=application.pk, user=self.reviewer)

        with self.assertRaises(ValidationError):
            approve_student_application(application_id=application.pk, user=self.reviewer)
        self.assertFalse(Student.objects.exists())

    def test_pending_count_ignores_decided_applications(self):
        make_student_application()
        declined = make_teacher_application()
        make_teacher_application(teacher_code='T-501')
        decline_application(model=TeacherApplication, application_id=declined.pk)

        self.assertEqual(pending_application_count(), 2)


class ApplicationViewTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        user_model.objects.create_user(username='office', password='pass12345', role='admin')
        user_model.objects.create_user(username='visitor', password='pass12345', role='guest')

    def test_public_student_form_creates_pending_application(self):
        response = self.client.post(reverse('apply', args=['student']), student_application_payload())

        self.assertEqual(response.status_code, 200)
        application = StudentApplication.objects.get()
        self.assertTrue(application.is_pending)
        self.assertContains(response, application.application_id)
        self.assertFalse(Student.objects.exists())

    def test_public_teacher_form_validates_input(self):
        response = self.client.post(reverse('apply', args=['teacher']), {
            'name': 'K',
            'subject': 'English',
            'age': '41',
            'grade': '3',
            'teacher_code': '',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('name', response.context['form'].errors)
        self.assertFalse(TeacherApplication.objects.exists())

    def test_unknown_application_kind_is_404(self):
        self.assertEqual(self.client.get(reverse('apply', args=['janitor'])).status_code, 404)

    def test_admin_approves_from_review_page(self):
        application = make_student_application()
        self.client.login(username='office', password='pass12345')

        self.assertContains(self.client.get(reverse('application_list')), application.application_id)
        response = self.client.post(reverse('application_approve', args=['student', application.pk]))

        self.assertRedirects(response, reverse('application_list'))
        self.assertTrue(Student.objects.filter(student_code='S-500').exists())

    def test_admin_declines_teacher_application(self):
        application = make_teacher_application()
        self.client.login(username='office', password='pass12345')

        response = self.client.post(reverse('application_decline', args=['teacher', application.pk]))

        self.assertRedirects(response, reverse('application_list'))
        application.refresh_from_db()
        self.assertEqual(application.status, TeacherApplication.STATUS_DECLINED)
        self.assertFalse(Teacher.objects.exists())

    def test_guest_cannot_review_applications(self):
        application = make_student_application()
        self.client.login(username='visitor', password='pass12345')

        self.assertEqual(self.client.get(reverse('application_list')).status_code, 403)
        response = self.client.post(reverse('application_approve', args=['student', application.pk]))
        self.assertEqual(response.status_code, 403)
        self.assertFalse(Student.objects.exists())
