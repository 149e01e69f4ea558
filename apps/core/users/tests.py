from datetime import date
from decimal import Decimal

from django.contrib.auth import authenticate, get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from apps.core.admissions.models import TeacherApplication
from apps.core.students.models import Student
from apps.core.students.services import register_student

from .models import AuditLog


@override_settings(HOPE_ADMIN_USERNAME='admin', HOPE_ADMIN_PASSWORD='adminpassword')
class SettingsAdminBackendTests(TestCase):
    def test_configured_credentials_create_admin_account(self):
        user = authenticate(username='Admin', password='adminpassword')

        self.assertIsNotNone(user)
        self.assertTrue(user.is_admin)
        self.assertEqual(user.username, 'admin')
        self.assertEqual(get_user_model().objects.filter(role='admin').count(), 1)

    def test_wrong_password_is_rejected(self):
        self.assertIsNone(authenticate(username='admin', password='nope'))

    def test_login_page_signs_admin_in(self):
        response = self.client.post(reverse('login'), {'username': 'admin', 'password': 'adminpassword'})

        self.assertRedirects(response, reverse('dashboard'))
        self.assertTrue(AuditLog.objects.filter(action='user.login').exists())


class GuestLoginTests(TestCase):
    def test_guest_login_uses_shared_guest_account(self):
        response = self.client.post(reverse('guest_login'))

        self.assertRedirects(response, reverse('dashboard'))
        guest = get_user_model().objects.get(username='guest')
        self.assertTrue(guest.is_guest)
        self.assertFalse(guest.has_usable_password())

    def test_guest_login_requires_post(self):
        self.assertEqual(self.client.get(reverse('guest_login')).status_code, 405)

    def test_guest_profile_picture_is_cleared(self):
        guest = get_user_model().objects.create_user(username='visitor', role='guest')
        guest.profile_pic_url = 'https://example.com/me.png'
        guest.save()
        guest.refresh_from_db()
        self.assertEqual(guest.profile_pic_url, '')

    def test_guest_cannot_open_settings(self):
        self.client.post(reverse('guest_login'))
        self.assertEqual(self.client.get(reverse('account_settings')).status_code, 403)


class DashboardTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        user_model.objects.create_user(username='office', password='pass12345', role='admin')
        user_model.objects.create_user(username='visitor', password='pass12345', role='guest')
        register_student(Student(
            name='Ama Mensah',
            grade=4,
            age=9,
            payment_type='Yearly',
            annual_fee=Decimal('1500.00'),
            student_code='S-100',
            personal_id='P-100',
            date_of_birth=date(2016, 5, 1),
            parent_name='Kofi Mensah',
            gender='Female',
            nationality='Ghanaian',
            religion='Christian',
            address='12 Palm Street, Accra',
            contact_number='+233 555 0100',
        ))
        TeacherApplication.objects.create(name='Kojo Annan', subject='English', age=41, grade=3, teacher_code='T-1')

    def test_admin_dashboard(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.get(reverse('dashboard'), {'month': '5'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['student_count'], 1)
        self.assertEqual(response.context['new_enrollments'], 1)
        self.assertEqual(response.context['pending_applications'], 1)
        self.assertEqual(response.context['month_index'], 5)
        self.assertEqual(response.context['stats'].collected_fee, Decimal('1500.00'))
        self.assertEqual(response.context['grade_rows'], [{'grade': 4, 'total': 1}])
        self.assertTrue(response.context['show_application_links'])

    def test_guest_dashboard_hides_admin_links(self):
        self.client.login(username='visitor', password='pass12345')
        response = self.client.get(reverse('dashboard'))

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.context['pending_applications'])
        self.assertFalse(response.context['show_application_links'])
        labels = {link['label'] for link in response.context['quick_links']}
        self.assertIn('Students', labels)
        self.assertNotIn('Add student', labels)

    def test_out_of_range_month_falls_back_to_current(self):
        self.client.login(username='office', password='pass12345')
        response = self.client.get(reverse('dashboard'), {'month': '12'})
        self.assertIn(response.context['month_index'], range(12))


class AccountSettingsTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username='office', password='pass12345', role='admin')
        self.client.login(username='office', password='pass12345')

    def test_profile_picture_change_keeps_session(self):
        response = self.client.post(reverse('account_settings'), {
            'new_username': 'office',
            'profile_pic_url': 'https://example.com/office.png',
        })

        self.assertRedirects(response, reverse('account_settings'))
        self.user.refresh_from_db()
        self.assertEqual(self.user.profile_pic_url, 'https://example.com/office.png')

    def test_password_change_signs_user_out(self):
        response = self.client.post(reverse('account_settings'), {
            'new_username': 'headteacher',
            'new_password': 'secret99',
            'confirm_new_password': 'secret99',
        })

        self.assertRedirects(response, reverse('login'))
        self.user.refresh_from_db()
        self.assertEqual(self.user.username, 'headteacher')
        self.assertTrue(self.user.check_password('secret99'))
        self.assertEqual(self.client.get(reverse('dashboard')).status_code, 302)

    def test_mismatched_or_short_password_is_rejected(self):
        response = self.client.post(reverse('account_settings'), {
            'new_username': 'office',
            'new_password': 'abc',
            'confirm_new_password': 'abd',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('new_password', response.context['form'].errors)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('pass12345'))

    def test_taken_username_is_rejected(self):
        get_user_model().objects.create_user(username='guest', role='guest')
        response = self.client.post(reverse('account_settings'), {'new_username': 'Guest'})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].non_field_errors())
