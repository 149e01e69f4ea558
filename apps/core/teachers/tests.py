from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from .forms import TeacherForm
from .models import Teacher
from .services import register_teacher, search_teachers


def teacher_data(**overrides):
    data = {
        'name': 'Grace Adjei',
        'email': 'grace@example.com',
        'subject': 'Mathematics',
        'age': 34,
        'grade': 5,
        'teacher_code': 'T-100',
    }
    data.update(overrides)
    return data


class TeacherFormTests(TestCase):
    def test_valid_without_optional_fields(self):
        form = TeacherForm(data=teacher_data(email='', hire_date=''))
        self.assertTrue(form.is_valid(), form.errors)

    def test_rejects_short_subject_and_blank_id(self):
        form = TeacherForm(data=teacher_data(subject='M', teacher_code='   '))
        self.assertFalse(form.is_valid())
        self.assertIn('subject', form.errors)
        self.assertIn('teacher_code', form.errors)

    def test_rejects_zero_age(self):
        form = TeacherForm(data=teacher_data(age=0))
        self.assertFalse(form.is_valid())
        self.assertIn('age', form.errors)


class TeacherServiceTests(TestCase):
    def test_teacher_id_is_unique_regardless_of_case(self):
        register_teacher(Teacher(**teacher_data()))
        with self.assertRaises(ValidationError) as ctx:
            register_teacher(Teacher(**teacher_data(name='Other Person', teacher_code='t-100')))
        self.assertIn('teacher_code', ctx.exception.message_dict)
        self.assertEqual(Teacher.objects.count(), 1)

    def test_search_covers_name_id_subject_and_email(self):
        grace = register_teacher(Teacher(**teacher_data()))
        kwame = register_teacher(Teacher(**teacher_data(
            name='Kwame Asante',
            email='kasante@school.test',
            subject='Science',
            teacher_code='T-200',
        )))

        self.assertEqual(list(search_teachers('grace')), [grace])
        self.assertEqual(list(search_teachers('t-200')), [kwame])
        self.assertEqual(list(search_teachers('MATH')), [grace])
        self.assertEqual(list(search_teachers('school.test')), [kwame])
        self.assertEqual(list(search_teachers()), [grace, kwame])


class TeacherViewTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        user_model.objects.create_user(username='office', password='pass12345', role='admin')
        user_model.objects.create_user(username='visitor', password='pass12345', role='guest')

    def test_admin_creates_updates_and_deletes_teacher(self):
        self.client.login(username='office', password='pass12345')

        response = self.client.post(reverse('teacher_create'), teacher_data())
        self.assertRedirects(response, reverse('teacher_list'))
        teacher = Teacher.objects.get(teacher_code='T-100')

        response = self.client.post(
            reverse('teacher_update', args=[teacher.pk]),
            teacher_data(subject='Physics'),
        )
        self.assertRedirects(response, reverse('teacher_detail', args=[teacher.pk]))
        teacher.refresh_from_db()
        self.assertEqual(teacher.subject, 'Physics')

        response = self.client.post(reverse('teacher_delete', args=[teacher.pk]))
        self.assertRedirects(response, reverse('teacher_list'))
        self.assertFalse(Teacher.objects.exists())

    def test_duplicate_teacher_id_is_rejected(self):
        register_teacher(Teacher(**teacher_data()))
        self.client.login(username='office', password='pass12345')

        response = self.client.post(reverse('teacher_create'), teacher_data(name='Someone Else'))

        self.assertEqual(response.status_code, 200)
        self.assertIn('teacher_code', response.context['form'].errors)
        self.assertEqual(Teacher.objects.count(), 1)

    def test_guest_is_read_only(self):
        teacher = register_teacher(Teacher(**teacher_data()))
        self.client.login(username='visitor', password='pass12345')

        self.assertEqual(self.client.get(reverse('teacher_list')).status_code, 200)
        self.assertEqual(self.client.get(reverse('teacher_detail', args=[teacher.pk])).status_code, 200)
        self.assertEqual(self.client.get(reverse('teacher_update', args=[teacher.pk])).status_code, 403)
