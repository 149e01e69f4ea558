"""
Review of public student and teacher applications.

Approving an application turns it into a Student (with its fee ledger) or a
Teacher inside one transaction. The application row is kept with its final
status so the review history stays visible.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.students.forms import STUDENT_DETAIL_FIELDS
from apps.core.students.models import Student
from apps.core.students.services import register_student
from apps.core.teachers.forms import TEACHER_DETAIL_FIELDS
from apps.core.teachers.models import Teacher
from apps.core.teachers.services import register_teacher

from .models import StudentApplication, TeacherApplication

logger = logging.getLogger(__name__)


def pending_student_applications():
    return StudentApplication.objects.filter(status=StudentApplication.STATUS_PENDING)


def pending_teacher_applications():
    return TeacherApplication.objects.filter(status=TeacherApplication.STATUS_PENDING)


def pending_application_count():
    return pending_student_applications().count() + pending_teacher_applications().count()


@transaction.atomic
def submit_application(application):
    application.full_clean(exclude=['application_id'])
    application.save()
    logger.info('Received application %s from %s', application.application_id, application.name)
    return application


def _lock_pending(model, application_id):
    application = model.objects.select_for_update().filter(pk=application_id).first()
    if application is None:
        raise ValidationError('Application not found.')
    if not application.is_pending:
        raise ValidationError(f"Application {application.application_id} has already been {application.status}.")
    return application


def _mark_decided(application, *, status, user):
    application.status = status
    application.decided_at = timezone.now()
    application.decided_by = user


@transaction.atomic
def approve_student_application(*, application_id, user=None):
    application = _lock_pending(StudentApplication, application_id)

    if Student.objects.filter(student_code__iexact=application.student_code).exists():
        raise ValidationError(f"A student with ID {application.student_code} already exists.")

    student = register_student(
        Student(**{field: getattr(application, field) for field in STUDENT_DETAIL_FIELDS})
    )

    _mark_decided(application, status=StudentApplication.STATUS_APPROVED, user=user)
    application.created_student = student
    application.save(update_fields=['status', 'decided_at', 'decided_by', 'created_student'])
    logger.info('Approved student application %s as student %s', application.application_id, student.pk)
    return student


@transaction.atomic
def approve_teacher_application(*, application_id, user=None):
    application = _lock_pending(TeacherApplication, application_id)

    if Teacher.objects.filter(teacher_code__iexact=application.teacher_code).exists():
        raise ValidationError(f"A teacher with ID {application.teacher_code} already exists.")

    teacher = register_teacher(
        Teacher(**{field: getattr(application, field) for field in TEACHER_DETAIL_FIELDS})
    )

    _mark_decided(application, status=TeacherApplication.STATUS_APPROVED, user=user)
    application.created_teacher = teacher
    application.save(update_fields=['status', 'decided_at', 'decided_by', 'created_teacher'])
    logger.info('Approved teacher application %s as teacher %s', application.application_id, teacher.pk)
    return teacher


@transaction.atomic
def decline_application(*, model, application_id, user=None):
    application = _lock_pending(model, application_id)
    _mark_decided(application, status=model.STATUS_DECLINED, user=user)
    application.save(update_fields=['status', 'decided_at', 'decided_by'])
    logger.info('Declined application %s', application.application_id)
    return application
