from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from apps.core.fees.services import create_student_ledger, sync_student_ledger

from .models import Student

logger = logging.getLogger(__name__)


def search_students(query: str = ''):
    students = Student.objects.all()
    query = (query or '').strip()
    if query:
        students = students.filter(
            Q(name__icontains=query)
            | Q(student_code__icontains=query)
            | Q(personal_id__icontains=query)
            | Q(contact_number__icontains=query)
        )
    return students.order_by('name', 'id')


@transaction.atomic
def register_student(student: Student) -> Student:
    """Save a new student and open the fee ledger that belongs to it."""
    student.full_clean()
    student.save()
    create_student_ledger(student=student)
    logger.info('Registered student %s (%s)', student.student_code, student.pk)
    return student


@transaction.atomic
def update_student(student: Student) -> Student:
    student.full_clean()
    student.save()
    sync_student_ledger(student=student)
    logger.info('Updated student %s (%s)', student.student_code, student.pk)
    return student


@transaction.atomic
def delete_student(student: Student) -> None:
    student_code = student.student_code
    student.delete()
    logger.info('Deleted student %s with its fee ledger', student_code)


def new_enrollment_count(as_of=None, days: int | None = None) -> int:
    as_of = as_of or timezone.localdate()
    days = settings.NEW_ENROLLMENT_WINDOW_DAYS if days is None else days
    return Student.objects.filter(
        registration_date__gt=as_of - timedelta(days=days),
        registration_date__lte=as_of,
    ).count()


def grade_distribution():
    return list(
        Student.objects.values('grade')
        .annotate(total=Count('id'))
        .order_by('grade')
    )
