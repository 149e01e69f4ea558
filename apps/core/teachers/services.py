import logging

from django.db import transaction
from django.db.models import Q

from .models import Teacher

logger = logging.getLogger(__name__)


def search_teachers(query=''):
    teachers = Teacher.objects.all()
    query = (query or '').strip()
    if query:
        teachers = teachers.filter(
            Q(name__icontains=query)
            | Q(teacher_code__icontains=query)
            | Q(subject__icontains=query)
            | Q(email__icontains=query)
        )
    return teachers.order_by('name', 'id')


@transaction.atomic
def register_teacher(teacher: Teacher) -> Teacher:
    teacher.full_clean()
    teacher.save()
    logger.info('Registered teacher %s (%s)', teacher.teacher_code, teacher.pk)
    return teacher
