import time

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string

from apps.core.students.models import Student, StudentDetails
from apps.core.teachers.models import Teacher, TeacherDetails


BASE36_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def _base36(number):
    digits = ''
    while True:
        number, remainder = divmod(number, 36)
        digits = BASE36_DIGITS[remainder] + digits
        if not number:
            return digits


def generate_application_id(prefix):
    """`app-s-` / `app-t-` followed by the base36 clock and five random characters."""
    stamp = _base36(int(time.time() * 1000))
    return f"{prefix}{stamp}{get_random_string(5, BASE36_DIGITS)}"


class ApplicationReview(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_DECLINED = 'declined'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_DECLINED, 'Declined'),
    )

    ID_PREFIX = 'app-'

    application_id = models.CharField(max_length=40, unique=True, editable=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    submitted_at = models.DateTimeField(default=timezone.now)
    decided_at = models.DateTimeField(null=True, blank=True)
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )

    class Meta:
        abstract = True

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    def save(self, *args, **kwargs):
        if not self.application_id:
            self.application_id = generate_application_id(self.ID_PREFIX)
        super().save(*args, **kwargs)


class StudentApplication(StudentDetails, ApplicationReview):
    ID_PREFIX = 'app-s-'

    created_student = models.ForeignKey(
        Student,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='applications',
    )

    class Meta:
        ordering = ['-submitted_at', '-id']
        indexes = [
            models.Index(fields=['status', 'submitted_at'], name='student_app_status_idx'),
        ]

    def __str__(self):
        return f"{self.application_id} - {self.name}"


class TeacherApplication(TeacherDetails, ApplicationReview):
    ID_PREFIX = 'app-t-'

    created_teacher = models.ForeignKey(
        Teacher,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='applications',
    )

    class Meta:
        ordering = ['-submitted_at', '-id']
        indexes = [
            models.Index(fields=['status', 'submitted_at'], name='teacher_app_status_idx'),
        ]

    def __str__(self):
        return f"{self.application_id} - {self.name}"
