from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from apps.core.students.models import Student

from .ledger import SCHEDULE_LENGTH, STATUS_PAID, STATUS_UNPAID


class MonthlyPayment(models.Model):
    """One month of a student's payment schedule, stored as its own row."""

    STATUS_PAID = STATUS_PAID
    STATUS_UNPAID = STATUS_UNPAID
    STATUS_CHOICES = (
        (STATUS_PAID, 'Paid'),
        (STATUS_UNPAID, 'Unpaid'),
    )

    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='monthly_payments',
    )
    month_index = models.PositiveSmallIntegerField()
    month = models.CharField(max_length=40)
    amount = models.DecimalField(max_digits=14, decimal_places=4)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_UNPAID)
    paid_on = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['student_id', 'month_index']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'month_index'],
                name='unique_monthly_payment_per_student_month',
            ),
            models.CheckConstraint(
                condition=Q(month_index__lt=SCHEDULE_LENGTH),
                name='monthly_payment_index_in_year',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status=STATUS_PAID, paid_on__isnull=False)
                    | Q(status=STATUS_UNPAID, paid_on__isnull=True)
                ),
                name='monthly_payment_paid_on_matches_status',
            ),
        ]
        indexes = [
            models.Index(fields=['status'], name='monthly_payment_status_idx'),
        ]

    def clean(self):
        super().clean()
        if self.amount is not None and self.amount < 0:
            raise ValidationError({'amount': 'Amount must be zero or greater.'})
        if self.status == self.STATUS_UNPAID and self.paid_on:
            raise ValidationError({'paid_on': 'Unpaid months cannot carry a payment date.'})

    def __str__(self):
        return f"{self.student.student_code} - {self.month} ({self.status})"
