from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.utils import timezone

from apps.core.fees.ledger import PAYMENT_MONTHLY, PAYMENT_YEARLY


contact_number_validator = RegexValidator(
    regex=r'^\+?[0-9\s-]+$',
    message='Invalid contact number format.',
)


class StudentDetails(models.Model):
    """Profile fields shared by enrolled students and pending applications."""

    PAYMENT_MONTHLY = PAYMENT_MONTHLY
    PAYMENT_YEARLY = PAYMENT_YEARLY
    PAYMENT_TYPE_CHOICES = (
        (PAYMENT_MONTHLY, 'Monthly'),
        (PAYMENT_YEARLY, 'Yearly'),
    )

    GENDER_CHOICES = (
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    )

    name = models.CharField(max_length=120)
    photo_url = models.URLField(max_length=500, blank=True)
    grade = models.PositiveSmallIntegerField()
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])

    payment_type = models.CharField(max_length=10, choices=PAYMENT_TYPE_CHOICES, default=PAYMENT_MONTHLY)
    annual_fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text='Total fee for the year. Monthly plans split it into 12 equal payments.',
    )

    student_code = models.CharField(max_length=50, verbose_name='Student ID')
    personal_id = models.CharField(max_length=50)
    date_of_birth = models.DateField()
    registration_date = models.DateField(default=timezone.localdate)
    years_of_enroll = models.PositiveSmallIntegerField(default=0)

    parent_name = models.CharField(max_length=120)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    nationality = models.CharField(max_length=80)
    religion = models.CharField(max_length=80)
    can_transfer_certificate = models.BooleanField(default=False)
    address = models.TextField()
    contact_number = models.CharField(max_length=20, validators=[contact_number_validator])
    church_name = models.CharField(max_length=120, blank=True, default='N/A')

    class Meta:
        abstract = True

    def clean(self):
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if self.student_code:
            self.student_code = self.student_code.strip()
        if not (self.church_name or '').strip():
            self.church_name = 'N/A'
        if self.annual_fee is not None and self.annual_fee < 0:
            raise ValidationError({'annual_fee': 'Annual fee cannot be negative.'})


class Student(StudentDetails):
    student_code = models.CharField(max_length=50, unique=True, verbose_name='Student ID')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'id']
        indexes = [
            models.Index(fields=['payment_type'], name='student_payment_type_idx'),
            models.Index(fields=['registration_date'], name='student_registration_idx'),
            models.Index(fields=['grade'], name='student_grade_idx'),
        ]

    def clean(self):
        super().clean()
        duplicates = Student.objects.filter(student_code__iexact=self.student_code)
        if self.pk:
            duplicates = duplicates.exclude(pk=self.pk)
        if self.student_code and duplicates.exists():
            raise ValidationError({'student_code': f"A student with ID {self.student_code} already exists."})

    @property
    def is_monthly(self):
        return self.payment_type == self.PAYMENT_MONTHLY

    def __str__(self):
        return f"{self.student_code} - {self.name}"
