from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class TeacherDetails(models.Model):
    """Profile fields shared by faculty records and pending applications."""

    name = models.CharField(max_length=120)
    email = models.EmailField(blank=True)
    subject = models.CharField(max_length=120)
    hire_date = models.DateField(null=True, blank=True)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    grade = models.PositiveSmallIntegerField()
    teacher_code = models.CharField(max_length=50, verbose_name='Teacher ID')

    class Meta:
        abstract = True

    def clean(self):
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if self.teacher_code:
            self.teacher_code = self.teacher_code.strip()


class Teacher(TeacherDetails):
    teacher_code = models.CharField(max_length=50, unique=True, verbose_name='Teacher ID')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'id']
        indexes = [
            models.Index(fields=['subject'], name='teacher_subject_idx'),
        ]

    def clean(self):
        super().clean()
        duplicates = Teacher.objects.filter(teacher_code__iexact=self.teacher_code)
        if self.pk:
            duplicates = duplicates.exclude(pk=self.pk)
        if self.teacher_code and duplicates.exists():
            raise ValidationError({'teacher_code': f"A teacher with ID {self.teacher_code} already exists."})

    def __str__(self):
        return f"{self.teacher_code} - {self.name}"
