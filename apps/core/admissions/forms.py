from django import forms

from apps.core.students.forms import (
    STUDENT_DETAIL_FIELDS,
    STUDENT_DETAIL_WIDGETS,
    StudentDetailsFormMixin,
)
from apps.core.teachers.forms import (
    TEACHER_DETAIL_FIELDS,
    TEACHER_DETAIL_WIDGETS,
    TeacherDetailsFormMixin,
)

from .models import StudentApplication, TeacherApplication


class StudentApplicationForm(StudentDetailsFormMixin, forms.ModelForm):
    class Meta:
        model = StudentApplication
        fields = STUDENT_DETAIL_FIELDS
        widgets = STUDENT_DETAIL_WIDGETS


class TeacherApplicationForm(TeacherDetailsFormMixin, forms.ModelForm):
    class Meta:
        model = TeacherApplication
        fields = TEACHER_DETAIL_FIELDS
        widgets = TEACHER_DETAIL_WIDGETS
