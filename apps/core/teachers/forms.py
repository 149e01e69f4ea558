from django import forms
from django.core.exceptions import ValidationError

from .models import Teacher


TEACHER_DETAIL_FIELDS = ['name', 'email', 'subject', 'hire_date', 'age', 'grade', 'teacher_code']

TEACHER_DETAIL_WIDGETS = {
    'hire_date': forms.DateInput(attrs={'type': 'date'}),
}


class TeacherDetailsFormMixin:
    def clean_name(self):
        name = (self.cleaned_data.get('name') or '').strip()
        if len(name) < 2:
            raise ValidationError('Name must be at least 2 characters.')
        return name

    def clean_subject(self):
        subject = (self.cleaned_data.get('subject') or '').strip()
        if len(subject) < 2:
            raise ValidationError('Subject must be at least 2 characters.')
        return subject

    def clean_teacher_code(self):
        teacher_code = (self.cleaned_data.get('teacher_code') or '').strip()
        if not teacher_code:
            raise ValidationError('Teacher ID is required.')
        return teacher_code


class TeacherForm(TeacherDetailsFormMixin, forms.ModelForm):
    class Meta:
        model = Teacher
        fields = TEACHER_DETAIL_FIELDS
        widgets = TEACHER_DETAIL_WIDGETS
