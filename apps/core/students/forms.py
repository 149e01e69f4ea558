from django import forms
from django.core.exceptions import ValidationError

from .models import Student


STUDENT_DETAIL_FIELDS = [
    'name',
    'photo_url',
    'grade',
    'age',
    'payment_type',
    'annual_fee',
    'student_code',
    'personal_id',
    'date_of_birth',
    'registration_date',
    'years_of_enroll',
    'parent_name',
    'gender',
    'nationality',
    'religion',
    'can_transfer_certificate',
    'address',
    'contact_number',
    'church_name',
]

STUDENT_DETAIL_WIDGETS = {
    'date_of_birth': forms.DateInput(attrs={'type': 'date'}),
    'registration_date': forms.DateInput(attrs={'type': 'date'}),
    'address': forms.Textarea(attrs={'rows': 3}),
}


def _min_length(value, length, message):
    value = (value or '').strip()
    if len(value) < length:
        raise ValidationError(message)
    return value


class StudentDetailsFormMixin:
    """Field rules shared by the admin student form and the public application form."""

    def clean_name(self):
        return _min_length(self.cleaned_data.get('name'), 2, 'Name must be at least 2 characters.')

    def clean_parent_name(self):
        return _min_length(
            self.cleaned_data.get('parent_name'), 2, "Parent's name must be at least 2 characters."
        )

    def clean_nationality(self):
        return _min_length(
            self.cleaned_data.get('nationality'), 2, 'Nationality must be at least 2 characters.'
        )

    def clean_religion(self):
        return _min_length(self.cleaned_data.get('religion'), 2, 'Religion must be at least 2 characters.')

    def clean_address(self):
        return _min_length(self.cleaned_data.get('address'), 5, 'Address must be at least 5 characters.')

    def clean_contact_number(self):
        return _min_length(
            self.cleaned_data.get('contact_number'), 7, 'Contact number must be at least 7 digits.'
        )

    def clean_student_code(self):
        return _min_length(self.cleaned_data.get('student_code'), 1, 'Student ID is required.')

    def clean_church_name(self):
        return (self.cleaned_data.get('church_name') or '').strip() or 'N/A'

    def clean_annual_fee(self):
        annual_fee = self.cleaned_data.get('annual_fee')
        if annual_fee is not None and annual_fee < 0:
            raise ValidationError('Annual fee cannot be negative.')
        return annual_fee


class StudentForm(StudentDetailsFormMixin, forms.ModelForm):
    class Meta:
        model = Student
        fields = STUDENT_DETAIL_FIELDS
        widgets = STUDENT_DETAIL_WIDGETS
