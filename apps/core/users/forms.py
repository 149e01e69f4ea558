from django import forms
from django.core.exceptions import ValidationError


class AccountSettingsForm(forms.Form):
    new_username = forms.CharField(max_length=150)
    profile_pic_url = forms.URLField(required=False, max_length=500)
    new_password = forms.CharField(required=False, min_length=6, widget=forms.PasswordInput)
    confirm_new_password = forms.CharField(required=False, widget=forms.PasswordInput)

    def clean(self):
        cleaned = super().clean()
        new_password = cleaned.get('new_password')
        confirm = cleaned.get('confirm_new_password')
        if new_password and new_password != confirm:
            self.add_error('confirm_new_password', 'New passwords do not match.')
        return cleaned
