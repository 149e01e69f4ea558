from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.core.admissions.services import pending_application_count
from apps.core.fees.ledger import SCHEDULE_LENGTH
from apps.core.fees.services import collection_summary
from apps.core.fees.views import resolve_month_index
from apps.core.students.models import Student
from apps.core.students.services import grade_distribution, new_enrollment_count
from apps.core.teachers.models import Teacher

from .audit import log_audit_event
from .decorators import role_required
from .forms import AccountSettingsForm
from .services import get_guest_user, update_account_settings


QUICK_LINKS = (
    {'label': 'Students', 'url_name': 'student_list', 'roles': {'admin', 'guest'}},
    {'label': 'Teachers', 'url_name': 'teacher_list', 'roles': {'admin', 'guest'}},
    {'label': 'Fee collection', 'url_name': 'collection_report', 'roles': {'admin', 'guest'}},
    {'label': 'Add student', 'url_name': 'student_create', 'roles': {'admin'}},
    {'label': 'Add teacher', 'url_name': 'teacher_create', 'roles': {'admin'}},
    {'label': 'Applications', 'url_name': 'application_list', 'roles': {'admin'}},
    {'label': 'Settings', 'url_name': 'account_settings', 'roles': {'admin'}},
)


@require_POST
def guest_login(request):
    try:
        user = get_guest_user()
    except ValidationError as exc:
        messages.error(request, ' '.join(exc.messages))
        return redirect('login')

    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    messages.info(request, 'You are browsing as a guest. Changes are disabled.')
    return redirect('dashboard')


@login_required
@role_required(['admin', 'guest'])
def dashboard(request):
    month_index = resolve_month_index(request)
    role = request.user.role

    return render(request, 'users/dashboard.html', {
        'student_count': Student.objects.count(),
        'teacher_count': Teacher.objects.count(),
        'new_enrollments': new_enrollment_count(),
        'pending_applications': pending_application_count() if request.user.is_admin else None,
        'stats': collection_summary(month_index=month_index),
        'month_index': month_index,
        'month_choices': range(SCHEDULE_LENGTH),
        'grade_rows': grade_distribution(),
        'quick_links': [link for link in QUICK_LINKS if role in link['roles']],
        'show_application_links': request.user.is_admin,
    })


@login_required
@role_required('admin')
def account_settings(request):
    if request.method == 'POST':
        form = AccountSettingsForm(request.POST)
        if form.is_valid():
            try:
                credentials_changed = update_account_settings(
                    user=request.user,
                    new_username=form.cleaned_data['new_username'],
                    profile_pic_url=form.cleaned_data['profile_pic_url'],
                    new_password=form.cleaned_data['new_password'],
                )
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='user.settings_updated',
                    target=request.user,
                    details=f"CredentialsChanged={credentials_changed}",
                )
                if credentials_changed:
                    logout(request)
                    messages.success(request, 'Account updated. Please sign in with your new credentials.')
                    return redirect('login')
                messages.success(request, 'Account settings saved.')
                return redirect('account_settings')
    else:
        form = AccountSettingsForm(initial={
            'new_username': request.user.username,
            'profile_pic_url': request.user.profile_pic_url,
        })

    return render(request, 'users/account_settings.html', {'form': form})
